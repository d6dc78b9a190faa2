"""
Sphere Navigator.

`Globe` wires the pieces together: projection state, map document, clock,
renderer, gesture handler, animator and view dispatcher. The host talks to
it only through `handle(command)`, pointer/scroll input, and the
near-bottom subscription.

Typical use:

    globe = Globe(config.navigator, world_loader=lambda: load_world(path))
    globe.handle(InitMap(CountryView("FRA")))
    globe.clock.advance(3000)
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Type

from common.config import NavigatorConfig
from common.io import WorldData
from geo.path import Renderer, SvgPathRenderer, graticule

from .animator import ViewAnimator
from .clock import FrameClock, Transition
from .dispatcher import ViewDispatcher
from .document import (
    CITY, COUNTRY, FOREGROUND, GRATICULE, OCEAN, ROUTE, MapDocument, MapElement,
)
from .gesture import ZoomGesture
from .ports import (
    Command, DrawMap, InitMap, ShowLocation, ViewAll, ViewCountry, ViewLocation, ViewTrip,
    near_bottom,
)
from .state import CountryView, LocationView, NavigatorState, TripView, ViewMode

logger = logging.getLogger(__name__)


def city_element_id(name: str) -> str:
    """Element id for a city: its name with spaces as underscores."""
    return name.replace(" ", "_")


class Globe:
    """
    Interactive globe bound to host commands.

    Args:
        config: Navigator constants
        world_loader: Loads the world data; called once, on first draw
        renderer: Path renderer (SVG by default)
        clock: Timer/animation facility (a fresh virtual clock by default)
    """

    def __init__(
        self,
        config: Optional[NavigatorConfig] = None,
        world_loader: Optional[Callable[[], WorldData]] = None,
        renderer: Optional[Renderer] = None,
        clock: Optional[FrameClock] = None
    ):
        self.config = config or NavigatorConfig()
        self.clock = clock or FrameClock(self.config.frame_interval_ms)
        self.state = NavigatorState.from_config(self.config)
        self.document = MapDocument()
        self.renderer = renderer or SvgPathRenderer()
        self.world: Optional[WorldData] = None
        self._world_loader = world_loader
        self._near_bottom_listeners: List[Callable[[bool], None]] = []

        self.animator = ViewAnimator(
            self.state, self.clock, self.document, self.renderer, self.config
        )
        self.dispatcher = ViewDispatcher(
            self.state, self.document, self.animator, self.clock, self.config,
            world=lambda: self.world,
        )

        self.gesture = ZoomGesture(self.state.projection, self.config.scale_extent)
        # Grabbing the globe stops any view animation in flight
        self.gesture.on("zoomstart", lambda event: self.clock.interrupt())
        self.gesture.on("zoom", lambda event: self.animator.redraw())

        self._handlers: Dict[Type, Callable] = {
            InitMap: lambda c: self.init_map(c.mode),
            DrawMap: lambda c: self.redraw_map(),
            ViewAll: lambda c: self.dispatcher.view_all(),
            ViewCountry: lambda c: self.dispatcher.view_country(c.country_id),
            ViewLocation: lambda c: self.dispatcher.view_location(c.location_id, c.coords),
            ShowLocation: lambda c: self.dispatcher.show_location(c.location_id, c.coords),
            ViewTrip: lambda c: self.dispatcher.view_trip(c.name),
        }

    @property
    def projection(self):
        return self.state.projection

    def handle(self, command: Command) -> None:
        """Dispatch one host command."""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown command: {command!r}")
        logger.debug(f"Command {command}")
        handler(command)

    def goto_view(self, coords: Sequence[float]) -> Transition:
        return self.animator.goto_view(coords)

    # ------------------------------------------------------------------
    # Map drawing
    # ------------------------------------------------------------------

    def load_world(self) -> Optional[WorldData]:
        """Load world data once; later calls return the cached copy."""
        if self.world is None and self._world_loader is not None:
            try:
                self.world = self._world_loader()
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load world data: {e}")
                return None
        return self.world

    def draw_map(self, callback: Optional[Callable[[], None]] = None) -> None:
        """
        Rebuild the map document.

        The graticule and sphere outline are drawn immediately; world
        features arrive asynchronously. `callback` runs before they do.
        """
        self.document.clear()
        self.document.append(MapElement(None, GRATICULE, graticule()))
        self.document.append(MapElement(None, FOREGROUND, {"type": "Sphere"}))
        self.animator.redraw()

        self.clock.call_later(0, self._insert_world)

        if callback is not None:
            callback()

    def _insert_world(self) -> None:
        world = self.load_world()
        if world is None:
            logger.warning("No world data, map shows graticule only")
            return

        doc = self.document
        doc.insert_before(MapElement(None, OCEAN, {"type": "Sphere"}), GRATICULE)
        for country in world.countries:
            if (country.get("geometry") or {}).get("type") == "Point":
                continue
            doc.insert_before(MapElement(country.get("id"), COUNTRY, country), FOREGROUND)
        for trip in world.trips:
            name = trip.get("properties", {}).get("name")
            doc.insert_before(MapElement(name, ROUTE, trip, visible=False), FOREGROUND)
        for city in world.cities:
            name = city.get("properties", {}).get("name", "")
            doc.insert_before(MapElement(city_element_id(name), CITY, city), FOREGROUND)

        logger.info(f"Map populated with {world.n_features} features")
        self.animator.redraw()

    def _after_frames(self, callback: Callable[[], None], frames: int = 2) -> None:
        """Run callback once the host has laid out the map container."""
        if frames <= 0:
            callback()
            return
        self.clock.request_animation_frame(lambda: self._after_frames(callback, frames - 1))

    def init_map(self, mode: ViewMode) -> None:
        """Draw the map for the first time and enter `mode`."""
        self.state.mode = mode
        dispatcher = self.dispatcher

        def start() -> None:
            if isinstance(mode, CountryView):
                # Small countries are inserted late; wait on a large one
                self.draw_map(lambda: dispatcher.wait_for(
                    self.config.country_wait_target,
                    lambda: dispatcher.view_country(mode.country_id),
                ))
            elif isinstance(mode, LocationView):
                self.draw_map(lambda: dispatcher.wait_for(
                    mode.location_id,
                    lambda: dispatcher.view_location(mode.location_id, mode.coords),
                ))
            elif isinstance(mode, TripView):
                self.draw_map(lambda: dispatcher.wait_for(
                    mode.name,
                    lambda: dispatcher.view_trip(mode.name),
                ))
            else:
                self.draw_map()

        self._after_frames(start)

    def redraw_map(self) -> None:
        """Redraw at the current view, restoring the active highlight."""
        def start() -> None:
            if self.state.mode is not None:
                self.projection.rotate(self.state.current_coords)
                self.projection.scale = self.config.fit_scale
            self.draw_map(lambda: self.dispatcher.redraw(self.state.mode))

        self._after_frames(start)

    # ------------------------------------------------------------------
    # Pointer and scroll input
    # ------------------------------------------------------------------

    def pointer_down(self, position: Sequence[float]) -> None:
        self.gesture.pointer_down(position)

    def pointer_move(self, position: Sequence[float]) -> bool:
        return self.gesture.pointer_move(position)

    def pointer_up(self) -> None:
        self.gesture.pointer_up()

    def wheel(self, delta: float) -> float:
        return self.gesture.wheel(delta)

    def double_click(self) -> Transition:
        """Return to the reset orientation."""
        return self.animator.goto_view(self.config.reset_coords)

    def subscribe_near_bottom(self, callback: Callable[[bool], None]) -> None:
        self._near_bottom_listeners.append(callback)

    def on_scroll(self, inner_height: float, page_y_offset: float, body_height: float) -> bool:
        """Signal the host when the page is scrolled close to its end."""
        if not near_bottom(inner_height, page_y_offset, body_height, self.config.near_bottom_px):
            return False
        for callback in self._near_bottom_listeners:
            callback(True)
        return True

    def close(self) -> None:
        """Stop pending element polls and animations."""
        self.dispatcher.cancel_polls()
        self.clock.interrupt()
