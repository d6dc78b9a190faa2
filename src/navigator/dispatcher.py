"""
View dispatch.

Turns a view mode into highlight changes plus a goto_view. Every switch
first flushes the highlight state of the other modes, so at most one of
{selected country, highlighted location, visible trip} is ever shown.

Focus vs rotation: the focus of a country or trip is a geographic point
(lon, lat); the globe is centred on it by rotating to the focus with its
non-zero components negated.
"""

import logging
from typing import Callable, Dict, Optional, Sequence, Tuple, Type

import numpy as np
from shapely.geometry import shape

from common.config import NavigatorConfig
from common.io import WorldData

from .animator import ViewAnimator
from .clock import FrameClock
from .document import CITY, COUNTRY, HIGHLIGHT, ROUTE, SELECTED, MapDocument
from .polling import PollHandle, wait_for_element
from .state import CountryView, LocationView, NavigatorState, TripView, ViewMode, WorldView

logger = logging.getLogger(__name__)

Focus = Tuple[float, float]


def rotation_for(focus: Sequence[float]) -> Focus:
    """Rotation that centres `focus`; zero components stay zero."""
    return tuple(-v if v != 0 else v for v in focus)


def country_focus(feature: Dict, overrides: Dict[str, Focus]) -> Optional[Focus]:
    """
    Focus point of a country.

    Countries listed in `overrides` by name use the fixed point; large or
    wrapping shapes have a poor planar centroid. Otherwise the planar
    centroid of the geometry in degrees, or None if there is no geometry
    to take it from.
    """
    name = (feature.get("properties") or {}).get("name")
    if name in overrides:
        lon, lat = overrides[name]
        return (float(lon), float(lat))
    geometry = feature.get("geometry")
    if not geometry:
        return None
    centroid = shape(geometry).centroid
    if centroid.is_empty:
        return None
    return (float(centroid.x), float(centroid.y))


def trip_rotation(coordinates: Sequence[Sequence[float]]) -> Focus:
    """Negated mean of a trip path's positions (extra ordinates ignored)."""
    points = np.array([p[:2] for p in coordinates], dtype=np.float64)
    mean = points.mean(axis=0)
    return (float(-mean[0]), float(-mean[1]))


class ViewDispatcher:
    """
    Apply view modes to the document and projection.

    Args:
        state: Navigator state (mode, current coords)
        document: Map document holding highlight flags
        animator: Runs goto_view
        clock: Timer facility for element polling
        config: Navigator constants
        world: Returns the loaded world data, or None while loading
    """

    def __init__(
        self,
        state: NavigatorState,
        document: MapDocument,
        animator: ViewAnimator,
        clock: FrameClock,
        config: NavigatorConfig,
        world: Callable[[], Optional[WorldData]]
    ):
        self.state = state
        self.document = document
        self.animator = animator
        self.clock = clock
        self.config = config
        self.world = world
        self.polls = []

        self._views: Dict[Type, Callable] = {
            WorldView: lambda mode: self.view_all(),
            CountryView: lambda mode: self.view_country(mode.country_id),
            LocationView: lambda mode: self.view_location(mode.location_id, mode.coords),
            TripView: lambda mode: self.view_trip(mode.name),
        }
        self._redraws: Dict[Type, Callable] = {
            WorldView: lambda mode: None,
            CountryView: lambda mode: self.redraw_country(mode.country_id),
            LocationView: lambda mode: self.redraw_location(mode.location_id),
            TripView: lambda mode: self.redraw_trip(mode.name),
        }

    def apply(self, mode: ViewMode) -> None:
        """Switch to `mode`."""
        self._views[type(mode)](mode)

    def redraw(self, mode: Optional[ViewMode]) -> None:
        """Re-apply the highlight of `mode` once its element exists."""
        if mode is not None:
            self._redraws[type(mode)](mode)

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------

    def flush_countries(self) -> None:
        for element in self.document.select_class(COUNTRY):
            element.classed(SELECTED, False)

    def flush_locations(self) -> None:
        for element in self.document.select_class(CITY):
            element.classed(HIGHLIGHT, False)

    def flush_trips(self) -> None:
        for element in self.document.select_class(ROUTE):
            element.visible = False

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def view_all(self) -> None:
        self.flush_countries()
        self.flush_locations()
        self.flush_trips()
        self.state.mode = WorldView()
        self.state.set_coords(self.config.world_coords)
        self.animator.goto_view(self.state.current_coords)

    def view_country(self, country_id: str) -> None:
        self.flush_trips()
        self.flush_locations()
        for element in self.document.select_class(COUNTRY):
            element.classed(SELECTED, element.element_id == country_id)

        self.state.mode = CountryView(country_id)

        world = self.world()
        feature = world.find_country(country_id) if world is not None else None
        if feature is None:
            logger.warning(f"Country '{country_id}' not found, view unchanged")
            return

        focus = country_focus(feature, self.config.country_overrides)
        if focus is None:
            logger.warning(f"Country '{country_id}' has no geometry, view unchanged")
            return

        coords = rotation_for(focus)
        self.state.set_coords(coords)
        self.animator.goto_view(coords)

    def view_location(self, location_id: str, coords: Sequence[float]) -> None:
        self.flush_countries()
        self.flush_trips()
        self._show_location(location_id, coords)
        self.state.mode = LocationView(location_id, tuple(coords))
        if len(coords) == 2:
            self.state.set_coords(coords)

    def show_location(self, location_id: str, coords: Sequence[float]) -> None:
        """Preview a location without changing the view mode."""
        self.flush_countries()
        self.flush_trips()
        self._show_location(location_id, coords)

    def _show_location(self, location_id: str, coords: Sequence[float]) -> None:
        self.flush_locations()
        if location_id:
            element = self.document.get(location_id)
            if element is None:
                logger.warning(f"Location '{location_id}' not on the map")
            else:
                element.classed(HIGHLIGHT, True)
                self.document.move_up(location_id)
        if len(coords) == 2:
            self.animator.goto_view(coords)

    def view_trip(self, name: str) -> None:
        self.flush_countries()
        self.flush_locations()
        found = False
        for element in self.document.select_class(ROUTE):
            element.visible = element.name == name
            found = found or element.visible

        self.state.mode = TripView(name)

        world = self.world()
        trip = world.find_trip(name) if world is not None else None
        if trip is None:
            logger.warning(f"Trip '{name}' not found, view unchanged")
            return
        if not found:
            logger.debug(f"Trip '{name}' has no route element yet")

        positions = (trip.get("geometry") or {}).get("coordinates") or []
        if not positions:
            logger.warning(f"Trip '{name}' has no path coordinates")
            return

        coords = trip_rotation(positions)
        self.state.set_coords(coords)
        self.animator.goto_view(coords)

    # ------------------------------------------------------------------
    # Redraw after the map data arrives
    # ------------------------------------------------------------------

    def wait_for(self, element_id: str, callback: Callable[[], None]) -> PollHandle:
        """Poll until `element_id` exists, then run callback."""
        handle = wait_for_element(
            self.clock, self.document, element_id, callback,
            interval_ms=self.config.poll_interval_ms,
        )
        self.polls = [p for p in self.polls if p.active] + [handle]
        return handle

    def redraw_country(self, country_id: str) -> PollHandle:
        def apply() -> None:
            for element in self.document.select_class(COUNTRY):
                if element.element_id == country_id:
                    element.classed(SELECTED, True)
        return self.wait_for(country_id, apply)

    def redraw_location(self, location_id: str) -> PollHandle:
        def apply() -> None:
            element = self.document.get(location_id)
            if element is not None:
                element.classed(HIGHLIGHT, True)
                self.document.move_up(location_id)
        return self.wait_for(location_id, apply)

    def redraw_trip(self, name: str) -> PollHandle:
        def apply() -> None:
            for element in self.document.select_class(ROUTE):
                if element.name == name:
                    element.visible = True
        return self.wait_for(name, apply)

    def cancel_polls(self) -> None:
        for handle in self.polls:
            handle.cancel()
        self.polls = []
