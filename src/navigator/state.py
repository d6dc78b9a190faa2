"""
Navigator state and view modes.

A view mode is one of four variants, each carrying only what is needed to
refocus the globe. Exactly one is active once the map is initialised.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from common.config import NavigatorConfig
from geo.projection import OrthographicProjection

Coords = Tuple[float, ...]


@dataclass(frozen=True)
class WorldView:
    """Whole globe at the default orientation."""
    code = 1


@dataclass(frozen=True)
class CountryView:
    country_id: str
    code = 2


@dataclass(frozen=True)
class LocationView:
    location_id: str
    coords: Coords = ()
    code = 3


@dataclass(frozen=True)
class TripView:
    name: str
    code = 4


ViewMode = Union[WorldView, CountryView, LocationView, TripView]


def view_from_code(code: int, *payload) -> ViewMode:
    """
    Build a view mode from the host's numeric form.

    1 = world, 2 = (country_id), 3 = (location_id, coords), 4 = (trip name).
    Unknown codes fall back to the world view.
    """
    if code == CountryView.code:
        return CountryView(payload[0])
    if code == LocationView.code:
        coords = tuple(payload[1]) if len(payload) > 1 else ()
        return LocationView(payload[0], coords)
    if code == TripView.code:
        return TripView(payload[0])
    return WorldView()


def make_projection(config: NavigatorConfig) -> OrthographicProjection:
    """The globe's projection at its initial orientation."""
    return OrthographicProjection(
        rotation=tuple(config.initial_rotation),
        scale=config.fit_scale,
        translate=config.translate,
        clip_angle=config.clip_angle,
    )


@dataclass
class NavigatorState:
    """
    Everything the navigator mutates, owned explicitly.

    mode is None until the host initialises the map.
    """
    projection: OrthographicProjection
    current_coords: Coords = (-30.0, -40.0)
    mode: Optional[ViewMode] = None

    @classmethod
    def from_config(cls, config: NavigatorConfig) -> "NavigatorState":
        return cls(
            projection=make_projection(config),
            current_coords=tuple(config.world_coords),
        )

    def set_coords(self, coords: Sequence[float]) -> None:
        self.current_coords = tuple(float(c) for c in coords)
