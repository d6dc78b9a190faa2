"""
Host-application interface.

Inbound: one command type per message the host can send. Outbound: the
near-bottom scroll signal used by the host for lazy loading.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from .state import ViewMode, view_from_code


@dataclass(frozen=True)
class InitMap:
    """First draw of the map, then switch to `mode`."""
    mode: ViewMode

    @classmethod
    def from_host(cls, code: int, *payload) -> "InitMap":
        """Build from the host's (code, payload...) message."""
        return cls(view_from_code(code, *payload))


@dataclass(frozen=True)
class DrawMap:
    """Redraw the map (e.g. after the host re-rendered its container)."""


@dataclass(frozen=True)
class ViewAll:
    pass


@dataclass(frozen=True)
class ViewCountry:
    country_id: str


@dataclass(frozen=True)
class ViewLocation:
    location_id: str
    coords: Tuple[float, ...] = ()


@dataclass(frozen=True)
class ShowLocation:
    location_id: str
    coords: Tuple[float, ...] = ()


@dataclass(frozen=True)
class ViewTrip:
    name: str


Command = Union[InitMap, DrawMap, ViewAll, ViewCountry, ViewLocation, ShowLocation, ViewTrip]


def near_bottom(
    inner_height: float,
    page_y_offset: float,
    body_height: float,
    threshold: float = 500.0
) -> bool:
    """True when the viewport bottom is within `threshold` px of the page end."""
    return inner_height + page_y_offset + threshold >= body_height
