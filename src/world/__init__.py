"""World data preprocessing: trip paths and geocoded cities."""

from .geocode import GeocodeError, NominatimClient, geocode_places, location_identifier
from .trips import build_trips, find_coordinates

__all__ = [
    "GeocodeError",
    "NominatimClient",
    "geocode_places",
    "location_identifier",
    "build_trips",
    "find_coordinates",
]
