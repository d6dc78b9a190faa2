"""
Trip path building.

Joins the trip list (trip name -> ordered city names) with the cities
FeatureCollection to produce one LineString feature per trip.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


def find_coordinates(cities: Dict[str, Any], place: str) -> Optional[List[float]]:
    """
    Coordinates of the first city feature named `place`.

    Returns:
        [lon, lat], or None (with a warning) if the city is unknown
    """
    for city in cities.get("features", []):
        if city.get("properties", {}).get("name") == place:
            return list(city["geometry"]["coordinates"])
    logger.warning(f"'{place}' not found.")
    return None


def trip_cities(trip_data: Dict[str, Any], name: str) -> Optional[List[str]]:
    """City names of trip `name`, or None if there is no such trip."""
    for trip in trip_data.get("trips", []):
        if trip.get("name") == name:
            return list(trip.get("cities", []))
    return None


def trip_feature(name: str, coordinates: Sequence[Sequence[float]]) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "properties": {"name": name},
        "geometry": {
            "type": "LineString",
            "coordinates": [list(c) for c in coordinates],
        },
    }


def build_trips(trip_data: Dict[str, Any], cities: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the trips FeatureCollection.

    Cities missing from `cities` are skipped; a trip keeps its remaining
    positions in order.

    Args:
        trip_data: {"trips": [{"name": ..., "cities": [...]}, ...]}
        cities: FeatureCollection of Point features with properties.name

    Returns:
        FeatureCollection of LineString features named after the trips
    """
    features = []
    for trip in trip_data.get("trips", []):
        name = trip["name"]
        coordinates = []
        for place in trip_cities(trip_data, name) or []:
            coords = find_coordinates(cities, place)
            if coords is not None:
                coordinates.append(coords)

        if len(coordinates) < 2:
            logger.warning(f"Trip '{name}' has {len(coordinates)} known cities")
        features.append(trip_feature(name, coordinates))

    logger.info(f"Built {len(features)} trips")
    return {"type": "FeatureCollection", "features": features}
