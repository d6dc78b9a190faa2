"""
Data I/O utilities.

Handles loading the world topology and the raw trip/city JSON, and saving
GeoJSON output. Coordinates are always (longitude, latitude) in degrees.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from geo.topology import features

logger = logging.getLogger(__name__)

WORLD_OBJECTS = ("countries", "cities", "trips")


@dataclass
class WorldData:
    """
    Decoded world geometry.

    Read-only for the navigator: it only queries ids, names, centroids and
    path coordinates.
    """
    countries: List[Dict[str, Any]] = field(default_factory=list)
    cities: List[Dict[str, Any]] = field(default_factory=list)
    trips: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def n_features(self) -> int:
        return len(self.countries) + len(self.cities) + len(self.trips)

    def find_country(self, country_id: str) -> Optional[Dict[str, Any]]:
        for country in self.countries:
            if country.get("id") == country_id:
                return country
        return None

    def find_trip(self, name: str) -> Optional[Dict[str, Any]]:
        for trip in self.trips:
            if trip.get("properties", {}).get("name") == name:
                return trip
        return None

    @classmethod
    def from_topology(cls, topology: Dict[str, Any]) -> "WorldData":
        """Decode the three named objects of a world topology."""
        objects = topology.get("objects", {})
        decoded = {
            name: features(topology, name) if name in objects else []
            for name in WORLD_OBJECTS
        }
        for name in WORLD_OBJECTS:
            if name not in objects:
                logger.warning(f"World topology has no '{name}' object")
        return cls(**decoded)


def load_json(path: Path) -> Any:
    """Load a JSON document."""
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    logger.debug(f"Loaded {path}")
    return data


def load_world(path: Path) -> WorldData:
    """
    Load and decode the world topology.

    Args:
        path: Path to world.json (topology with countries, cities, trips)

    Returns:
        WorldData with GeoJSON features
    """
    world = WorldData.from_topology(load_json(path))
    logger.info(
        f"Loaded world from {path}: {len(world.countries)} countries, "
        f"{len(world.cities)} cities, {len(world.trips)} trips"
    )
    return world


def save_geojson(collection: Dict[str, Any], path: Path) -> None:
    """
    Save a FeatureCollection.

    Args:
        collection: GeoJSON FeatureCollection
        path: Output path (parents created as needed)
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(collection, f)
    logger.info(f"Saved {len(collection.get('features', []))} features: {path}")
