"""
Shared fixtures: a tiny world and a renderer that records redraws.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from common.config import NavigatorConfig
from common.io import WorldData
from navigator.globe import Globe


def square(lon0, lat0, size):
    return {
        "type": "Polygon",
        "coordinates": [[
            [lon0, lat0], [lon0 + size, lat0], [lon0 + size, lat0 + size],
            [lon0, lat0 + size], [lon0, lat0],
        ]],
    }


class RecordingRenderer:
    """Counts redraws and remembers the rotation each time."""

    def __init__(self):
        self.rotations = []

    @property
    def n_redraws(self):
        return len(self.rotations)

    def redraw(self, paths, projection):
        list(paths)
        self.rotations.append(projection.rotation)


@pytest.fixture
def world():
    countries = [
        {"type": "Feature", "id": "FRA", "properties": {"name": "France"},
         "geometry": square(0, 40, 10)},
        {"type": "Feature", "id": "RUS", "properties": {"name": "Russia"},
         "geometry": square(30, 45, 140)},
        {"type": "Feature", "id": "AUS", "properties": {"name": "Australia"},
         "geometry": square(115, -40, 35)},
        {"type": "Feature", "id": "MCO", "properties": {"name": "Monaco"},
         "geometry": {"type": "Point", "coordinates": [7.4, 43.7]}},
    ]
    cities = [
        {"type": "Feature", "properties": {"name": "Paris"},
         "geometry": {"type": "Point", "coordinates": [2.35, 48.85]}},
        {"type": "Feature", "properties": {"name": "New York"},
         "geometry": {"type": "Point", "coordinates": [-74.0, 40.7]}},
    ]
    trips = [
        {"type": "Feature", "properties": {"name": "Grand Tour"},
         "geometry": {"type": "LineString", "coordinates": [[10, 20], [30, 40]]}},
        {"type": "Feature", "properties": {"name": "Atlantic"},
         "geometry": {"type": "LineString", "coordinates": [[2.35, 48.85], [-74.0, 40.7]]}},
    ]
    return WorldData(countries=countries, cities=cities, trips=trips)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def globe(world, renderer):
    """Globe with the world already drawn."""
    g = Globe(NavigatorConfig(), world_loader=lambda: world, renderer=renderer)
    g.draw_map()
    g.clock.advance(0)
    return g
