"""
Tests for world data preprocessing and loading.
"""

import json
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from common.io import WorldData, load_world, save_geojson
from world.geocode import (
    GeocodeError, NominatimClient, find_new_places, geocode_places, location_identifier,
)
from world.trips import build_trips, find_coordinates, trip_cities


# ============== Fixtures ==============

@pytest.fixture
def cities():
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"name": "Paris"},
             "geometry": {"type": "Point", "coordinates": [2.35, 48.85]}},
            {"type": "Feature", "properties": {"name": "Rome"},
             "geometry": {"type": "Point", "coordinates": [12.5, 41.9]}},
            {"type": "Feature", "properties": {"name": "Hong Kong"},
             "geometry": {"type": "Point", "coordinates": [114.2, 22.3]}},
        ],
    }


@pytest.fixture
def trip_data():
    return {
        "trips": [
            {"name": "Grand Tour", "cities": ["Paris", "Rome"]},
            {"name": "Lost", "cities": ["Paris", "Atlantis", "Rome"]},
        ]
    }


class FakeClient:
    def __init__(self, results):
        self.results = results
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        if query not in self.results:
            raise GeocodeError(f"Search for {query} did not find coordinates")
        return self.results[query]


# ============== Trip Building Tests ==============

class TestBuildTrips:
    """Tests for trip path building."""

    def test_find_coordinates(self, cities):
        assert find_coordinates(cities, "Rome") == [12.5, 41.9]

    def test_find_missing_city(self, cities, caplog):
        with caplog.at_level(logging.WARNING):
            assert find_coordinates(cities, "Atlantis") is None
        assert "'Atlantis' not found." in caplog.text

    def test_trip_cities(self, trip_data):
        assert trip_cities(trip_data, "Grand Tour") == ["Paris", "Rome"]
        assert trip_cities(trip_data, "Nope") is None

    def test_build(self, trip_data, cities):
        trips = build_trips(trip_data, cities)
        assert trips["type"] == "FeatureCollection"
        tour = trips["features"][0]
        assert tour["properties"] == {"name": "Grand Tour"}
        assert tour["geometry"] == {
            "type": "LineString",
            "coordinates": [[2.35, 48.85], [12.5, 41.9]],
        }

    def test_missing_city_skipped(self, trip_data, cities):
        lost = build_trips(trip_data, cities)["features"][1]
        assert lost["geometry"]["coordinates"] == [[2.35, 48.85], [12.5, 41.9]]

    def test_save(self, trip_data, cities, tmp_path):
        out = tmp_path / "world" / "trips.json"
        save_geojson(build_trips(trip_data, cities), out)
        with open(out) as f:
            assert len(json.load(f)["features"]) == 2


# ============== Geocoding Tests ==============

class TestLocationIdentifier:

    @pytest.mark.parametrize("name,expected", [
        ("New York", "NewYork"),
        ("Rio_de_Janeiro", "RiodeJaneiro"),
        ("Singapore", "SingaporeCity"),
        ("Hong Kong", "HongKongCity"),
        ("Paris", "Paris"),
    ])
    def test_identifier(self, name, expected):
        assert location_identifier(name) == expected


class TestNominatimClient:
    """Tests for NominatimClient with a mocked session."""

    @pytest.fixture
    def client(self):
        client = NominatimClient("odyssey-test/1.0")
        client.session = MagicMock()
        return client

    def test_user_agent(self):
        client = NominatimClient("odyssey-test/1.0")
        assert client.session.headers["User-Agent"] == "odyssey-test/1.0"

    def test_search(self, client):
        client.session.get.return_value.json.return_value = [{"lon": "4.83", "lat": "45.76"}]
        assert client.search("Lyon, France") == (4.83, 45.76)
        args, kwargs = client.session.get.call_args
        assert args[0] == "https://nominatim.openstreetmap.org/search"
        assert kwargs["params"] == {"format": "jsonv2", "q": "Lyon, France", "limit": 1}

    def test_no_results(self, client):
        client.session.get.return_value.json.return_value = []
        with pytest.raises(GeocodeError):
            client.search("Atlantis")

    def test_http_error(self, client):
        client.session.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(GeocodeError):
            client.search("Lyon, France")


class TestGeocodePlaces:
    """Tests for finding and geocoding new places."""

    def test_find_new_places(self, cities):
        places = {
            "China": {"Hong_Kong": None, "Beijing": "北京", "Local": None},
            "France": {"Paris": None},
        }
        assert find_new_places(cities, places) == [("China", "Beijing", "北京")]

    def test_geocode(self, cities):
        client = FakeClient({"Lyon, France": (4.83, 45.76)})
        updated, failed = geocode_places(
            client, cities, {"France": {"Paris": None, "Lyon": None}},
            country_codes={"France": "FRA"}, delay=0,
        )
        assert failed == []
        assert client.queries == ["Lyon, France"]
        lyon = updated["features"][-1]
        assert lyon["properties"] == {"name": "Lyon", "country": "FRA"}
        assert lyon["geometry"] == {"type": "Point", "coordinates": [4.83, 45.76]}
        assert len(cities["features"]) == 3

    def test_failures_reported(self, cities):
        client = FakeClient({})
        updated, failed = geocode_places(client, cities, {"Atlantis": {"Poseidonia": None}}, delay=0)
        assert failed == ["Poseidonia"]
        assert len(updated["features"]) == 3


# ============== World Loading Tests ==============

class TestWorldData:
    """Tests for loading the world topology."""

    @pytest.fixture
    def world_file(self, tmp_path):
        topology = {
            "type": "Topology",
            "arcs": [[[0, 40], [10, 40], [10, 50], [0, 50], [0, 40]], [[2, 48], [12, 42]]],
            "objects": {
                "countries": {"type": "GeometryCollection", "geometries": [
                    {"type": "Polygon", "id": "FRA", "properties": {"name": "France"}, "arcs": [[0]]},
                ]},
                "cities": {"type": "GeometryCollection", "geometries": [
                    {"type": "Point", "properties": {"name": "Paris"}, "coordinates": [2, 48]},
                ]},
                "trips": {"type": "GeometryCollection", "geometries": [
                    {"type": "LineString", "properties": {"name": "Grand Tour"}, "arcs": [1]},
                ]},
            },
        }
        path = tmp_path / "world.json"
        path.write_text(json.dumps(topology))
        return path

    def test_load_world(self, world_file):
        world = load_world(world_file)
        assert world.n_features == 3
        assert world.find_country("FRA")["properties"]["name"] == "France"
        assert world.find_trip("Grand Tour")["geometry"]["coordinates"] == [[2, 48], [12, 42]]
        assert world.find_country("XXX") is None

    def test_missing_object_warns(self, caplog):
        topology = {"type": "Topology", "arcs": [], "objects": {}}
        with caplog.at_level(logging.WARNING):
            world = WorldData.from_topology(topology)
        assert world.n_features == 0
        assert "'trips'" in caplog.text
