"""
Geocoding of new places via Nominatim.

Places are listed per country:

    places:
      France:
        Paris: null
        Lyon: null
      Japan:
        Kyoto: 京都

(the value is an optional local name). Places already present in the cities
FeatureCollection are skipped; only new ones hit the service, one request
per `delay` seconds.
"""

import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests
from tqdm import tqdm

logger = logging.getLogger(__name__)

LOCAL = "Local"
CITY_SUFFIXED = ("Singapore", "HongKong")


class GeocodeError(Exception):
    """A place could not be resolved to coordinates."""


def location_identifier(name: str) -> str:
    """Normalised place identifier: no spaces or underscores; city-states get 'City'."""
    identifier = name.replace(" ", "").replace("_", "")
    if identifier in CITY_SUFFIXED:
        identifier += "City"
    return identifier


class NominatimClient:
    """Client for the OpenStreetMap Nominatim search API."""

    BASE_URL = "https://nominatim.openstreetmap.org"

    def __init__(self, user_agent: str, base_url: Optional[str] = None, timeout: float = 30.0):
        """
        Initialize Nominatim client.

        Args:
            user_agent: Identifies the application (required by the usage policy)
            base_url: Service root (public instance by default)
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def search(self, query: str) -> Tuple[float, float]:
        """
        Look up one place.

        Args:
            query: Free-form query, e.g. "Lyon, France"

        Returns:
            (lon, lat) of the best match
        """
        params = {"format": "jsonv2", "q": query, "limit": 1}
        try:
            response = self.session.get(f"{self.base_url}/search", params=params, timeout=self.timeout)
            response.raise_for_status()
            results = response.json()
        except (requests.RequestException, ValueError) as e:
            raise GeocodeError(f"Search for {query} failed: {e}") from e

        if not results:
            raise GeocodeError(f"Search for {query} did not find coordinates")
        first = results[0]
        return float(first["lon"]), float(first["lat"])


def known_identifiers(cities: Dict[str, Any]) -> List[str]:
    return [
        location_identifier(f.get("properties", {}).get("name", ""))
        for f in cities.get("features", [])
    ]


def find_new_places(
    cities: Dict[str, Any],
    places: Mapping[str, Mapping[str, Optional[str]]]
) -> List[Tuple[str, str, Optional[str]]]:
    """
    Places listed in `places` but absent from `cities`.

    Returns:
        List of (country, location, local name)
    """
    known = set(known_identifiers(cities))
    new = []
    for country, locations in places.items():
        for location, local_name in (locations or {}).items():
            if location == LOCAL:
                continue
            if location_identifier(location) not in known:
                new.append((country, location, local_name))
    return new


def city_feature(
    name: str,
    coordinates: Tuple[float, float],
    country: Optional[str] = None,
    local_name: Optional[str] = None
) -> Dict[str, Any]:
    properties = {"name": name}
    if local_name:
        properties["localname"] = local_name
    if country:
        properties["country"] = country
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Point", "coordinates": list(coordinates)},
    }


def geocode_places(
    client: NominatimClient,
    cities: Dict[str, Any],
    places: Mapping[str, Mapping[str, Optional[str]]],
    country_codes: Optional[Mapping[str, str]] = None,
    delay: float = 1.0
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Add coordinates for every new place to the cities collection.

    Args:
        client: Geocoding client
        cities: Existing cities FeatureCollection
        places: Country name -> {location name: local name or None}
        country_codes: Country name -> alpha-3 code stored on new features
        delay: Pause between requests in seconds

    Returns:
        (updated FeatureCollection, locations that failed)
    """
    country_codes = country_codes or {}
    features = list(cities.get("features", []))
    failed = []

    new_places = find_new_places(cities, places)
    logger.info(f"{len(new_places)} new places to geocode")

    for i, (country, location, local_name) in enumerate(tqdm(new_places, desc="Geocoding")):
        if i > 0 and delay > 0:
            time.sleep(delay)
        try:
            coords = client.search(f"{location}, {country}")
        except GeocodeError as e:
            logger.error(str(e))
            failed.append(location)
            continue
        logger.debug(f"{location}: {coords}")
        features.append(city_feature(location, coords, country_codes.get(country, country), local_name))

    return {"type": "FeatureCollection", "features": features}, failed
