#!/usr/bin/env python3
"""
Geocode places that are not yet in the cities collection.

The places file (YAML or JSON) lists locations per country, and optionally
the alpha-3 code to store for each country:

    places:
      France:
        Lyon: null
    codes:
      France: FRA

Usage:
    python scripts/geocode_places.py --places world/places.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from common.config import Config, DEFAULT_CONFIG
from common.io import load_json, save_geojson
from world.geocode import NominatimClient, geocode_places

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Odyssey - Add coordinates for new places to cities.json"
    )
    parser.add_argument(
        "--places", "-p",
        type=Path,
        required=True,
        help="Places file (YAML or JSON)"
    )
    parser.add_argument(
        "--cities", "-c",
        type=Path,
        default=Path("world/cities.json"),
        help="Cities FeatureCollection (updated in place unless --output)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Output FeatureCollection"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Config file (JSON or YAML)"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Seconds between geocoding requests"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    config = Config.load(args.config) if args.config else DEFAULT_CONFIG

    try:
        with open(args.places) as f:
            places_doc = yaml.safe_load(f) or {}
        cities = load_json(args.cities)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Could not read input: {e}")
        sys.exit(1)

    client = NominatimClient(config.user_agent)
    updated, failed = geocode_places(
        client,
        cities,
        places_doc.get("places", {}),
        country_codes=places_doc.get("codes"),
        delay=args.delay,
    )
    save_geojson(updated, args.output or args.cities)

    if failed:
        logger.error(f"{len(failed)} places not found: {', '.join(failed)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
