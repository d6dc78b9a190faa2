#!/usr/bin/env python3
"""
Build trip paths from the trip list and the cities collection.

Usage:
    python scripts/build_trips.py
    python scripts/build_trips.py --trips world/tripcities.json --cities world/cities.json -o world/trips.json
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from common.io import load_json, save_geojson
from world.trips import build_trips

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Odyssey - Build trips.json from trip cities"
    )
    parser.add_argument(
        "--trips", "-t",
        type=Path,
        default=Path("world/tripcities.json"),
        help="Trip list: {\"trips\": [{\"name\", \"cities\"}]}"
    )
    parser.add_argument(
        "--cities", "-c",
        type=Path,
        default=Path("world/cities.json"),
        help="Cities FeatureCollection"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("world/trips.json"),
        help="Output FeatureCollection"
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

    try:
        trip_data = load_json(args.trips)
        cities = load_json(args.cities)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read input: {e}")
        sys.exit(1)

    trips = build_trips(trip_data, cities)
    save_geojson(trips, args.output)


if __name__ == "__main__":
    main()
