#!/usr/bin/env python3
"""
Run the contact form and verification image endpoints.

Usage:
    python scripts/serve.py --config config.yaml --port 8000
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from common.config import Config, DEFAULT_CONFIG
from web.app import create_app

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Odyssey - site endpoints")
    parser.add_argument("--config", type=Path, default=None, help="Config file (JSON or YAML)")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = Config.load(args.config) if args.config else DEFAULT_CONFIG
    app = create_app(config)
    logger.info(f"Serving on {args.host}:{args.port}")
    app.run(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
