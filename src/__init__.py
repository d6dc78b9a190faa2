"""
Odyssey - interactive globe for a travel site.

Packages:
- geo: quaternions, great-circle interpolation, orthographic projection,
  topology decoding, SVG paths
- navigator: the sphere navigator driven by host commands
- web: verification image and contact form endpoints
- world: trip paths and geocoded cities

Usage:
    python scripts/build_trips.py
    python scripts/serve.py --config config.yaml
"""

__version__ = "1.0.0"
