"""
Sphere geometry: quaternions, great-circle interpolation, the orthographic
projection, topology decoding and SVG path rendering.
"""

from .projection import OrthographicProjection
from .rotation import GreatCircleInterpolator, interpolate_number
from .topology import TopologyError, feature, features
from .path import Renderer, SvgPathRenderer, graticule

__all__ = [
    'OrthographicProjection',
    'GreatCircleInterpolator', 'interpolate_number',
    'TopologyError', 'feature', 'features',
    'Renderer', 'SvgPathRenderer', 'graticule',
]
