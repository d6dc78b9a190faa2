"""
Common modules: configuration and world data I/O.

Coordinate convention: (longitude, latitude) in degrees everywhere. A view
rotation is the negated focus point, see navigator.dispatcher.
"""

from .config import Config, NavigatorConfig, MailConfig, CaptchaConfig, DEFAULT_CONFIG
from .io import WorldData, load_json, load_world, save_geojson

__all__ = [
    'Config', 'NavigatorConfig', 'MailConfig', 'CaptchaConfig', 'DEFAULT_CONFIG',
    'WorldData', 'load_json', 'load_world', 'save_geojson',
]
