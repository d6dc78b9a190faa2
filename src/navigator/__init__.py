"""
Sphere Navigator: orthographic globe with animated view changes,
quaternion drag rotation and a four-way view dispatcher driven by host
commands.
"""

from .clock import FrameClock, Transition
from .document import MapDocument, MapElement
from .state import NavigatorState, WorldView, CountryView, LocationView, TripView
from .ports import (
    InitMap, DrawMap, ViewAll, ViewCountry, ViewLocation, ShowLocation, ViewTrip,
    near_bottom,
)
from .gesture import ZoomGesture, GestureState
from .globe import Globe

__all__ = [
    'FrameClock', 'Transition',
    'MapDocument', 'MapElement',
    'NavigatorState', 'WorldView', 'CountryView', 'LocationView', 'TripView',
    'InitMap', 'DrawMap', 'ViewAll', 'ViewCountry', 'ViewLocation', 'ShowLocation', 'ViewTrip',
    'near_bottom',
    'ZoomGesture', 'GestureState',
    'Globe',
]
