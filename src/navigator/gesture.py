"""
Drag and zoom gestures on the globe.

Dragging grabs the point of the sphere under the pointer and keeps it
there: every move computes the quaternion taking the grabbed point to the
point now under the pointer and composes it with the accumulated rotation.
Composition stays in quaternion space; Euler angles are produced only to
update the projection, which avoids gimbal lock near the poles.

Wheel zoom changes the scale only and works whether or not a drag is in
progress.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from geo import quaternion
from geo.projection import OrthographicProjection

logger = logging.getLogger(__name__)

# Wheel delta to zoom exponent (scale doubles every 500 units)
WHEEL_FACTOR = 0.002


class GestureState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class ZoomEvent:
    """Payload for zoomstart / zoom / zoomend listeners."""
    type: str
    rotation: Tuple[float, float, float]
    scale: float


class ZoomGesture:
    """
    Pointer-driven rotation and scale for an orthographic projection.

    Args:
        projection: Projection to mutate
        scale_extent: (min, max) allowed scale
    """

    def __init__(
        self,
        projection: OrthographicProjection,
        scale_extent: Tuple[float, float] = (0.0, float("inf"))
    ):
        self.projection = projection
        self.scale_extent = scale_extent
        self.state = GestureState.IDLE
        self._listeners: Dict[str, List[Callable[[ZoomEvent], None]]] = {}
        self._anchor: Optional[np.ndarray] = None
        self._rotation_q: Optional[np.ndarray] = None

    def on(self, event: str, callback: Callable[[ZoomEvent], None]) -> "ZoomGesture":
        """Listen for "zoomstart", "zoom" or "zoomend"."""
        self._listeners.setdefault(event, []).append(callback)
        return self

    def _emit(self, event: str) -> None:
        payload = ZoomEvent(event, self.projection.rotation, self.projection.scale)
        for callback in self._listeners.get(event, []):
            callback(payload)

    def sphere_point(self, position: Sequence[float]) -> Optional[np.ndarray]:
        """Unit vector of the sphere point under a screen position, if any."""
        coords = self.projection.invert(position[0], position[1])
        if coords is None or not np.all(np.isfinite(coords)):
            return None
        return quaternion.cartesian(coords)

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def pointer_down(self, position: Sequence[float]) -> None:
        """Start dragging from `position` (IDLE -> DRAGGING)."""
        if self.state is GestureState.DRAGGING:
            return
        self.state = GestureState.DRAGGING
        self._rotation_q = quaternion.from_euler(self.projection.rotation)
        self._anchor = self.sphere_point(position)
        if self._anchor is None:
            logger.debug(f"Drag started off the sphere at {tuple(position)}")
        self._emit("zoomstart")

    def pointer_move(self, position: Sequence[float]) -> bool:
        """
        Rotate so the grabbed point follows the pointer.

        Returns:
            True if the rotation changed. Off-sphere positions and zero-length
            arcs leave the rotation untouched.
        """
        if self.state is not GestureState.DRAGGING:
            return False

        delta = quaternion.between(self._anchor, self.sphere_point(position))
        if delta is None:
            return False

        self._rotation_q = quaternion.multiply(self._rotation_q, delta)
        self.projection.rotate(tuple(quaternion.to_euler(self._rotation_q)))
        self._emit("zoom")
        return True

    def pointer_up(self) -> None:
        """Finish dragging (DRAGGING -> IDLE)."""
        if self.state is not GestureState.DRAGGING:
            return
        self.state = GestureState.IDLE
        self._anchor = None
        self._rotation_q = None
        self._emit("zoomend")

    def wheel(self, delta: float) -> float:
        """
        Zoom by a wheel/pinch delta (positive zooms out).

        Returns:
            The new scale, clamped to scale_extent
        """
        low, high = self.scale_extent
        scale = self.projection.scale * 2 ** (-delta * WHEEL_FACTOR)
        self.projection.scale = float(min(high, max(low, scale)))
        self._emit("zoom")
        return self.projection.scale

    def rotate_to(self, coords: Sequence[float]) -> Tuple[float, float, float]:
        """
        Rotation that brings location `coords` (lon, lat) to the centre.

        Computed from the current rotation so the globe turns the short way.
        """
        rotation = self.projection.rotation
        centre = quaternion.cartesian((-rotation[0], -rotation[1]))
        delta = quaternion.between(quaternion.cartesian(coords), centre)
        if delta is None:
            return rotation
        q = quaternion.multiply(quaternion.from_euler(rotation), delta)
        return tuple(float(a) for a in quaternion.to_euler(q))
