"""
Orthographic projection of the globe.

Screen coordinates are SVG pixels: x grows right, y grows down, the globe
centre sits at `translate`. Rotation follows the usual map-projection
convention: longitude shift lambda first, then the phi/gamma tilt.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

RADIANS = math.pi / 180.0
TAU = 2 * math.pi


def _wrap(lam: float) -> float:
    if lam > math.pi:
        return lam - TAU
    if lam < -math.pi:
        return lam + TAU
    return lam


def _asin(x: float) -> float:
    return math.asin(max(-1.0, min(1.0, x)))


@dataclass
class OrthographicProjection:
    """
    Mutable orthographic projection state.

    rotation: (lambda, phi, gamma) in degrees
    scale: globe radius in pixels
    translate: screen position of the globe centre
    clip_angle: visible cap radius in degrees (90 = front hemisphere)
    """
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale: float = 150.0
    translate: Tuple[float, float] = (480.0, 250.0)
    clip_angle: float = 90.0

    def __post_init__(self):
        self.rotate(self.rotation)

    @property
    def _cos_clip(self) -> float:
        return math.cos(self.clip_angle * RADIANS)

    def rotate(self, rotation: Sequence[float]) -> "OrthographicProjection":
        """Set the rotation; a 2-element rotation implies gamma = 0."""
        gamma = rotation[2] if len(rotation) > 2 else 0.0
        self.rotation = (float(rotation[0]), float(rotation[1]), float(gamma))
        return self

    def copy(self) -> "OrthographicProjection":
        return OrthographicProjection(
            rotation=self.rotation,
            scale=self.scale,
            translate=self.translate,
            clip_angle=self.clip_angle,
        )

    def _rotate_forward(self, lam: float, phi: float) -> Tuple[float, float]:
        d_lam, d_phi, d_gam = (a * RADIANS for a in self.rotation)
        lam = _wrap(lam + d_lam)
        if not (d_phi or d_gam):
            return lam, phi

        cos_dp, sin_dp = math.cos(d_phi), math.sin(d_phi)
        cos_dg, sin_dg = math.cos(d_gam), math.sin(d_gam)
        cos_phi = math.cos(phi)
        x = math.cos(lam) * cos_phi
        y = math.sin(lam) * cos_phi
        z = math.sin(phi)
        k = z * cos_dp + x * sin_dp
        return (
            math.atan2(y * cos_dg - k * sin_dg, x * cos_dp - z * sin_dp),
            _asin(k * cos_dg + y * sin_dg),
        )

    def _rotate_inverse(self, lam: float, phi: float) -> Tuple[float, float]:
        d_lam, d_phi, d_gam = (a * RADIANS for a in self.rotation)
        if d_phi or d_gam:
            cos_dp, sin_dp = math.cos(d_phi), math.sin(d_phi)
            cos_dg, sin_dg = math.cos(d_gam), math.sin(d_gam)
            cos_phi = math.cos(phi)
            x = math.cos(lam) * cos_phi
            y = math.sin(lam) * cos_phi
            z = math.sin(phi)
            k = z * cos_dg - y * sin_dg
            lam, phi = (
                math.atan2(y * cos_dg + z * sin_dg, x * cos_dp + k * sin_dp),
                _asin(k * cos_dp - x * sin_dp),
            )
        return _wrap(lam - d_lam), phi

    def visible(self, lon: float, lat: float) -> bool:
        """True if (lon, lat) lies inside the clip circle."""
        lam, phi = self._rotate_forward(lon * RADIANS, lat * RADIANS)
        return math.cos(lam) * math.cos(phi) > self._cos_clip

    def project(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        """
        Screen position of a geographic point.

        Returns:
            (x, y) in pixels, or None if the point is clipped
        """
        lam, phi = self._rotate_forward(lon * RADIANS, lat * RADIANS)
        cos_phi = math.cos(phi)
        if math.cos(lam) * cos_phi <= self._cos_clip:
            return None
        x = cos_phi * math.sin(lam)
        y = math.sin(phi)
        return (
            self.translate[0] + self.scale * x,
            self.translate[1] - self.scale * y,
        )

    def invert(self, px: float, py: float) -> Optional[Tuple[float, float]]:
        """
        Geographic point under a screen position.

        Returns:
            (lon, lat) in degrees, or None outside the sphere silhouette
        """
        if not self.scale:
            return None
        x = (px - self.translate[0]) / self.scale
        y = (self.translate[1] - py) / self.scale
        rho = math.hypot(x, y)
        if rho > 1:
            return None
        c = math.asin(rho)
        sin_c, cos_c = math.sin(c), math.cos(c)
        lam = math.atan2(x * sin_c, rho * cos_c)
        phi = math.asin(y * sin_c / rho) if rho else 0.0
        lam, phi = self._rotate_inverse(lam, phi)
        return (lam / RADIANS, phi / RADIANS)
