"""
Great-circle interpolation between two sphere orientations.

Linear interpolation of Euler angles is unstable near the poles; instead
both endpoints are placed on the unit sphere and blended with slerp
coefficients, then converted back to angles.
"""

import math
from typing import Optional, Sequence, Tuple

RADIANS = math.pi / 180.0


class GreatCircleInterpolator:
    """
    Interpolate (lambda, phi) rotations along the shortest great circle.

    The angular distance is computed lazily and cached until the source or
    target changes:

        interp = GreatCircleInterpolator(source=(0, 0), target=(90, 0))
        if interp.distance() > 0:
            lam, phi = interp(0.5)
    """

    def __init__(
        self,
        source: Sequence[float] = (0.0, 0.0),
        target: Sequence[float] = (0.0, 0.0)
    ):
        self._distance: Optional[float] = None
        self.source = source
        self.target = target

    @property
    def source(self) -> Tuple[float, float]:
        return self._source

    @source.setter
    def source(self, coords: Sequence[float]) -> None:
        self._source = (float(coords[0]), float(coords[1]))
        self._p0 = self._unit(self._source)
        self._distance = None

    @property
    def target(self) -> Tuple[float, float]:
        return self._target

    @target.setter
    def target(self, coords: Sequence[float]) -> None:
        self._target = (float(coords[0]), float(coords[1]))
        self._p1 = self._unit(self._target)
        self._distance = None

    @staticmethod
    def _unit(coords: Tuple[float, float]) -> Tuple[float, float, float]:
        lam = coords[0] * RADIANS
        phi = coords[1] * RADIANS
        cos_phi = math.cos(phi)
        return (cos_phi * math.cos(lam), cos_phi * math.sin(lam), math.sin(phi))

    def distance(self) -> float:
        """Angular distance in radians between source and target."""
        if self._distance is None:
            dot = sum(a * b for a, b in zip(self._p0, self._p1))
            if self._source == self._target or dot >= 1.0 - 1e-15:
                # Rounding puts the dot of equal unit vectors a hair below 1
                self._distance = 0.0
            else:
                self._distance = math.acos(max(-1.0, dot))
            sin_d = math.sin(self._distance)
            self._k = 1.0 / sin_d if sin_d > 1e-12 else None
        return self._distance

    def __call__(self, t: float) -> Tuple[float, float]:
        d = self.distance()
        if d == 0:
            return self._source
        if self._k is None:
            # Antipodal: every great circle is shortest, blend the angles
            return (
                self._source[0] + (self._target[0] - self._source[0]) * t,
                self._source[1] + (self._target[1] - self._source[1]) * t,
            )

        b = math.sin(t * d) * self._k
        a = math.sin(d - t * d) * self._k
        x = a * self._p0[0] + b * self._p1[0]
        y = a * self._p0[1] + b * self._p1[1]
        z = a * self._p0[2] + b * self._p1[2]
        return (
            math.atan2(y, x) / RADIANS,
            math.atan2(z, math.sqrt(x * x + y * y)) / RADIANS,
        )


def interpolate_number(a: float, b: float):
    """Linear interpolator from a to b."""
    a = float(a)
    delta = float(b) - a
    return lambda t: a + delta * t
