"""
Quaternion utilities for sphere rotation.

Quaternions are numpy arrays (w, x, y, z). Euler rotations are the
projection's (lambda, phi, gamma) in degrees. Drag rotations are composed
entirely in quaternion space and converted back to Euler angles only for
the final projection update.
"""

from typing import Callable, Optional, Sequence

import numpy as np

RADIANS = np.pi / 180.0
DEGREES = 180.0 / np.pi


def cartesian(coords: Sequence[float]) -> np.ndarray:
    """
    Unit vector for a (longitude, latitude) pair in degrees.

    Args:
        coords: (lambda, phi) in degrees

    Returns:
        (cos phi cos lambda, cos phi sin lambda, sin phi)
    """
    lam = coords[0] * RADIANS
    phi = coords[1] * RADIANS
    cos_phi = np.cos(phi)
    return np.array([cos_phi * np.cos(lam), cos_phi * np.sin(lam), np.sin(phi)])


def from_euler(rotation: Sequence[float]) -> np.ndarray:
    """
    Quaternion for an Euler rotation (lambda, phi[, gamma]) in degrees.

    A missing gamma is taken as 0.
    """
    gamma = rotation[2] if len(rotation) > 2 else 0.0
    half_lam = 0.5 * rotation[0] * RADIANS
    half_phi = 0.5 * rotation[1] * RADIANS
    half_gam = 0.5 * gamma * RADIANS

    sl, cl = np.sin(half_lam), np.cos(half_lam)
    sp, cp = np.sin(half_phi), np.cos(half_phi)
    sg, cg = np.sin(half_gam), np.cos(half_gam)

    return np.array([
        cl * cp * cg + sl * sp * sg,
        sl * cp * cg - cl * sp * sg,
        cl * sp * cg + sl * cp * sg,
        cl * cp * sg - sl * sp * cg,
    ])


def to_euler(q: Sequence[float]) -> np.ndarray:
    """Euler rotation (lambda, phi, gamma) in degrees for a quaternion."""
    w, x, y, z = q
    return np.array([
        np.arctan2(2 * (w * x + y * z), 1 - 2 * (x * x + y * y)) * DEGREES,
        np.arcsin(np.clip(2 * (w * y - z * x), -1.0, 1.0)) * DEGREES,
        np.arctan2(2 * (w * z + x * y), 1 - 2 * (y * y + z * z)) * DEGREES,
    ])


def multiply(q0: Sequence[float], q1: Sequence[float]) -> np.ndarray:
    """Hamilton product q0 * q1."""
    a0, b0, c0, d0 = q0
    a1, b1, c1, d1 = q1
    return np.array([
        a0 * a1 - b0 * b1 - c0 * c1 - d0 * d1,
        a0 * b1 + b0 * a1 + c0 * d1 - d0 * c1,
        a0 * c1 - b0 * d1 + c0 * a1 + d0 * b1,
        a0 * d1 + b0 * c1 - c0 * b1 + d0 * a1,
    ])


def norm(q: Sequence[float]) -> float:
    return float(np.sqrt(np.dot(q, q)))


def between(v0: Optional[np.ndarray], v1: Optional[np.ndarray]) -> Optional[np.ndarray]:
    """
    Quaternion rotating unit vector v0 onto v1, in the projection's axis order.

    Returns None when either vector is missing (pointer off the sphere) or
    the vectors are parallel, so there is no rotation axis.
    """
    if v0 is None or v1 is None:
        return None
    axis = np.cross(v0, v1)
    length = np.sqrt(np.dot(axis, axis))
    if length == 0:
        return None
    half_angle = 0.5 * np.arccos(np.clip(np.dot(v0, v1), -1.0, 1.0))
    k = np.sin(half_angle) / length
    return np.array([np.cos(half_angle), axis[2] * k, -axis[1] * k, axis[0] * k])


def slerp(q0: Sequence[float], q1: Sequence[float]) -> Callable[[float], np.ndarray]:
    """
    Spherical linear interpolation between two quaternions.

    Takes the shorter of the two arcs. Coincident quaternions yield a
    constant function.
    """
    q0 = np.asarray(q0, dtype=np.float64)
    q1 = np.asarray(q1, dtype=np.float64)
    cos_theta = float(np.clip(np.dot(q0, q1), -1.0, 1.0))
    sign = -1.0 if cos_theta < 0 else 1.0
    theta = np.arccos(sign * cos_theta)
    sin_theta = np.sin(theta)

    if not sin_theta:
        return lambda t: q0.copy()

    def interpolate(t: float) -> np.ndarray:
        a = sign * np.sin((1 - t) * theta) / sin_theta
        b = np.sin(t * theta) / sin_theta
        return q0 * a + q1 * b

    return interpolate
