"""Small quaternion helpers used by the rotation controller.

Quaternions are NumPy arrays laid out as ``(x, y, z, w)``.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

import numpy as np


def to_vector(values: Iterable[float], size: int) -> np.ndarray:
    """Convert ``values`` to a 1-D float array of the given length."""
    arr = np.asarray(tuple(values), dtype=float)
    if arr.shape != (size,):
        raise ValueError(f"Expected {size} components, got shape {arr.shape}.")
    return arr


def clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else (hi if value > hi else value)


def normalize(vec: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vec))
    if length == 0.0:
        raise ValueError("Cannot normalize a zero-length vector.")
    return vec / length


def identity_quaternion() -> np.ndarray:
    return np.array([0.0, 0.0, 0.0, 1.0])


def quaternion_from_axis_angle(axis: Sequence[float], angle_rad: float) -> np.ndarray:
    """Return the rotation of ``angle_rad`` about the unit vector ``axis``."""
    ax = to_vector(axis, 3)
    half = 0.5 * angle_rad
    s = math.sin(half)
    return np.array([ax[0] * s, ax[1] * s, ax[2] * s, math.cos(half)])


def quaternion_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product ``a * b``: applying the result rotates by ``b`` then ``a``."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array(
        [
            ax * bw + aw * bx + ay * bz - az * by,
            ay * bw + aw * by + az * bx - ax * bz,
            az * bw + aw * bz + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        ]
    )


def quaternion_from_euler_xyz(x_rad: float, y_rad: float, z_rad: float) -> np.ndarray:
    """Build a quaternion from intrinsic X-then-Y-then-Z Euler angles."""
    c1, s1 = math.cos(x_rad / 2.0), math.sin(x_rad / 2.0)
    c2, s2 = math.cos(y_rad / 2.0), math.sin(y_rad / 2.0)
    c3, s3 = math.cos(z_rad / 2.0), math.sin(z_rad / 2.0)
    return np.array(
        [
            s1 * c2 * c3 + c1 * s2 * s3,
            c1 * s2 * c3 - s1 * c2 * s3,
            c1 * c2 * s3 + s1 * s2 * c3,
            c1 * c2 * c3 - s1 * s2 * s3,
        ]
    )


def rotation_matrix(q: np.ndarray) -> np.ndarray:
    """Return the 3x3 rotation matrix (row-major) of a unit quaternion."""
    x, y, z, w = q
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array(
        [
            [1.0 - 2.0 * (yy + zz), 2.0 * (xy - wz), 2.0 * (xz + wy)],
            [2.0 * (xy + wz), 1.0 - 2.0 * (xx + zz), 2.0 * (yz - wx)],
            [2.0 * (xz - wy), 2.0 * (yz + wx), 1.0 - 2.0 * (xx + yy)],
        ]
    )


def euler_xyz_from_quaternion(q: np.ndarray) -> Tuple[float, float, float]:
    """Decompose a unit quaternion into X-then-Y-then-Z Euler angles (radians).

    Near ``y = ±90°`` the X and Z angles are not separable; Z is reported as 0.
    """
    m = rotation_matrix(q)
    y = math.asin(clamp(float(m[0, 2]), -1.0, 1.0))
    if abs(m[0, 2]) < 0.9999999:
        x = math.atan2(-m[1, 2], m[2, 2])
        z = math.atan2(-m[0, 1], m[0, 0])
    else:
        x = math.atan2(m[2, 1], m[1, 1])
        z = 0.0
    return float(x), float(y), float(z)


def model_matrix(q: np.ndarray) -> np.ndarray:
    """4x4 float32 model matrix for uploading to a shader."""
    mat = np.identity(4, dtype=np.float32)
    mat[:3, :3] = rotation_matrix(q)
    return mat


__all__: Tuple[str, ...] = (
    "clamp",
    "euler_xyz_from_quaternion",
    "identity_quaternion",
    "model_matrix",
    "normalize",
    "quaternion_from_axis_angle",
    "quaternion_from_euler_xyz",
    "quaternion_multiply",
    "rotation_matrix",
    "to_vector",
)
