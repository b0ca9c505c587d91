"""Screen-to-sphere projections for arcball rotation.

Screen points are in viewport pixels with the origin at the top-left corner
and y pointing down. Every function here is pure.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from rotation_control.models import BallGeometry, ViewBounds
from rotation_control.quaternion_math import clamp, to_vector

DEFAULT_BALL = BallGeometry()


def location_in_ball_coordinates(
    screen_point: Sequence[float], bounds: ViewBounds
) -> Tuple[float, float]:
    """Map a pixel location into [-1, 1] with y up.

    Both axes are scaled by the larger viewport dimension so the ball stays
    round on non-square viewports.
    """
    px, py = to_vector(screen_point, 2)
    extent = max(bounds.width, bounds.height)
    x = (2.0 * px / bounds.width - 1.0) * (bounds.width / extent)
    y = (2.0 * py / bounds.height - 1.0) * (bounds.height / extent)
    return x, -y


def _ball_local(
    screen_point: Sequence[float], bounds: ViewBounds, ball: BallGeometry
) -> Tuple[float, float, float]:
    x, y = location_in_ball_coordinates(screen_point, bounds)
    cx, cy = ball.center
    bx = (x - cx) / ball.radius
    by = (y - cy) / ball.radius
    return bx, by, bx * bx + by * by


def ball_location_xy_plane(
    screen_point: Sequence[float],
    bounds: ViewBounds,
    ball: BallGeometry = DEFAULT_BALL,
) -> np.ndarray:
    """Project onto the front hemisphere facing the viewer (+z)."""
    bx, by, magnitude = _ball_local(screen_point, bounds, ball)
    if magnitude > 1.0:
        scale = 1.0 / math.sqrt(magnitude)
        return np.array([bx * scale, by * scale, 0.0])
    return np.array([bx, by, math.sqrt(1.0 - magnitude)])


def ball_location_xz_plane(
    screen_point: Sequence[float],
    bounds: ViewBounds,
    ball: BallGeometry = DEFAULT_BALL,
) -> np.ndarray:
    """Project onto the lower hemisphere of the XZ reference plane.

    Screen-up maps to +z and the sphere bulges towards -y.
    """
    bx, bz, magnitude = _ball_local(screen_point, bounds, ball)
    if magnitude > 1.0:
        scale = 1.0 / math.sqrt(magnitude)
        return np.array([bx * scale, 0.0, bz * scale])
    return np.array([bx, -math.sqrt(1.0 - magnitude), bz])


def angle_between(a: np.ndarray, b: np.ndarray) -> float:
    """Angle in [0, pi] between two unit vectors."""
    return math.acos(clamp(float(np.dot(a, b)), -1.0, 1.0))


__all__: Tuple[str, ...] = (
    "angle_between",
    "ball_location_xy_plane",
    "ball_location_xz_plane",
    "location_in_ball_coordinates",
)
