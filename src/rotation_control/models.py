"""Dataclasses shared between the rotation controller and its collaborators."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from rotation_control.constants import (
    DEFAULT_PITCH_STEP_DEG,
    DEFAULT_ROLL_STEP_DEG,
    DEFAULT_YAW_STEP_DEG,
    MIN_AXIS_LENGTH,
    MIN_MOMENTUM_ANGLE_RAD,
    MIN_RELEASE_SPEED,
    ROTATION_DECELERATION_RATE,
    ROTATION_RATE_S,
)


class OrientableTarget(Protocol):
    """Anything exposing a writable unit quaternion stored as ``(x, y, z, w)``.

    The controller assumes it is the only writer while it holds the target.
    """

    quaternion: np.ndarray


@dataclass
class ModelNode:
    """Minimal orientable scene node."""

    name: str = "model"
    quaternion: np.ndarray = field(
        default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0])
    )


@dataclass
class ViewBounds:
    """Viewport size in the same units as the input coordinates.

    Width and height must be positive; callers are responsible for that.
    """

    width: float
    height: float


@dataclass(frozen=True)
class BallGeometry:
    """Virtual sphere placement in normalized device space."""

    center: tuple[float, float] = (0.0, 0.0)
    radius: float = 1.0


@dataclass
class DragState:
    """Interactive drag bookkeeping."""

    active: bool = False
    start_vector: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def reset(self) -> None:
        self.active = False
        self.start_vector = np.zeros(3)


@dataclass
class MomentumState:
    """Decaying rotation that runs after a flick release."""

    axis: np.ndarray
    angle_at_start: float
    remaining_angle: float
    decrement: float
    ticks: int = 0


@dataclass(frozen=True)
class RotationSettings:
    """Tuning knobs for drag, momentum and nudges."""

    rotation_rate_s: float = ROTATION_RATE_S
    deceleration_rate: float = ROTATION_DECELERATION_RATE
    min_release_speed: float = MIN_RELEASE_SPEED
    min_momentum_angle_rad: float = MIN_MOMENTUM_ANGLE_RAD
    min_axis_length: float = MIN_AXIS_LENGTH
    yaw_step_deg: float = DEFAULT_YAW_STEP_DEG
    pitch_step_deg: float = DEFAULT_PITCH_STEP_DEG
    roll_step_deg: float = DEFAULT_ROLL_STEP_DEG

    @property
    def tick_interval_ms(self) -> int:
        return max(1, int(round(self.rotation_rate_s * 1000.0)))

    @property
    def momentum_tick_budget(self) -> int:
        """Number of ticks that exhausts any starting angle."""
        return math.ceil(round(1.0 / self.deceleration_rate, 9))
