"""Shared tuning constants for the arcball rotation controller."""

from __future__ import annotations

ROTATION_RATE_S = 1.0 / 30.0  # momentum tick interval; velocity is read as units per tick at 30 Hz
ROTATION_DECELERATION_RATE = 1.0 / 60.0  # fraction of the starting angle removed per tick
MIN_RELEASE_SPEED = 0.1  # viewport units per second
MIN_MOMENTUM_ANGLE_RAD = 1e-3
MIN_AXIS_LENGTH = 1e-4

DEFAULT_YAW_STEP_DEG = 10.0
DEFAULT_PITCH_STEP_DEG = 5.0
DEFAULT_ROLL_STEP_DEG = 5.0

WORLD_X_AXIS = (1.0, 0.0, 0.0)
WORLD_Y_AXIS = (0.0, 1.0, 0.0)
WORLD_Z_AXIS = (0.0, 0.0, 1.0)
