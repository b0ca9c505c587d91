"""Arcball rotation controller with momentum decay after release."""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
from PySide6.QtCore import QObject, QTimer

from rotation_control.constants import WORLD_X_AXIS, WORLD_Y_AXIS, WORLD_Z_AXIS
from rotation_control.models import (
    BallGeometry,
    DragState,
    MomentumState,
    OrientableTarget,
    RotationSettings,
    ViewBounds,
)
from rotation_control.projection import (
    angle_between,
    ball_location_xy_plane,
    ball_location_xz_plane,
)
from rotation_control.quaternion_math import (
    euler_xyz_from_quaternion,
    quaternion_from_axis_angle,
    quaternion_from_euler_xyz,
    quaternion_multiply,
    to_vector,
)

logger = logging.getLogger(__name__)


class ArcballRotationController(QObject):
    """Turns pointer drags into rotations of an orientable target.

    Drag updates are composed in the camera frame on top of the orientation
    captured when the drag began. A release with enough velocity keeps the
    target spinning about the last drag axis; the spin loses a fixed fraction
    of its starting angle every tick until it runs out.

    All calls are expected on the thread that owns the Qt event loop.
    """

    def __init__(
        self,
        target: OrientableTarget,
        bounds: ViewBounds,
        *,
        ball: BallGeometry | None = None,
        settings: RotationSettings | None = None,
        on_render: Optional[Callable[[], None]] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._target = target
        self._bounds = bounds
        self._ball = ball or BallGeometry()
        self._settings = settings or RotationSettings()
        self.on_render = on_render

        self._quaternion = np.array(target.quaternion, dtype=float)
        self._quaternion_touch_down = self._quaternion.copy()
        self._drag = DragState()
        self._axis_of_rotation: np.ndarray | None = None
        self._angle_of_rotation = 0.0
        self._momentum: MomentumState | None = None

        self._momentum_timer = QTimer(self)
        self._momentum_timer.setInterval(self._settings.tick_interval_ms)
        self._momentum_timer.timeout.connect(self._on_momentum_tick)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def target(self) -> OrientableTarget:
        return self._target

    @property
    def bounds(self) -> ViewBounds:
        return self._bounds

    @property
    def ball(self) -> BallGeometry:
        return self._ball

    @property
    def settings(self) -> RotationSettings:
        return self._settings

    @property
    def quaternion(self) -> np.ndarray:
        return self._quaternion.copy()

    @property
    def drag_start_quaternion(self) -> np.ndarray:
        return self._quaternion_touch_down.copy()

    @property
    def drag_state(self) -> DragState:
        return self._drag

    @property
    def momentum(self) -> MomentumState | None:
        return self._momentum

    @property
    def last_drag_angle(self) -> float:
        return self._angle_of_rotation

    def reshape(self, bounds: ViewBounds) -> None:
        """Replace the viewport size used for coordinate mapping."""
        self._bounds = bounds

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------
    def ball_location_xy_plane(self, screen_point: Sequence[float]) -> np.ndarray:
        return ball_location_xy_plane(screen_point, self._bounds, self._ball)

    def ball_location_xz_plane(self, screen_point: Sequence[float]) -> np.ndarray:
        return ball_location_xz_plane(screen_point, self._bounds, self._ball)

    point_on_ball = ball_location_xy_plane

    # ------------------------------------------------------------------
    # Drag lifecycle
    # ------------------------------------------------------------------
    def begin_drag(self, screen_point: Sequence[float]) -> None:
        self._stop_momentum()
        self._drag.active = True
        self._drag.start_vector = self.ball_location_xy_plane(screen_point)
        self._axis_of_rotation = None
        logger.debug("Drag started at %s", tuple(screen_point))

    def update_drag(self, screen_point: Sequence[float]) -> None:
        if not self._drag.active:
            return
        end_vector = self.ball_location_xy_plane(screen_point)
        angle = angle_between(self._drag.start_vector, end_vector)
        axis = np.cross(self._drag.start_vector, end_vector)
        axis_length = float(np.linalg.norm(axis))
        if axis_length < self._settings.min_axis_length:
            logger.debug("Skipping degenerate drag update (|axis|=%.2e)", axis_length)
            return

        self._angle_of_rotation = angle
        self._axis_of_rotation = axis / axis_length
        drag = quaternion_from_axis_angle(self._axis_of_rotation, angle)
        self._quaternion = quaternion_multiply(drag, self._quaternion_touch_down)
        self._apply_to_target()
        self._request_render()

    def end_drag(
        self, velocity: Sequence[float], location: Sequence[float]
    ) -> None:
        """Commit the drag and start momentum if the release was a flick.

        ``velocity`` is in viewport units per second, ``location`` is the
        release point.
        """
        self._drag.active = False
        self._quaternion_touch_down = self._quaternion.copy()

        vel = to_vector(velocity, 2)
        loc = to_vector(location, 2)
        speed = float(np.linalg.norm(vel))
        if speed < self._settings.min_release_speed:
            return
        if self._axis_of_rotation is None:
            logger.debug("Release without an accepted drag update; no momentum")
            return

        projected = loc + self._settings.rotation_rate_s * vel
        a = self.ball_location_xy_plane(loc)
        b = self.ball_location_xy_plane(projected)
        radians = angle_between(a, b)
        if radians < self._settings.min_momentum_angle_rad:
            return

        self._stop_momentum()
        self._momentum = MomentumState(
            axis=self._axis_of_rotation.copy(),
            angle_at_start=radians,
            remaining_angle=radians,
            decrement=self._settings.deceleration_rate * radians,
        )
        self._momentum_timer.start()
        logger.debug(
            "Momentum started: %.4f rad about %s", radians, self._momentum.axis
        )

    def stop_drag(self) -> None:
        """Cancel any drag or momentum. Safe to call repeatedly."""
        self._stop_momentum()
        self._drag.reset()

    def is_currently_dragging(self) -> bool:
        return self._drag.active or self._momentum_timer.isActive()

    # ------------------------------------------------------------------
    # Momentum
    # ------------------------------------------------------------------
    def _stop_momentum(self) -> None:
        if self._momentum_timer.isActive():
            self._momentum_timer.stop()
            logger.debug("Momentum cancelled")
        self._momentum = None

    def _on_momentum_tick(self) -> None:
        momentum = self._momentum
        if momentum is None or momentum.remaining_angle <= 0.0:
            self._stop_momentum()
            return

        momentum.ticks += 1
        remaining = momentum.angle_at_start - momentum.ticks * momentum.decrement
        # Repeated decrements land on zero only up to rounding.
        if abs(remaining) <= 1e-12 * momentum.angle_at_start:
            remaining = 0.0
        momentum.remaining_angle = remaining
        if remaining <= 0.0:
            logger.debug("Momentum exhausted after %d ticks", momentum.ticks)
            self._stop_momentum()
            return

        step = quaternion_from_axis_angle(momentum.axis, remaining)
        self._quaternion = quaternion_multiply(step, self._quaternion_touch_down)
        self._apply_to_target()
        self._quaternion_touch_down = self._quaternion.copy()
        self._request_render()

    # ------------------------------------------------------------------
    # Discrete nudges
    # ------------------------------------------------------------------
    def rotate_clockwise(self, degrees: float | None = None) -> None:
        step = self._settings.yaw_step_deg if degrees is None else degrees
        self._rotate_about_world_axis(WORLD_Y_AXIS, -step)

    def rotate_counterclockwise(self, degrees: float | None = None) -> None:
        step = self._settings.yaw_step_deg if degrees is None else degrees
        self._rotate_about_world_axis(WORLD_Y_AXIS, step)

    def nudge_pitch_up(self, degrees: float | None = None) -> None:
        step = self._settings.pitch_step_deg if degrees is None else degrees
        self._rotate_about_world_axis(WORLD_X_AXIS, step)

    def nudge_pitch_down(self, degrees: float | None = None) -> None:
        step = self._settings.pitch_step_deg if degrees is None else degrees
        self._rotate_about_world_axis(WORLD_X_AXIS, -step)

    def nudge_roll(self, degrees: float | None = None) -> None:
        """Roll about the view axis; positive values roll clockwise on screen."""
        step = self._settings.roll_step_deg if degrees is None else degrees
        self._rotate_about_world_axis(WORLD_Z_AXIS, step)

    def _rotate_about_world_axis(
        self, axis: Tuple[float, float, float], degrees: float
    ) -> None:
        # Momentum, if running, keeps going from the nudged orientation.
        rotation = quaternion_from_axis_angle(axis, math.radians(degrees))
        current = np.array(self._target.quaternion, dtype=float)
        self._set_orientation(quaternion_multiply(rotation, current))

    # ------------------------------------------------------------------
    # Euler accessors
    # ------------------------------------------------------------------
    def get_rotation_euler(self) -> Tuple[float, float, float]:
        """Target orientation as XYZ-ordered Euler angles in degrees."""
        x, y, z = euler_xyz_from_quaternion(np.asarray(self._target.quaternion))
        return math.degrees(x), math.degrees(y), math.degrees(z)

    def set_rotation_euler(self, x: float, y: float, z: float) -> None:
        """Reset the target to absolute XYZ Euler angles given in degrees."""
        self._set_orientation(
            quaternion_from_euler_xyz(math.radians(x), math.radians(y), math.radians(z))
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _set_orientation(self, quaternion: np.ndarray) -> None:
        self._quaternion = quaternion
        self._apply_to_target()
        self._quaternion_touch_down = quaternion.copy()
        self._request_render()

    def _apply_to_target(self) -> None:
        self._target.quaternion = self._quaternion.copy()

    def _request_render(self) -> None:
        if self.on_render is not None:
            self.on_render()
