"""Standalone arcball demo: drag a shaded cube with PySide6 + ModernGL."""

from __future__ import annotations

import logging
import math
import sys
import time
from collections import deque

import moderngl as GL
import numpy as np
from PySide6.QtCore import Qt
from PySide6.QtGui import QKeyEvent, QMouseEvent, QSurfaceFormat
from PySide6.QtOpenGLWidgets import QOpenGLWidget
from PySide6.QtWidgets import QApplication

from rotation_control import ArcballRotationController, ModelNode, ViewBounds
from rotation_control.quaternion_math import model_matrix

logger = logging.getLogger(__name__)

_FACE_COLORS = (
    (0.90, 0.30, 0.25),
    (0.25, 0.70, 0.35),
    (0.25, 0.45, 0.90),
    (0.95, 0.80, 0.25),
    (0.70, 0.35, 0.85),
    (0.25, 0.80, 0.85),
)
_VELOCITY_WINDOW_S = 0.1


def _build_cube() -> np.ndarray:
    """Interleaved position/normal/color triangles for a unit cube."""
    faces = (
        ((1, 0, 0), (0, 1, 0), (0, 0, 1)),
        ((-1, 0, 0), (0, 0, 1), (0, 1, 0)),
        ((0, 1, 0), (0, 0, 1), (1, 0, 0)),
        ((0, -1, 0), (1, 0, 0), (0, 0, 1)),
        ((0, 0, 1), (1, 0, 0), (0, 1, 0)),
        ((0, 0, -1), (0, 1, 0), (1, 0, 0)),
    )
    rows: list[list[float]] = []
    for (normal, u, v), color in zip(faces, _FACE_COLORS):
        n = np.array(normal, dtype=np.float32)
        du = np.array(u, dtype=np.float32)
        dv = np.array(v, dtype=np.float32)
        corners = [n + su * du + sv * dv for su, sv in ((-1, -1), (1, -1), (1, 1), (-1, 1))]
        for index in (0, 1, 2, 0, 2, 3):
            rows.append([*(corners[index] * 0.5), *n, *color])
    return np.array(rows, dtype=np.float32)


def _matrix_bytes(mat: np.ndarray) -> bytes:
    return np.asarray(mat, dtype=np.float32).T.tobytes()


def _perspective(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    f = 1.0 / math.tan(fov / 2.0)
    mat = np.zeros((4, 4), dtype=np.float32)
    mat[0, 0] = f / aspect
    mat[1, 1] = f
    mat[2, 2] = (far + near) / (near - far)
    mat[2, 3] = (2 * far * near) / (near - far)
    mat[3, 2] = -1.0
    return mat


def _translation(z: float) -> np.ndarray:
    mat = np.identity(4, dtype=np.float32)
    mat[2, 3] = z
    return mat


class ArcballCubeWidget(QOpenGLWidget):
    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        fmt = QSurfaceFormat()
        fmt.setVersion(3, 3)
        fmt.setProfile(QSurfaceFormat.OpenGLContextProfile.CoreProfile)
        fmt.setDepthBufferSize(24)
        self.setFormat(fmt)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.ctx: GL.Context | None = None
        self.vao = None
        self.program = None
        self.node = ModelNode(name="cube")
        self.controller = ArcballRotationController(
            self.node,
            ViewBounds(800.0, 600.0),
            on_render=self.update,
            parent=self,
        )
        self._samples: deque[tuple[float, float, float]] = deque(maxlen=16)

    def initializeGL(self) -> None:  # pragma: no cover
        self.ctx = GL.create_context(require=330)
        self.ctx.enable(GL.DEPTH_TEST | GL.CULL_FACE)
        vbo = self.ctx.buffer(_build_cube().tobytes())
        self.program = self.ctx.program(
            vertex_shader="""
                #version 330
                uniform mat4 mvp;
                uniform mat4 model;
                in vec3 in_pos;
                in vec3 in_normal;
                in vec3 in_color;
                out vec3 v_normal;
                out vec3 v_color;
                void main() {
                    v_normal = mat3(model) * in_normal;
                    v_color = in_color;
                    gl_Position = mvp * vec4(in_pos, 1.0);
                }
            """,
            fragment_shader="""
                #version 330
                in vec3 v_normal;
                in vec3 v_color;
                out vec4 fragColor;
                void main() {
                    vec3 light_dir = normalize(vec3(0.4, 0.6, 0.8));
                    float diffuse = clamp(dot(normalize(v_normal), light_dir), 0.15, 1.0);
                    fragColor = vec4(v_color * diffuse, 1.0);
                }
            """,
        )
        self.vao = self.ctx.vertex_array(
            self.program,
            [(vbo, "3f 3f 3f", "in_pos", "in_normal", "in_color")],
        )

    def resizeGL(self, w: int, h: int) -> None:  # pragma: no cover
        self.controller.reshape(ViewBounds(float(max(w, 1)), float(max(h, 1))))
        if self.ctx is None:
            return
        self._bind_default_fbo(w, h)

    def paintGL(self) -> None:  # pragma: no cover
        if self.ctx is None or self.vao is None or self.program is None:
            return
        self._bind_default_fbo(self.width(), self.height())
        aspect = max(self.width(), 1) / max(self.height(), 1)
        proj = _perspective(math.radians(45.0), aspect, 0.1, 10.0)
        model = model_matrix(self.node.quaternion)
        mvp = proj @ _translation(-3.0) @ model
        self.ctx.clear(0.05, 0.05, 0.06, 1.0)
        self.program["mvp"].write(_matrix_bytes(mvp))
        self.program["model"].write(_matrix_bytes(model))
        self.vao.render()

    def _bind_default_fbo(self, w: int, h: int) -> None:
        fbo = self.ctx.detect_framebuffer()
        fbo.use()
        self.ctx.viewport = (0, 0, max(int(w), 1), max(int(h), 1))

    # ------------------------------------------------------------------
    # Input forwarding
    # ------------------------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:  # pragma: no cover
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self._samples.clear()
            self._samples.append((time.monotonic(), pos.x(), pos.y()))
            self.controller.begin_drag((pos.x(), pos.y()))
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # pragma: no cover
        if event.buttons() & Qt.MouseButton.LeftButton:
            pos = event.position()
            self._samples.append((time.monotonic(), pos.x(), pos.y()))
            self.controller.update_drag((pos.x(), pos.y()))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # pragma: no cover
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.controller.end_drag(self._release_velocity(), (pos.x(), pos.y()))
        super().mouseReleaseEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # pragma: no cover
        actions = {
            Qt.Key.Key_Left: self.controller.rotate_counterclockwise,
            Qt.Key.Key_Right: self.controller.rotate_clockwise,
            Qt.Key.Key_Up: self.controller.nudge_pitch_up,
            Qt.Key.Key_Down: self.controller.nudge_pitch_down,
            Qt.Key.Key_E: self.controller.nudge_roll,
            Qt.Key.Key_Q: lambda: self.controller.nudge_roll(-5.0),
            Qt.Key.Key_R: lambda: self.controller.set_rotation_euler(0.0, 0.0, 0.0),
            Qt.Key.Key_Escape: self.controller.stop_drag,
        }
        action = actions.get(Qt.Key(event.key()))
        if action is None:
            super().keyPressEvent(event)
            return
        action()
        logger.info("Orientation (deg): %.1f %.1f %.1f", *self.controller.get_rotation_euler())

    def _release_velocity(self) -> tuple[float, float]:
        """Average pointer velocity over the last few move events (px/s)."""
        if len(self._samples) < 2:
            return 0.0, 0.0
        t_end, x_end, y_end = self._samples[-1]
        t_start, x_start, y_start = self._samples[0]
        for sample in self._samples:
            if t_end - sample[0] <= _VELOCITY_WINDOW_S:
                t_start, x_start, y_start = sample
                break
        dt = t_end - t_start
        if dt <= 0.0:
            return 0.0, 0.0
        return (x_end - x_start) / dt, (y_end - y_start) / dt


def main() -> None:
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app = QApplication.instance() or QApplication(sys.argv)
    widget = ArcballCubeWidget()
    widget.setWindowTitle("Arcball rotation demo")
    widget.resize(800, 600)
    widget.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
