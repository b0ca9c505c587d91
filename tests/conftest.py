"""Shared fixtures for the rotation-control tests."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication

from rotation_control import ArcballRotationController, ModelNode, ViewBounds


@pytest.fixture(scope="session", autouse=True)
def _qt_app():
    """Ensure a Qt application exists so controller timers can be started."""

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


class RenderCounter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def render_counter() -> RenderCounter:
    return RenderCounter()


@pytest.fixture
def node() -> ModelNode:
    return ModelNode()


@pytest.fixture
def controller(node, render_counter):
    ctrl = ArcballRotationController(
        node, ViewBounds(800.0, 600.0), on_render=render_counter
    )
    yield ctrl
    ctrl.stop_drag()
