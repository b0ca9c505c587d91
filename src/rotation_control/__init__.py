"""Arcball rotation controller with post-release momentum."""

from .controller import ArcballRotationController
from .models import (
    BallGeometry,
    DragState,
    ModelNode,
    MomentumState,
    OrientableTarget,
    RotationSettings,
    ViewBounds,
)

__all__ = [
    "ArcballRotationController",
    "BallGeometry",
    "DragState",
    "ModelNode",
    "MomentumState",
    "OrientableTarget",
    "RotationSettings",
    "ViewBounds",
]
