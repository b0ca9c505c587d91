"""Tests for the screen-to-sphere projections."""

from __future__ import annotations

import itertools
import math

import numpy as np
import pytest

from rotation_control.models import BallGeometry, ViewBounds
from rotation_control.projection import (
    angle_between,
    ball_location_xy_plane,
    ball_location_xz_plane,
    location_in_ball_coordinates,
)

BOUNDS = ViewBounds(800.0, 600.0)


@pytest.mark.parametrize("project", [ball_location_xy_plane, ball_location_xz_plane])
def test_projection_is_always_unit_length(project):
    xs = np.linspace(-200.0, 1000.0, 13)
    ys = np.linspace(-150.0, 750.0, 11)
    for x, y in itertools.product(xs, ys):
        assert np.linalg.norm(project((x, y), BOUNDS)) == pytest.approx(1.0, abs=1e-6)


def test_viewport_center_maps_to_front_pole():
    np.testing.assert_allclose(
        ball_location_xy_plane((400.0, 300.0), BOUNDS), [0.0, 0.0, 1.0]
    )


def test_larger_dimension_sets_common_scale():
    x, y = location_in_ball_coordinates((400.0, 0.0), BOUNDS)
    assert x == pytest.approx(0.0)
    assert y == pytest.approx(0.75)  # top edge, flipped to +y


def test_points_outside_silhouette_land_on_equator():
    vec = ball_location_xy_plane((600.0, 0.0), ViewBounds(600.0, 600.0))
    assert vec[2] == 0.0
    np.testing.assert_allclose(vec[:2], [math.sqrt(0.5), math.sqrt(0.5)])


def test_ball_radius_and_center_are_applied():
    ball = BallGeometry(center=(0.25, 0.0), radius=0.5)
    vec = ball_location_xy_plane((600.0, 400.0), ViewBounds(800.0, 800.0), ball)
    np.testing.assert_allclose(vec, [0.5, 0.0, math.sqrt(0.75)])


def test_xz_variant_bulges_towards_negative_y():
    np.testing.assert_allclose(
        ball_location_xz_plane((400.0, 300.0), BOUNDS), [0.0, -1.0, 0.0]
    )
    np.testing.assert_allclose(
        ball_location_xz_plane((400.0, -1000.0), BOUNDS), [0.0, 0.0, 1.0]
    )


def test_angle_between_survives_dot_overshoot():
    a = np.array([0.0, 0.0, 1.0 + 1e-12])
    assert angle_between(a, a) == 0.0
    assert angle_between(a, -a) == pytest.approx(math.pi)


def test_angle_between_is_in_closed_range():
    rng = np.random.default_rng(7)
    for _ in range(50):
        a, b = rng.normal(size=(2, 3))
        a /= np.linalg.norm(a)
        b /= np.linalg.norm(b)
        angle = angle_between(a, b)
        assert 0.0 <= angle <= math.pi


def test_malformed_point_raises():
    with pytest.raises(ValueError):
        ball_location_xy_plane((1.0, 2.0, 3.0), BOUNDS)
