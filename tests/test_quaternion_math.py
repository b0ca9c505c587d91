"""Unit tests for the quaternion helpers."""

from __future__ import annotations

import math

import numpy as np
import pytest

from rotation_control import quaternion_math as qm


def test_axis_angle_is_unit_length():
    q = qm.quaternion_from_axis_angle((0.0, 0.6, 0.8), 1.3)
    assert np.linalg.norm(q) == pytest.approx(1.0)


def test_quarter_turn_about_y_maps_x_to_minus_z():
    q = qm.quaternion_from_axis_angle((0.0, 1.0, 0.0), math.pi / 2)
    rotated = qm.rotation_matrix(q) @ np.array([1.0, 0.0, 0.0])
    np.testing.assert_allclose(rotated, [0.0, 0.0, -1.0], atol=1e-12)


def test_multiply_applies_right_operand_first():
    about_x = qm.quaternion_from_axis_angle((1.0, 0.0, 0.0), math.pi / 2)
    about_z = qm.quaternion_from_axis_angle((0.0, 0.0, 1.0), math.pi / 2)
    combined = qm.quaternion_multiply(about_z, about_x)
    expected = qm.rotation_matrix(about_z) @ qm.rotation_matrix(about_x)
    np.testing.assert_allclose(qm.rotation_matrix(combined), expected, atol=1e-12)


def test_identity_is_neutral():
    q = qm.quaternion_from_axis_angle((1.0, 0.0, 0.0), 0.4)
    np.testing.assert_allclose(
        qm.quaternion_multiply(qm.identity_quaternion(), q), q, atol=1e-15
    )


def test_euler_decomposition_matches_construction():
    angles = (math.radians(30.0), math.radians(45.0), math.radians(60.0))
    q = qm.quaternion_from_euler_xyz(*angles)
    assert np.linalg.norm(q) == pytest.approx(1.0)
    np.testing.assert_allclose(qm.euler_xyz_from_quaternion(q), angles, atol=1e-9)


def test_euler_at_gimbal_lock_reports_zero_z():
    q = qm.quaternion_from_euler_xyz(0.3, math.pi / 2, 0.0)
    x, y, z = qm.euler_xyz_from_quaternion(q)
    assert y == pytest.approx(math.pi / 2, abs=1e-6)
    assert z == 0.0


def test_model_matrix_is_float32_homogeneous():
    mat = qm.model_matrix(qm.identity_quaternion())
    assert mat.dtype == np.float32
    np.testing.assert_array_equal(mat, np.identity(4, dtype=np.float32))


def test_to_vector_rejects_wrong_length():
    with pytest.raises(ValueError):
        qm.to_vector((1.0, 2.0, 3.0), 2)


def test_normalize_rejects_zero_vector():
    with pytest.raises(ValueError):
        qm.normalize(np.zeros(3))
