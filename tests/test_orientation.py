"""Tests for roll-pitch-yaw composition."""

import numpy as np

from urdftree import compose_rpy, origin_matrix


def _rx(a):
    c, s = np.cos(a), np.sin(a)
    return np.array([[1, 0, 0], [0, c, -s], [0, s, c]])


def _ry(a):
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]])


def _rz(a):
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]])


def test_zero_is_identity():
    np.testing.assert_array_equal(compose_rpy(0, 0, 0), np.eye(3))


def test_deterministic():
    a = compose_rpy(0.3, -1.2, 2.5)
    b = compose_rpy(0.3, -1.2, 2.5)
    assert a.tobytes() == b.tobytes()


def test_fixed_axis_order():
    roll, pitch, yaw = 0.4, -0.7, 1.9
    expected = _rz(yaw) @ _ry(pitch) @ _rx(roll)
    np.testing.assert_allclose(compose_rpy(roll, pitch, yaw), expected, atol=1e-12)


def test_single_axes():
    for axis, rotation in enumerate([_rx, _ry, _rz]):
        rpy = [0.0, 0.0, 0.0]
        rpy[axis] = 0.8
        np.testing.assert_allclose(compose_rpy(*rpy), rotation(0.8), atol=1e-12)


def test_yaw_rotates_x_onto_y():
    rotated = compose_rpy(0, 0, np.pi / 2) @ [1.0, 0.0, 0.0]
    np.testing.assert_allclose(rotated, [0.0, 1.0, 0.0], atol=1e-12)


def test_origin_matrix():
    matrix = origin_matrix(xyz=[1, 2, 3], rpy=[0.1, 0.2, 0.3])
    np.testing.assert_array_equal(matrix[:3, 3], [1, 2, 3])
    np.testing.assert_array_equal(matrix[:3, :3], compose_rpy(0.1, 0.2, 0.3))
    np.testing.assert_array_equal(matrix[3], [0, 0, 0, 1])


def test_origin_matrix_defaults():
    np.testing.assert_array_equal(origin_matrix(), np.eye(4))
