import math

import numpy as np
import pytest

from canis.transform import Transform, look_at, perspective, rotate, scale, translate


def _apply(matrix, point):
    result = matrix @ np.array([*point, 1.0])
    return result[:3] / result[3]


def test_translate_moves_point():
    matrix = translate(np.identity(4), (1.0, 2.0, 3.0))
    np.testing.assert_allclose(_apply(matrix, (4.0, 5.0, 6.0)), [5.0, 7.0, 9.0])


def test_rotation_preserves_length_and_orientation():
    matrix = rotate(np.identity(4), 0.7, (1.0, 2.0, 3.0))
    point = np.array([3.0, -1.0, 2.0])
    assert np.linalg.norm(_apply(matrix, point)) == pytest.approx(np.linalg.norm(point))
    assert np.linalg.det(matrix) == pytest.approx(1.0)


def test_rotation_inverse():
    forward = rotate(np.identity(4), 1.2, (0.0, 1.0, 1.0))
    back = rotate(forward, -1.2, (0.0, 1.0, 1.0))
    np.testing.assert_allclose(back, np.identity(4), atol=1e-12)


def test_rotation_keeps_axis_fixed():
    axis = (1.0, 1.0, 0.0)
    matrix = rotate(np.identity(4), math.pi / 3, axis)
    np.testing.assert_allclose(_apply(matrix, axis), axis, atol=1e-12)


def test_rotate_zero_axis_rejected():
    with pytest.raises(ValueError):
        rotate(np.identity(4), 1.0, (0.0, 0.0, 0.0))


def test_scale_diagonal():
    matrix = scale(np.identity(4), (2.0, 3.0, 4.0))
    np.testing.assert_allclose(np.diag(matrix), [2.0, 3.0, 4.0, 1.0])


def test_perspective_maps_planes_to_ndc():
    proj = perspective(math.radians(45.0), 1.5, 0.1, 100.0)
    assert _apply(proj, (0.0, 0.0, -0.1))[2] == pytest.approx(-1.0)
    assert _apply(proj, (0.0, 0.0, -100.0))[2] == pytest.approx(1.0)


def test_perspective_zero_aspect_rejected():
    with pytest.raises(ValueError):
        perspective(1.0, 0.0, 0.1, 10.0)


def test_look_at_eye_to_origin_and_center_on_negative_z():
    eye = (1.0, 2.0, 3.0)
    center = (4.0, 2.0, 7.0)
    view = look_at(eye, center, (0.0, 1.0, 0.0))
    np.testing.assert_allclose(_apply(view, eye), [0.0, 0.0, 0.0], atol=1e-12)
    mapped = _apply(view, center)
    np.testing.assert_allclose(mapped[:2], [0.0, 0.0], atol=1e-12)
    assert mapped[2] == pytest.approx(-5.0)


def test_default_transform_is_identity():
    np.testing.assert_allclose(Transform().matrix(), np.identity(4))


def test_transform_position_and_scale():
    transform = Transform(position=(1.0, 2.0, 3.0), scale=(2.0, 2.0, 2.0))
    matrix = transform.matrix()
    np.testing.assert_allclose(_apply(matrix, (0.0, 0.0, 0.0)), [1.0, 2.0, 3.0])
    np.testing.assert_allclose(_apply(matrix, (1.0, 0.0, 0.0)), [3.0, 2.0, 3.0])


def test_transform_matches_composition():
    transform = Transform(position=(1.0, 0.0, -2.0), rotation=(0.1, 0.2, 0.3), scale=(1.0, 2.0, 3.0))
    expected = translate(np.identity(4), transform.position)
    expected = rotate(expected, 0.1, (1.0, 0.0, 0.0))
    expected = rotate(expected, 0.2, (0.0, 1.0, 0.0))
    expected = rotate(expected, 0.3, (0.0, 0.0, 1.0))
    expected = scale(expected, (1.0, 2.0, 3.0))
    np.testing.assert_allclose(transform.matrix(), expected)