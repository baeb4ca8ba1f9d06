"""Tests for the Affine3 transform."""

import numpy as np
import pytest

from passthrough.core.transform import Affine3, is_affine


def test_identity_is_affine():
    """Test that the identity matrix satisfies the affine invariant."""
    identity = Affine3.identity()
    assert identity.is_affine()
    assert np.array_equal(identity.matrix, np.eye(4, dtype=np.float32))
    assert identity.matrix.dtype == np.float32


def test_translation_moves_points():
    """Test that a translation offsets the origin."""
    t = Affine3.translation(1.0, 2.0, -3.0)
    np.testing.assert_array_equal(t.transform_point([0, 0, 0]), [1.0, 2.0, -3.0])
    np.testing.assert_array_equal(t.position, [1.0, 2.0, -3.0])


def test_composition_applies_right_operand_first():
    """Test that a @ b transforms by b, then a."""
    rotate = Affine3.from_trs(rotation=(0.0, np.pi / 2, 0.0))
    move = Affine3.translation(0.0, 0.0, -1.0)

    # Move forward, then turn 90 degrees left around +Y: ends up on -X
    point = (rotate @ move).transform_point([0, 0, 0])
    np.testing.assert_allclose(point, [-1.0, 0.0, 0.0], atol=1e-6)


def test_from_trs_order():
    """Test Scale -> Rotate -> Translate ordering."""
    t = Affine3.from_trs(
        translation=(0.0, 1.0, 0.0),
        rotation=(0.0, 0.0, np.pi / 2),
        scale=(2.0, 2.0, 2.0),
    )
    # (1, 0, 0) scaled to (2, 0, 0), rotated about Z to (0, 2, 0), moved up 1
    np.testing.assert_allclose(t.transform_point([1, 0, 0]), [0.0, 3.0, 0.0], atol=1e-6)
    assert t.is_affine()


def test_from_pose_quaternion():
    """Test building a head pose from position and orientation."""
    half = np.sqrt(0.5)
    # 90 degrees around +Y, (x, y, z, w)
    pose = Affine3.from_pose([0.0, 1.6, 0.0], [0.0, half, 0.0, half])

    np.testing.assert_allclose(pose.position, [0.0, 1.6, 0.0], atol=1e-6)
    np.testing.assert_allclose(
        pose.transform_point([0, 0, -1]), [-1.0, 1.6, 0.0], atol=1e-6
    )


def test_from_rows_is_row_major():
    """Test that the last column of the rows holds the translation."""
    rows = [
        [1.0, 0.0, 0.0, 5.0],
        [0.0, 1.0, 0.0, 6.0],
        [0.0, 0.0, 1.0, 7.0],
        [0.0, 0.0, 0.0, 1.0],
    ]
    t = Affine3.from_rows(rows)
    np.testing.assert_array_equal(t.position, [5.0, 6.0, 7.0])
    assert t.to_rows() == rows


@pytest.mark.parametrize("bottom_row", [
    [0.0, 0.0, 0.0, 2.0],
    [0.0, 0.0, 1.0, 1.0],
    [0.5, 0.0, 0.0, 1.0],
    [0.0, 0.0, 0.0, 0.0],
])
def test_from_rows_rejects_projective(bottom_row):
    """Test that matrices with a perspective component are rejected."""
    rows = [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], bottom_row]
    assert not is_affine(rows)
    with pytest.raises(ValueError, match="not affine"):
        Affine3.from_rows(rows)


def test_from_rows_rejects_wrong_shape():
    """Test that only 4x4 matrices are accepted."""
    with pytest.raises(ValueError, match="4x4"):
        Affine3.from_rows([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    assert not is_affine(np.eye(3))


def test_equality_and_copy():
    """Test value equality and that copies are independent."""
    a = Affine3.translation(1.0, 0.0, 0.0)
    b = a.copy()
    assert a == b
    assert a is not b

    b.matrix[0, 3] = 2.0
    assert a != b
    assert a.position[0] == 1.0
