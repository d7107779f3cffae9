"""Tests for affine transforms and voxel sizes."""

import numpy as np
import pytest

from nnreslice.space import AffineTransform, voxel_size


def _rigid(translation=(0, 0, 0), angles=(0, 0, 0)):
    """Rotations about the first, second then third axis, then a shift."""
    mat = np.eye(4)
    for axis, angle in enumerate(angles):
        i, j = [a for a in range(3) if a != axis]
        rot = np.eye(4)
        rot[i, i] = rot[j, j] = np.cos(angle)
        rot[i, j], rot[j, i] = -np.sin(angle), np.sin(angle)
        mat = rot @ mat
    mat[:3, 3] = translation
    return mat


def _translation(*t):
    return AffineTransform.from_parts(translation=t)


def _scaling(*s):
    return AffineTransform.from_parts(linear=np.diag(s))


class TestAffineTransform:

    def test_default_is_identity(self):
        assert AffineTransform().is_identity()
        assert AffineTransform.identity() == AffineTransform(np.eye(4))

    def test_accepts_3x4_matrix(self):
        mat = np.eye(4)[:3]
        mat[0, 3] = 2
        t = AffineTransform(mat)
        assert t.matrix.shape == (4, 4)
        np.testing.assert_array_equal(t.matrix[3], [0, 0, 0, 1])
        np.testing.assert_array_equal(t.translation, [2, 0, 0])

    def test_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            AffineTransform(np.eye(3))

    def test_matrix_is_read_only(self):
        t = AffineTransform()
        with pytest.raises(ValueError):
            t.matrix[0, 0] = 5

    def test_compose_applies_right_operand_first(self):
        """(A @ B)(x) == A(B(x))"""
        a = _translation(1, 0, 0)
        b = _scaling(2, 2, 2)
        np.testing.assert_allclose((a @ b)([1, 1, 1]), [3, 2, 2])
        np.testing.assert_allclose((b @ a)([1, 1, 1]), [4, 2, 2])
        assert a.compose(b) == a @ b

    def test_inverse(self):
        t = AffineTransform(_rigid([1, 2, 3], [0.1, -0.2, 0.3]))
        assert (t.inverse() @ t).is_identity(atol=1e-10)
        assert (t @ t.inverse()).is_identity(atol=1e-10)

    def test_singular_inverse_raises(self):
        t = _scaling(1, 0, 1)
        with pytest.raises(np.linalg.LinAlgError):
            t.inverse()
        with pytest.raises(np.linalg.LinAlgError):
            t.solve(AffineTransform())

    def test_solve_matches_inverse(self):
        a = AffineTransform(_rigid([1, 0, -1], [0.3, 0, 0])) \
            @ _scaling(2, 1, 0.5)
        b = _translation(0, 4, 0)
        assert a.solve(b) == a.inverse() @ b

    def test_apply_many_points(self):
        t = _translation(1, 2, 3) @ _scaling(2, 2, 2)
        points = np.zeros((4, 5, 3))
        out = t(points)
        assert out.shape == (4, 5, 3)
        np.testing.assert_allclose(out[..., 0], 1)
        np.testing.assert_allclose(out[..., 2], 3)

    def test_apply_rejects_bad_points(self):
        with pytest.raises(ValueError):
            AffineTransform().apply([1, 2])

    def test_equality_is_approximate(self):
        assert _translation(1, 0, 0) == _translation(1 + 1e-12, 0, 0)
        assert _translation(1, 0, 0) != _translation(1.1, 0, 0)


class TestVoxelSize:

    def test_rigid_preserves_voxel_size(self):
        mat = _rigid([5, -3, 2], [0.4, 0.2, -1.1])
        np.testing.assert_allclose(voxel_size(mat), [1, 1, 1])
        np.testing.assert_allclose(mat[:3, :3] @ mat[:3, :3].T, np.eye(3),
                                   atol=1e-12)

    def test_scaled_rotation(self):
        mat = _rigid(angles=[0, 0, np.pi / 3]) @ np.diag([2, 3, 4, 1])
        np.testing.assert_allclose(voxel_size(mat), [2, 3, 4])
        np.testing.assert_allclose(mat[:3, 2], [0, 0, 4], atol=1e-12)

    def test_shear(self):
        mat = np.eye(4)
        mat[0, 1] = 1
        np.testing.assert_allclose(voxel_size(mat), [1, np.sqrt(2), 1])
