"""Immutable affine coordinate transforms."""

import numpy as np
from ..linalg import lmdiv, homogeneous


class AffineTransform:
    """A 3D affine mapping between two coordinate spaces.

    The transform is stored as a read-only (4, 4) homogeneous matrix.
    Points are column vectors, so that ``(A @ B)(x) == A(B(x))``.
    """

    __slots__ = ('_matrix',)

    def __init__(self, matrix=None):
        """

        Parameters
        ----------
        matrix : (3, 4) or (4, 4) array_like, default=identity
            Homogeneous affine matrix.
        """
        if matrix is None:
            matrix = np.eye(4)
        elif isinstance(matrix, AffineTransform):
            matrix = matrix.matrix
        matrix = homogeneous(matrix).copy()
        matrix.setflags(write=False)
        self._matrix = matrix

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_parts(cls, linear=None, translation=None):
        """Build a transform from its linear part and translation."""
        matrix = np.eye(4)
        if linear is not None:
            matrix[:3, :3] = linear
        if translation is not None:
            matrix[:3, 3] = translation
        return cls(matrix)

    @property
    def matrix(self):
        return self._matrix

    @property
    def linear(self):
        return self._matrix[:3, :3]

    @property
    def translation(self):
        return self._matrix[:3, 3]

    def compose(self, other):
        """Transform that applies ``other`` first, then ``self``."""
        other = other if isinstance(other, AffineTransform) \
            else AffineTransform(other)
        return AffineTransform(self._matrix @ other.matrix)

    def __matmul__(self, other):
        if not isinstance(other, (AffineTransform, np.ndarray, list, tuple)):
            return NotImplemented
        return self.compose(other)

    def inverse(self):
        """Inverse transform.

        Raises
        ------
        numpy.linalg.LinAlgError
            If the matrix is singular.
        """
        return AffineTransform(np.linalg.inv(self._matrix))

    def solve(self, other):
        r"""Compose ``inverse(self)`` with ``other`` without forming the
        inverse explicitly (``self \ other``)."""
        other = other if isinstance(other, AffineTransform) \
            else AffineTransform(other)
        if np.linalg.matrix_rank(self._matrix) < 4:
            raise np.linalg.LinAlgError('Singular matrix')
        return AffineTransform(lmdiv(self._matrix, other.matrix))

    def apply(self, points):
        """Map points through the transform.

        Parameters
        ----------
        points : (3,) or (..., 3) array_like

        Returns
        -------
        points : (3,) or (..., 3) np.ndarray[float64]

        """
        points = np.asarray(points, dtype=np.float64)
        if points.shape[-1] != 3:
            raise ValueError('Points must have 3 coordinates. Got shape {}.'
                             .format(points.shape))
        return points @ self.linear.T + self.translation

    def __call__(self, points):
        return self.apply(points)

    def is_identity(self, atol=1e-12):
        return np.allclose(self._matrix, np.eye(4), rtol=0, atol=atol)

    def __eq__(self, other):
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return np.allclose(self._matrix, other.matrix)

    def __repr__(self):
        rows = np.array2string(self._matrix, precision=4,
                               suppress_small=True, separator=', ')
        return 'AffineTransform({})'.format(rows)
