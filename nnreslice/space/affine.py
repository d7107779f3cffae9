"""Utilities related to affine spaces."""

import numpy as np


def voxel_size(mat):
    """Return the voxel size associated with an affine matrix.

    Parameters
    ----------
    mat : (dim+1, dim+1) array_like
        Orientation matrix, mapping voxels to world space

    Returns
    -------
    vs : (dim,) np.ndarray
        Norm of each column of the linear part.

    """
    mat = np.asarray(mat, dtype=np.float64)
    return np.sqrt((mat[:-1, :-1] ** 2).sum(axis=0))
