import numpy as np


def lmdiv(A, B, rcond=None):
    r"""Left matrix division A\B.

    Parameters
    ----------
    A : (M, [N]) array_like
    B : (M, [K]) array_like

    Returns
    -------
    X : (N, [K]) np.ndarray

    """
    A = np.asarray(A)
    B = np.asarray(B)
    if len(A.shape) == 1:
        A = A[..., None]
    X = np.linalg.lstsq(A, B, rcond=rcond)[0]
    return X


def homogeneous(mat, dim=3):
    """Complete a (D, D+1) affine matrix into a (D+1, D+1) one.

    Parameters
    ----------
    mat : (D, D+1) or (D+1, D+1) array_like
    dim : int, default=3

    Returns
    -------
    mat : (D+1, D+1) np.ndarray[float64]

    """
    mat = np.asarray(mat, dtype=np.float64)
    if mat.shape == (dim, dim+1):
        pad = np.zeros((1, dim+1), dtype=np.float64)
        pad[0, -1] = 1
        mat = np.concatenate((mat, pad), axis=0)
    if mat.shape != (dim+1, dim+1):
        raise ValueError('Expected a ({0}, {1}) or ({1}, {1}) matrix. '
                         'Got {2}.'.format(dim, dim+1, mat.shape))
    return mat
