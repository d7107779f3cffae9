"""Drivers that evaluate a ``Reslice`` over its whole extent."""

import numpy as np
from ..interpolate import get_interpolator
from ..space.grid import Grid
from .adapter import Reslice
from ..hints import Array, Matrix, Order, Oversample


def identity_grid(shape, dtype=None):
    """Generate a dense identity grid

    Parameters
    ----------
    shape : iterable of length D
        Shape of the dense grid.
    dtype : type, default=float64
        Output data type.

    Returns
    -------
    grid : np.ndarray of shape (*shape, D)
        Dense identity grid.

    """
    dtype = dtype or np.float64
    return np.stack(np.meshgrid(*(np.arange(s, dtype=dtype) for s in shape),
                                indexing='ij'), axis=-1)


def _as_output(out, dtype):
    if dtype is None:
        return out
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.integer):
        out = np.rint(np.nan_to_num(out, nan=0))
    return out.astype(dtype)


def copy_volume(resliced, dtype=None):
    """Copy the values of a resliced volume into a new array.

    The cursor visits every output voxel in C order, one value at a time.

    Parameters
    ----------
    resliced : Reslice
        Resliced volume (or any object with the same cursor interface).
    dtype : np.dtype, optional
        Output data type. Default: float64.

    Returns
    -------
    out : np.ndarray of shape ``resliced.shape``

    """
    shape = resliced.shape
    out = np.empty(shape, dtype=np.float64)
    resliced.reset()
    for index in np.ndindex(*shape):
        for axis, i in enumerate(index):
            if resliced.index(axis) != i:
                resliced.set_index(axis, i)
        out[index] = resliced.value()
    resliced.reset()
    return _as_output(out, dtype)


def resample(resliced, dtype=None):
    """Evaluate a resliced volume on its whole extent, in a vectorized way.

    The result is the same as ``copy_volume``: each sub-sample that is
    out-of-bounds or non-finite contributes zero to the average, which
    is normalised by the total number of sub-samples.

    Parameters
    ----------
    resliced : Reslice
    dtype : np.dtype, optional
        Output data type. Default: float64.

    Returns
    -------
    out : np.ndarray of shape ``resliced.shape``

    """
    shape = resliced.shape
    plan = resliced.oversampling
    mapping = resliced.direct_transform
    interp = resliced.interp

    grid = identity_grid(shape[:3])
    out = np.empty(shape, dtype=np.float64)
    resliced.reset()
    for extra in np.ndindex(*shape[3:]):
        interp.index[3:] = list(extra)
        block = (slice(None),) * 3 + extra
        if not plan.active:
            out[block], _ = interp.values_at(mapping.apply(grid))
            continue
        acc = np.zeros(shape[:3], dtype=np.float64)
        for offset in plan.offsets():
            values, valid = interp.values_at(mapping.apply(grid + offset))
            valid &= np.isfinite(values)
            acc += np.where(valid, values, 0)
        out[block] = acc * plan.normalization
    resliced.reset()
    return _as_output(out, dtype)


def reslice_array(x, input_grid, reference, transform=None, *, order=1,
                  oversample=None, out_of_bounds=None, dtype=None,
                  vectorize=True):
    # type: (Array, Grid, Grid, Matrix, Order, Oversample, float, object, bool) -> np.ndarray
    """Reslice an array onto a reference grid.

    Parameters
    ----------
    x : array_like of shape (X, Y, Z, *other)
        Input volume.
    input_grid : Grid or (4, 4) array_like
        Grid of the input volume, or its voxel-to-world matrix.
    reference : Grid
        Output grid.
    transform : AffineTransform or (4, 4) array_like, default=identity
        Reference world to input world transform.

    Other Parameters
    ----------------
    order : {0, 1, 3, 'nearest', 'linear', 'cubic'} or type, default=1
        Interpolator.
    oversample : int or sequence[int], default=auto
        Oversampling factors. ``1`` disables oversampling.
    out_of_bounds : scalar, default=NaN (floats) or 0 (integers)
        Value of voxels that fall outside the input field-of-view.
    dtype : np.dtype, optional
        Output data type. Default: float64.
    vectorize : bool, default=True
        Evaluate all voxels at once rather than with the cursor.

    Returns
    -------
    y : np.ndarray
        Resliced volume, with shape ``reference.shape[:3] + x.shape[3:]``.

    """
    x = np.asarray(x)
    if not isinstance(input_grid, Grid):
        input_grid = Grid.from_affine(input_grid, x.shape)
    klass = get_interpolator(order)
    interp = klass(x, out_of_bounds=out_of_bounds, grid=input_grid)
    resliced = Reslice(interp, reference, transform, oversample)
    if vectorize:
        return resample(resliced, dtype)
    return copy_volume(resliced, dtype)
