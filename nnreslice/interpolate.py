"""Interpolators: continuous views of a discrete volume.

An interpolator wraps a volume of three spatial axes (plus, optionally,
any number of non-spatial axes) and evaluates it at continuous positions
expressed in voxel coordinates. The non-spatial axes are addressed by a
mutable integer cursor (``index``), so that a 4D series is interpolated
one 3D volume at a time.

Positions are valid if they are finite and lie in ``[-0.5, size-0.5]``
along each spatial axis, *i.e.*, within the field-of-view delimited by
the outer edges of the border voxels. Invalid positions evaluate to the
out-of-bounds value.
"""

import itertools
from abc import ABC, abstractmethod
import numpy as np
from scipy.ndimage import spline_filter1d, map_coordinates
from .errors import DimensionError
from .utils import argdef, default_out_of_bounds_value


def bound_nearest(i, n):
    """Clamp integer indices into ``[0, n-1]``."""
    return np.clip(np.asarray(i), 0, np.asarray(n) - 1)


class Interpolator(ABC):
    """Base class for interpolators.

    Subclasses implement ``sample``, which evaluates the current 3D
    volume at positions known to be inside the field-of-view.
    """

    def __init__(self, volume, out_of_bounds=None, grid=None, name=None):
        """

        Parameters
        ----------
        volume : array_like of shape (X, Y, Z, *other)
            Input volume.
        out_of_bounds : scalar, default=NaN (floats) or 0 (integers)
            Value returned when sampling outside the field-of-view.
        grid : Grid, optional
            Grid of the volume, used to report voxel sizes.
            Its shape must be the shape of the volume.
        name : str, optional
            Name of the volume (e.g., its file name).
        """
        volume = np.asarray(volume)
        if volume.ndim < 3:
            raise DimensionError('Interpolated volumes must have at least '
                                 'three axes. Got shape {}.'
                                 .format(volume.shape))
        if grid is not None and tuple(grid.shape) != tuple(volume.shape):
            raise DimensionError('Grid shape {} does not match volume shape '
                                 '{}.'.format(grid.shape, volume.shape))
        self.volume = volume
        self.grid = grid
        self.name = argdef(name, '')
        self.out_of_bounds = argdef(out_of_bounds,
                                    default_out_of_bounds_value(volume.dtype))
        self.index = [0] * volume.ndim
        self._upper = np.asarray(volume.shape[:3], dtype=np.float64) - 0.5

    @property
    def ndim(self):
        return self.volume.ndim

    @property
    def shape(self):
        return tuple(self.volume.shape)

    def size(self, axis):
        return self.volume.shape[axis]

    def voxel_size(self, axis):
        if self.grid is None:
            return 1.
        return self.grid.voxel_size(axis)

    def reset(self):
        for n in range(3, self.ndim):
            self.index[n] = 0

    def _current(self, data):
        """3D slice of ``data`` selected by the non-spatial cursor."""
        return data[(slice(None),) * 3 + tuple(self.index[3:])]

    def valid(self, positions):
        """Mask of positions that are finite and inside the field-of-view.

        Parameters
        ----------
        positions : (..., 3) array_like

        Returns
        -------
        mask : (...) np.ndarray[bool]

        """
        positions = np.asarray(positions, dtype=np.float64)
        with np.errstate(invalid='ignore'):
            inside = (positions >= -0.5) & (positions <= self._upper)
        return np.all(inside & np.isfinite(positions), axis=-1)

    def value_at(self, position):
        """Evaluate the volume at a continuous voxel position.

        Parameters
        ----------
        position : (3,) array_like
            Position in voxel coordinates.

        Returns
        -------
        value : scalar
            Interpolated value, or the out-of-bounds value.
        valid : bool
            Whether the position lies inside the field-of-view.

        """
        position = np.asarray(position, dtype=np.float64)
        if not self.valid(position):
            return self.out_of_bounds, False
        return self.sample(position[None, :])[0], True

    def values_at(self, positions):
        """Evaluate the volume at many continuous voxel positions.

        Parameters
        ----------
        positions : (..., 3) array_like
            Positions in voxel coordinates.

        Returns
        -------
        values : (...) np.ndarray
            Interpolated values, or the out-of-bounds value.
        valid : (...) np.ndarray[bool]
            Whether each position lies inside the field-of-view.

        """
        positions = np.asarray(positions, dtype=np.float64)
        valid = self.valid(positions)
        safe = np.where(valid[..., None], positions, 0)
        values = self.sample(safe)
        return np.where(valid, values, self.out_of_bounds), valid

    @abstractmethod
    def sample(self, positions):
        """Evaluate the current 3D volume at (..., 3) inbound positions."""
        pass


class Nearest(Interpolator):
    """Nearest neighbour interpolation."""

    def sample(self, positions):
        data = self._current(self.volume)
        index = np.floor(positions + 0.5).astype(np.int64)
        index = bound_nearest(index, data.shape)
        return data[index[..., 0], index[..., 1], index[..., 2]]


class Linear(Interpolator):
    """Trilinear interpolation.

    Corners that fall outside the volume are replaced by the nearest
    border voxel.
    """

    corners = list(itertools.product([False, True], repeat=3))

    def sample(self, positions):
        data = self._current(self.volume)

        # Weights
        corner0 = np.floor(positions)
        weight1 = positions - corner0
        weight0 = 1 - weight1
        corner0 = corner0.astype(np.int64)

        # Interpolate
        value = np.zeros(positions.shape[:-1], dtype=np.float64)
        for corner in self.corners:
            w = np.prod(np.where(corner, weight1, weight0), axis=-1)
            index = bound_nearest(corner0 + np.asarray(corner, dtype=np.int64),
                                  data.shape)
            x = data[index[..., 0], index[..., 1], index[..., 2]]
            # Corners with zero weight must not propagate NaNs
            value += np.where(w == 0, 0, w * x)
        return value


class Cubic(Interpolator):
    """Cubic B-spline interpolation.

    Spline coefficients are computed once, along the three spatial axes,
    when the interpolator is built.
    """

    mode = 'mirror'

    def __init__(self, volume, *args, **kwargs):
        super().__init__(volume, *args, **kwargs)
        coeff = np.array(self.volume, dtype=np.float64)
        for axis in range(3):
            coeff = spline_filter1d(coeff, order=3, axis=axis,
                                    mode=self.mode, output=coeff)
        self.coeff = coeff

    def sample(self, positions):
        data = self._current(self.coeff)
        coords = np.moveaxis(positions, -1, 0)
        return map_coordinates(data, coords, order=3, mode=self.mode,
                               prefilter=False)


interpolators = {
    0: Nearest,
    'nearest': Nearest,
    1: Linear,
    'linear': Linear,
    3: Cubic,
    'cubic': Cubic,
}


def get_interpolator(order):
    """Return an interpolator class.

    Parameters
    ----------
    order : {0, 1, 3, 'nearest', 'linear', 'cubic'} or callable
        Interpolation order or name. Classes (or any factory with the
        signature of ``Interpolator``) are returned unchanged.

    Returns
    -------
    klass : type

    """
    if callable(order):
        return order
    if isinstance(order, str):
        order = order.lower()
    try:
        return interpolators[order]
    except (KeyError, TypeError):
        raise ValueError('Interpolation order {} not implemented'
                         .format(order)) from None
