"""A voxel-wise view of a volume resliced onto another grid."""

import logging
import numpy as np
from ..errors import DimensionError
from ..interpolate import get_interpolator
from ..space.grid import Grid
from ..space.transform import AffineTransform
from .oversample import make_oversampling_plan

logger = logging.getLogger(__name__)


class Reslice:
    """Interpolated values of a volume on the lattice of a reference grid.

    A ``Reslice`` object looks like a volume with the shape, voxel size
    and orientation of the reference grid, whose values are interpolated
    on the fly from the original volume. It is a cursor: move it with
    ``move_index`` (or ``set_index``) and read the value under it with
    ``value``. Axes beyond the third are not resliced; they are
    forwarded to the original volume.

    An additional transform can be applied to the data. It maps world
    coordinates of the reference grid to world coordinates of the
    original volume.

    To avoid aliasing when a high resolution volume is sparsely sampled,
    several samples may be drawn at regular sub-voxel intervals and
    averaged. By default, the number of samples along each axis is
    estimated from the voxel-to-voxel mapping: it is the length, in
    original voxels, of a unit step along that axis of the reference,
    rounded up. A reference grid that is finer than the original volume
    is therefore never oversampled. Sub-samples that fall
    outside the original field-of-view (or that evaluate to a non-finite
    value) contribute zero, but the average is always normalised by the
    total number of sub-samples: voxels that straddle the border of the
    field-of-view are therefore attenuated.

    Examples
    --------
    >>> source = Linear(data, grid=input_grid)
    >>> resliced = Reslice(source, reference_grid)
    >>> out = copy_volume(resliced)

    """

    def __init__(self, original, reference, transform=None, oversample=None,
                 out_of_bounds=None, *, input_grid=None, interpolator=1):
        """

        Parameters
        ----------
        original : Interpolator or array_like
            Interpolated source. If an array is given, it is wrapped in
            an interpolator of class ``interpolator``.
        reference : Grid
            Grid onto which the volume is resliced.
        transform : AffineTransform or (4, 4) array_like, default=identity
            Reference world to original world transform.
        oversample : int or sequence[int], default=auto
            Oversampling factor along each spatial axis.
            ``[1, 1, 1]`` disables oversampling.
        out_of_bounds : scalar, optional
            Value used when sampling outside the original
            field-of-view. Only used to wrap arrays.

        Other Parameters
        ----------------
        input_grid : Grid, default=original.grid
            Grid of the original volume. Arrays without a grid get an
            identity voxel-to-world transform.
        interpolator : {0, 1, 3, 'nearest', 'linear', 'cubic'} or type, default=1
            Interpolator used to wrap arrays.

        Raises
        ------
        DimensionError
            If a grid or the original volume has fewer than three axes,
            or if the input grid does not have the shape of the volume.
        OversampleError
            If explicit oversampling factors are not greater than zero.
        """
        if not hasattr(original, 'value_at'):
            original = np.asarray(original)
            if input_grid is None:
                input_grid = Grid(original.shape)
            klass = get_interpolator(interpolator)
            original = klass(original, out_of_bounds=out_of_bounds,
                             grid=input_grid)
        input_grid = input_grid if input_grid is not None \
            else getattr(original, 'grid', None)
        if input_grid is None:
            input_grid = Grid(original.shape)
        if not isinstance(input_grid, Grid) or not isinstance(reference, Grid):
            raise TypeError('Grids must be Grid objects. Got {} and {}.'
                            .format(type(input_grid), type(reference)))
        if original.ndim < 3:
            raise DimensionError('Resliced volumes must have at least three '
                                 'axes. Got {}.'.format(original.ndim))
        if tuple(input_grid.shape) != tuple(original.shape):
            raise DimensionError('Input grid shape {} does not match volume '
                                 'shape {}.'.format(input_grid.shape,
                                                    original.shape))

        self.interp = original
        self.reference = reference
        self.input_grid = input_grid
        self._x = [0, 0, 0]
        self._shape = tuple(reference.spatial_shape)
        self._spacing = tuple(reference.spatial_spacing)

        # Voxel (reference) -> world (reference) -> world (original)
        #                   -> voxel (original)
        transform = AffineTransform(transform)
        self._direct_transform = input_grid.transform.solve(
            transform @ reference.transform)
        logger.debug('voxel-to-voxel mapping: {}'
                     .format(self._direct_transform))

        self._plan = make_oversampling_plan(self._direct_transform, oversample)
        if self._plan.active:
            self._offsets = self._plan.offsets()
        else:
            self._offsets = None
        self.reset()

    @property
    def transform(self):
        """Voxel-to-world transform of the output (= reference) grid."""
        return self.reference.transform

    @property
    def direct_transform(self):
        """Output voxel to input voxel mapping."""
        return self._direct_transform

    @property
    def oversampling(self):
        return self._plan

    @property
    def name(self):
        return self.interp.name

    @property
    def ndim(self):
        return self.interp.ndim

    def size(self, axis):
        return self._shape[axis] if axis < 3 else self.interp.size(axis)

    def voxel_size(self, axis):
        return self._spacing[axis] if axis < 3 else self.interp.voxel_size(axis)

    @property
    def shape(self):
        return tuple(self.size(n) for n in range(self.ndim))

    @property
    def spacing(self):
        return tuple(self.voxel_size(n) for n in range(self.ndim))

    def reset(self):
        self._x[0] = self._x[1] = self._x[2] = 0
        self.interp.reset()

    def index(self, axis):
        return self._x[axis] if axis < 3 else self.interp.index[axis]

    def move_index(self, axis, increment=1):
        """Move the cursor along an axis. Bounds are not checked."""
        if axis < 3:
            self._x[axis] += increment
        else:
            self.interp.index[axis] += increment

    def set_index(self, axis, value):
        self.move_index(axis, value - self.index(axis))

    def value(self):
        """Value at the current position of the cursor."""
        x = np.asarray(self._x, dtype=np.float64)

        if self._offsets is None:
            value, _ = self.interp.value_at(self._direct_transform.apply(x))
            return value

        result = 0.
        positions = self._direct_transform.apply(x + self._offsets)
        for position in positions:
            value, valid = self.interp.value_at(position)
            if not valid or not np.isfinite(value):
                continue
            result += value
        return result * self._plan.normalization

    def __repr__(self):
        return 'Reslice(shape={}, oversampling={})'.format(
            self.shape, list(self._plan.factors))
