"""Tools for reslicing volumes implemented in an Object-Oriented paradigm."""

# WARNING: reslice.functional imports reslice.object, so the opposite
# import is forbidden

import logging
import numpy as np
from ..io import VolumeReader, VolumeWriter, VolumeConverter, isfile
from ..utils import argpad, argdef
from ..space.grid import Grid
from ..space.affine import voxel_size
from .driver import reslice_array

logger = logging.getLogger(__name__)


def _select_writer(x, writer, prefix):
    """Choose writer based on input type."""
    if writer is not None:
        return writer
    if isfile(x):
        return VolumeWriter(prefix=prefix)
    return VolumeConverter()


class Reslicer:
    """Generic class for reslicing a volume.

    This class uses the input and output affine orientation matrices
    to compute a voxel-to-voxel mapping between two spaces.

    It is used as a base class by most high-level reslicers.
    """

    output_prefix = 'resliced_'

    def __init__(self, output_affine=None, output_shape=None, *,
                 transform=None, order=1, oversample=None,
                 out_of_bounds=None, vectorize=True, writer=None):
        """

        Parameters
        ----------
        output_affine : matrix_like, default=same as input
            Output orientation matrix, mapping voxels to world space

        output_shape : iterable, default=same as input
            Output (3D spatial) shape

        Other Parameters
        ----------------
        transform : matrix_like, default=identity
            Additional transform, mapping output world coordinates to
            input world coordinates.

        order : {0, 1, 3} or type, default=1
            Interpolation order

        oversample : int or iterable[int], default=auto
            Oversampling factor along each spatial axis.
            Oversampling is disabled with ``1``.

        out_of_bounds : scalar, default=NaN (floats) or 0 (integers)
            Value of voxels that fall outside the input field-of-view.

        vectorize : bool, default=True
            Evaluate all voxels at once rather than one at a time.

        writer : io.VolumeWriter, optional
            Writer object for the resliced image
        """
        self.output_affine = output_affine
        self.output_shape = output_shape
        self.transform = transform
        self.order = order
        self.oversample = oversample
        self.out_of_bounds = out_of_bounds
        self.vectorize = vectorize
        self.reader = VolumeReader()
        self.writer = writer

    def _input_grid(self, x, info, input_affine=None):
        if input_affine is None:
            return Grid.from_info(dict(info, shape=x.shape))
        return Grid.from_affine(input_affine, x.shape)

    def __call__(self, x,
                 output_affine=None, output_shape=None, input_affine=None, *,
                 transform=None, order=None, oversample=None,
                 out_of_bounds=None, vectorize=None, writer=None):
        """Reslice a volume to a target shape and orientation (affine matrix).

        Parameters
        ----------
        x : str or array_like
            Input volume.

        output_affine : matrix_like, default=self.output_affine
            Output orientation matrix, mapping voxels to world space

        output_shape : iterable, default=self.output_shape
            Output (3D spatial) shape

        input_affine : matrix_like, default=guessed from input
            Input orientation matrix, mapping voxels to world space

        Other Parameters
        ----------------
        transform : matrix_like, default=self.transform
            Output world to input world transform

        order : {0, 1, 3} or type, default=self.order
            Interpolation order

        oversample : int or iterable[int], default=self.oversample
            Oversampling factors

        out_of_bounds : scalar, default=self.out_of_bounds
            Value of voxels outside the input field-of-view

        vectorize : bool, default=self.vectorize
            Evaluate all voxels at once

        writer : io.VolumeWriter, default=self.writer
            Writer object for the resliced image

        Returns
        -------
        y : np.ndarray or nib.SpatialImage
            Resliced volume

        """

        # Select appropriate writer
        writer = _select_writer(x, argdef(writer, self.writer),
                                self.output_prefix)

        # Load input volume
        x, info = self.reader(x)
        x = x.reshape(tuple(info['shape'][:3]) + x.shape[3:])
        input_grid = self._input_grid(x, info, input_affine)

        # Parse options
        output_affine = argdef(output_affine, self.output_affine,
                               input_grid.affine)
        output_shape = argdef(output_shape, self.output_shape, x.shape[:3])
        output_shape = [int(s) for s in argpad(output_shape, 3)]
        transform = argdef(transform, self.transform)
        order = argdef(order, self.order, 1)
        oversample = argdef(oversample, self.oversample)
        out_of_bounds = argdef(out_of_bounds, self.out_of_bounds)
        vectorize = argdef(vectorize, self.vectorize, True)

        reference = Grid.from_affine(output_affine, output_shape)
        logger.debug('Reslicing {} onto {}'.format(input_grid, reference))

        # Reslice
        y = reslice_array(x, input_grid, reference, transform,
                          order=order, oversample=oversample,
                          out_of_bounds=out_of_bounds, vectorize=vectorize)

        return writer(y, info=info, affine=reference.affine)


class ReslicerLike(Reslicer):
    """Reslice a volume to the space of another volume."""

    def __init__(self, reference_volume=None, **kwargs):
        super().__init__(**kwargs)
        self.reference_volume = reference_volume

    def __call__(self, x, reference_volume=None, input_affine=None, **kwargs):
        """Reslice a volume to the space of another volume.

        Parameters
        ----------
        x : str or array_like
            Input volume.

        reference_volume : file_like or array_like
            Reference volume, whose shape and affine matrix define the
            reference space

        input_affine : matrix_like, default=guessed from input
            Input orientation matrix, mapping voxels to world space

        Other Parameters
        ----------------
        See ``Reslicer``.

        Returns
        -------
        y : np.ndarray or nib.SpatialImage
            Resliced volume

        """

        reference_volume = argdef(reference_volume, self.reference_volume)
        if reference_volume is None:
            raise ValueError('No reference volume provided')
        reference = Grid.from_image(reference_volume)

        return super().__call__(x,
                                output_affine=reference.affine,
                                output_shape=reference.spatial_shape,
                                input_affine=input_affine,
                                **kwargs)


class Resizer(Reslicer):
    """Resize an image by a given factor (greater or lower than one).

    The factor relates to voxel sizes; that is, the ratio between input
    and output voxel sizes is defined by the factor. The top-left corner
    of both field-of-views is used as an anchor. When upsampling by
    an integer factor or downsampling by a divisor of the input size,
    the bottom right corners should also match.

    When output voxels are larger than input voxels, several samples
    are averaged in each output voxel (unless ``oversample=1``).
    """

    output_prefix = 'resized_'

    @staticmethod
    def _transform_factor(f):
        return f

    def __init__(self, factor=None, output_shape=None, **kwargs):
        """

        Parameters
        ----------
        factor : iterable, optional
            Factor by which to scale the voxel size

        output_shape : iterable, default=from factor
            Output shape

        Other Parameters
        ----------------
        See ``Reslicer``.

        """
        super().__init__(output_shape=output_shape, **kwargs)
        self.factor = factor

    def __call__(self, x, factor=None, output_shape=None, **kwargs):
        """

        Parameters
        ----------
        x : str or array_like
            Input volume.

        factor : iterable, default=self.factor
            Factor by which to scale the voxel size

        output_shape : iterable, default=self.output_shape
            Output shape

        Other Parameters
        ----------------
        See ``Reslicer``.

        Returns
        -------
        y : np.ndarray or nib.SpatialImage
            Output volume

        """

        info = self.reader.inspect(x)
        input_shape = info.get('shape')[:3]
        input_affine = argdef(kwargs.pop('input_affine', None),
                              info.get('affine'))

        factor = argdef(factor, self.factor)
        if factor is None:
            raise ValueError('No resizing factor provided')
        factor = argpad(factor, 3)
        factor = [float(self._transform_factor(f)) for f in factor]

        # Compute output affine
        # We want edges (i.e., top-left corners) to be aligned.
        # > We therefore first apply a negative translation of half a
        #   voxel; then scale; then apply a positive translation of
        #   half a (scaled) voxel.
        scale = np.diag(factor + [1.])
        shift = np.eye(4)
        shift[:3, 3] = 0.5
        scale = np.matmul(scale, shift)
        shift[:3, 3] = -0.5
        scale = np.matmul(shift, scale)
        output_affine = np.matmul(input_affine, scale)

        # Compute output shape
        output_shape = argdef(output_shape, self.output_shape)
        if output_shape is None:
            output_shape = [max(1, int(np.floor(i/f)))
                            for i, f in zip(input_shape, factor)]

        return super().__call__(x, input_affine=input_affine,
                                output_affine=output_affine,
                                output_shape=output_shape,
                                **kwargs)


class Upsampler(Resizer):
    """Upsample images by a factor.

    The factor relates to voxel sizes; that is, the ratio between input
    and output voxel sizes is defined by the factor. The top-left corner
    of both field-of-views is used as an anchor. When upsampling by
    an integer factor, the bottom right corners should also match.

    """

    output_prefix = 'upsampled_'

    @staticmethod
    def _transform_factor(f):
        return 1/f


class Downsampler(Resizer):
    """Downsample images by a factor.

    The factor relates to voxel sizes; that is, the ratio between input
    and output voxel sizes is defined by the factor. The top-left corner
    of both field-of-views is used as an anchor. When downsampling
    by a divisor of the input size, the bottom right corners should
    also match.

    """

    output_prefix = 'downsampled_'


class ShapeResizer(Resizer):
    """Resize the shape of an image to match a target shape.

    The top-left and bottom right corners of both field-of-views are
    used as anchors.

    """

    def __init__(self, output_shape=None, **kwargs):
        super().__init__(output_shape=output_shape, **kwargs)

    def __call__(self, x, output_shape=None, **kwargs):
        """

        Parameters
        ----------
        x : str or array_like
            Input volume.

        output_shape : iterable, default=self.output_shape
            Output shape

        Returns
        -------
        y : np.ndarray or nib.SpatialImage
            Output volume

        """

        info = self.reader.inspect(x)
        input_shape = info.get('shape')[:3]

        output_shape = argdef(output_shape, self.output_shape)
        if output_shape is None:
            raise ValueError('No output shape provided')
        output_shape = [int(s) for s in argpad(output_shape, 3)]

        # Compute factor
        factor = [i/o for o, i in zip(output_shape, input_shape)]

        # Call resizer
        return super().__call__(x, factor, output_shape, **kwargs)


class VoxelResizer(Resizer):
    """Resize the voxel size of an image to match a target voxel size.

    The top-left corners of both field-of-views are used as anchors.

    """

    output_prefix = 'rescaled_'

    def __init__(self, output_vs=None, **kwargs):
        super().__init__(**kwargs)
        self.output_vs = output_vs

    def __call__(self, x, output_vs=None, **kwargs):
        """

        Parameters
        ----------
        x : str or array_like
            Input volume.

        output_vs : iterable, default=self.output_vs
            Output voxel size

        Returns
        -------
        y : np.ndarray or nib.SpatialImage
            Output volume

        """

        info = self.reader.inspect(x)
        input_vs = voxel_size(info.get('affine'))

        output_vs = argdef(output_vs, self.output_vs)
        if output_vs is None:
            raise ValueError('No output voxel size provided')
        output_vs = argpad(output_vs, 3)

        # Compute factor
        factor = [o/i for o, i in zip(output_vs, input_vs)]

        # Call resizer
        return super().__call__(x, factor, **kwargs)
