"""Description of sampling lattices."""

from warnings import warn
import numpy as np
from .transform import AffineTransform
from .affine import voxel_size as affine_voxel_size
from ..errors import DimensionError
from ..utils import argdef, argpad


class Grid:
    """Read-only description of a lattice.

    A grid is defined by its shape (number of voxels along each axis),
    its voxel size along each axis and a transform mapping voxel
    indices to world coordinates. Only the first three axes are
    spatial; further axes (e.g., a series of volumes) are carried along
    but never resampled.
    """

    __slots__ = ('_shape', '_spacing', '_transform')

    def __init__(self, shape, spacing=None, transform=None):
        """

        Parameters
        ----------
        shape : sequence[int]
            Number of voxels along each axis (at least three).
        spacing : float or sequence[float], default=from transform
            Voxel size along each axis. Defaults to the norm of each
            column of the transform's linear part, and 1 for non
            spatial axes.
        transform : AffineTransform or (4, 4) array_like, optional
            Voxel-to-world transform. It includes voxel sizes, as in
            nibabel. Defaults to a diagonal scaling by ``spacing``.
        """
        shape = tuple(int(s) for s in shape)
        if len(shape) < 3:
            raise DimensionError('Grids must have at least three axes. '
                                 'Got shape {}.'.format(shape))
        if any(s < 1 for s in shape):
            raise ValueError('Grid sizes must be positive. Got {}.'
                             .format(shape))
        if spacing is not None:
            spacing = [float(v) for v in np.ravel(spacing)]
            spacing = argpad(spacing, max(3, len(spacing)))
            spacing += [1.] * (len(shape) - len(spacing))
            spacing = tuple(spacing[:len(shape)])
            if any(not v > 0 for v in spacing[:3]):
                raise ValueError('Grid spacing must be positive. Got {}.'
                                 .format(spacing))
        if transform is None:
            # Axis-aligned lattice, first voxel at the origin
            transform = AffineTransform.from_parts(
                linear=np.diag(argdef(spacing, (1.,) * 3)[:3]))
        elif not isinstance(transform, AffineTransform):
            transform = AffineTransform(transform)
        if spacing is None:
            spacing = tuple(float(v) for v in affine_voxel_size(transform.matrix))
            spacing += (1.,) * (len(shape) - 3)
            if any(not v > 0 for v in spacing[:3]):
                raise ValueError('Grid transform is degenerate: {}.'
                                 .format(transform))

        self._shape = shape
        self._spacing = spacing
        self._transform = transform

    @classmethod
    def from_affine(cls, affine, shape, spacing=None):
        """Build a grid from an orientation matrix and a shape."""
        return cls(shape, spacing, AffineTransform(affine))

    @classmethod
    def from_image(cls, x):
        """Build the grid of a volume.

        Parameters
        ----------
        x : str or nib.SpatialImage or array_like
            Volume on disk or in memory. Arrays get a default
            orientation matrix centered on the field-of-view.

        """
        from ..io import VolumeReader
        info = VolumeReader().inspect(x)
        return cls.from_info(info)

    @classmethod
    def from_info(cls, info):
        """Build a grid from the header information of ``VolumeReader``."""
        shape = info['shape']
        zooms = info.get('zooms')
        spacing = None
        if zooms is not None and len(zooms) >= 3 and all(z > 0 for z in zooms[:3]):
            spacing = zooms
            affine_vs = affine_voxel_size(info['affine'])
            if not np.allclose(zooms[:3], affine_vs, rtol=1e-3):
                warn('Header zooms {} do not match the voxel size of '
                     'the orientation matrix {}.'
                     .format(tuple(zooms[:3]), tuple(affine_vs)),
                     RuntimeWarning)
        return cls(shape, spacing, info['affine'])

    @property
    def shape(self):
        return self._shape

    @property
    def spacing(self):
        return self._spacing

    @property
    def transform(self):
        return self._transform

    @property
    def affine(self):
        return self._transform.matrix

    @property
    def ndim(self):
        return len(self._shape)

    @property
    def spatial_shape(self):
        return self._shape[:3]

    @property
    def spatial_spacing(self):
        return self._spacing[:3]

    def size(self, axis):
        return self._shape[axis]

    def voxel_size(self, axis):
        return self._spacing[axis]

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return (self._shape == other.shape
                and np.allclose(self._spacing, other.spacing)
                and self._transform == other.transform)

    def __repr__(self):
        return 'Grid(shape={}, spacing={}, transform={})'.format(
            self._shape, tuple(round(v, 6) for v in self._spacing),
            self._transform)
