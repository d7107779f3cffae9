"""Anti-aliasing oversampling plans.

When each output voxel covers several input voxels (because the output
grid is coarser, or rotated, with respect to the input grid), sampling
once per output voxel aliases. Instead, several samples are drawn on a
regular sub-voxel lattice and averaged.
"""

import logging
import math
import numpy as np
from ..errors import OversampleError
from ..space.transform import AffineTransform
from ..utils import is_integer_like
from ..hints import Matrix, Oversample

logger = logging.getLogger(__name__)

# Shrinks borderline lengths (1 + rounding noise) so they round to 1.
SHRINK = 0.999


def estimate_oversampling(direct_transform):
    """Estimate per-axis oversampling factors.

    Parameters
    ----------
    direct_transform : AffineTransform or (4, 4) array_like
        Mapping from output voxel indices to input voxel indices.

    Returns
    -------
    factors : tuple[int] of length 3
        ``ceil(0.999 * |M e_i - M 0|)``, *i.e.*, the number of input
        voxels spanned by a unit step along each output axis. Never less
        than one.

    """
    if not isinstance(direct_transform, AffineTransform):
        direct_transform = AffineTransform(direct_transform)
    origin = direct_transform.apply(np.zeros(3))
    factors = []
    for axis in range(3):
        step = np.zeros(3)
        step[axis] = 1
        length = np.linalg.norm(direct_transform.apply(step) - origin)
        factors.append(max(1, int(math.ceil(SHRINK * length))))
    return tuple(factors)


class OversamplingPlan:
    """Sub-voxel sampling lattice.

    Attributes
    ----------
    factors : tuple[int]
        Number of samples along each spatial axis.
    increment : tuple[float]
        Distance between two samples, in output voxels.
    origin_offset : tuple[float]
        Position of the first sample relative to the voxel center, so
        that samples are centered within the voxel.
    normalization : float
        ``1 / prod(factors)``.
    """

    __slots__ = ('factors', 'increment', 'origin_offset', 'normalization')

    def __init__(self, factors):
        factors = tuple(factors)
        if not all(is_integer_like(f) for f in factors):
            raise OversampleError('oversample factors must be integers. '
                                  'Got {}.'.format(factors))
        factors = tuple(int(f) for f in factors)
        if len(factors) != 3 or any(f < 1 for f in factors):
            raise OversampleError('oversample factors must be greater than '
                                  'zero. Got {}.'.format(factors))
        self.factors = factors
        self.increment = tuple(1. / f for f in factors)
        self.origin_offset = tuple(0.5 * (i - 1.) for i in self.increment)
        self.normalization = 1. / self.count

    @property
    def count(self):
        return self.factors[0] * self.factors[1] * self.factors[2]

    @property
    def active(self):
        return self.count > 1

    def offsets(self):
        """Sub-voxel offsets relative to a voxel center.

        Returns
        -------
        offsets : (prod(factors), 3) np.ndarray
            The first axis varies fastest, the third slowest.

        """
        axes = [self.origin_offset[i]
                + np.arange(self.factors[i]) * self.increment[i]
                for i in range(3)]
        z, y, x = np.meshgrid(axes[2], axes[1], axes[0], indexing='ij')
        return np.stack([x.ravel(), y.ravel(), z.ravel()], axis=-1)

    def __eq__(self, other):
        if not isinstance(other, OversamplingPlan):
            return NotImplemented
        return self.factors == other.factors

    def __repr__(self):
        return 'OversamplingPlan(factors={})'.format(list(self.factors))


def make_oversampling_plan(direct_transform, oversample=None):
    # type: (Matrix, Oversample) -> OversamplingPlan
    """Build the oversampling plan of a reslicing operation.

    Parameters
    ----------
    direct_transform : AffineTransform or (4, 4) array_like
        Mapping from output voxel indices to input voxel indices.
    oversample : int or sequence[int], optional
        Explicit oversampling factors (a single value is used for all
        three axes). ``[1, 1, 1]`` disables oversampling.
        By default, factors are estimated from ``direct_transform``.

    Returns
    -------
    plan : OversamplingPlan

    Raises
    ------
    OversampleError
        If explicit factors are not three integers greater than zero.

    """
    if oversample is None:
        factors = estimate_oversampling(direct_transform)
    else:
        if np.ndim(oversample) == 0:
            oversample = [oversample] * 3
        oversample = list(oversample)
        if len(oversample) != 3:
            raise OversampleError('Expected one oversample factor per '
                                  'spatial axis. Got {}.'.format(oversample))
        if not all(is_integer_like(f) for f in oversample):
            raise OversampleError('oversample factors must be integers. '
                                  'Got {}.'.format(oversample))
        factors = [int(f) for f in oversample]
    plan = OversamplingPlan(factors)
    if plan.active:
        logger.info('using oversampling factors [ {} {} {} ]'
                    .format(*plan.factors))
    return plan
