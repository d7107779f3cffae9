"""Utilities related to voxel/world spaces."""

from .transform import AffineTransform
from .grid import Grid
from .affine import voxel_size
