"""Tools for reslicing volumes.

Reslicing is the sequential process of:
    * **interpolation:**  transform a discrete set of points into a
      continuous function;
    * **spatial transformation:** compose the continuous image
      function with a spatial transform *i.e.*, a change of coordinates;
    * **resampling:** evaluate the transformed function at a new
      set of discrete points.

When the new set of points is sparser than the original one, several
sub-voxel samples are averaged in each output voxel (oversampling).

"""

from .oversample import OversamplingPlan, estimate_oversampling, \
                        make_oversampling_plan
from .adapter import Reslice
from .driver import copy_volume, resample, reslice_array
from .object import Reslicer, ReslicerLike, Resizer, ShapeResizer, \
                    VoxelResizer, Upsampler, Downsampler
from .functional import reslice, reslice_like, resize, resize_shape, \
                        resize_voxel, upsample, downsample
