from . import space
from . import interpolate
from . import reslice
from . import io
from .errors import OversampleError, DimensionError
from .space import AffineTransform, Grid
from .interpolate import Interpolator, Nearest, Linear, Cubic
from .reslice import Reslice, copy_volume, resample, reslice_array
