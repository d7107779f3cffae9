import os.path
from glob import glob
import numpy as np

# This bit gives some flexibility for the input files:
# . unix-style ~ (HOME) is always expanded
# . unix-style tokens are always expanded
# . if an input file is a directory, we look for all volume files
#   within. The list of supported formats is specified below.
default_extensions = ['.nii', '.nii.gz', '.mgh', '.mgz', '.npy']


def expand_images(images, ext=None):
    """Expand unix tokens in paths and find specific file types.

    Parameters
    ----------
    images : iterable[str]
        List of paths that can contain tokens.
    ext : list[str], default=['.nii', '.nii.gz', '.mgh', '.mgz', '.npy']
        File types that are searched for inside directories.

    Returns
    -------
    images : list[str]
        List of full paths to individual volume files.

    """
    if ext is None:
        ext = default_extensions
    oimages = []
    for entry in images:
        # entry is: image or dir or token-images or token-dirs
        entry = sorted(glob(os.path.expanduser(entry)))
        for subentry in entry:
            if os.path.isdir(subentry):
                found = []
                for e in ext:
                    found += glob(os.path.join(subentry, '*' + e))
                oimages += sorted(set(found))
            else:
                oimages += [subentry]
    return oimages


def argpad(arg, n, default=None):
    """Pad/crop list so that its length is ``n``.

    Parameters
    ----------
    arg : scalar or iterable
        Input argument(s)
    n : int
        Target length
    default : optional
        Default value to pad with. By default, replicate the last value

    Returns
    -------
    arg : list
        Output arguments

    """
    try:
        arg = list(arg)[:n]
    except TypeError:
        arg = [arg]
    if default is None:
        default = arg[-1]
    arg += [default] * max(0, n - len(arg))
    return arg


def argdef(*args):
    """Return the first non-None value from a list of arguments.

    Parameters
    ----------
    value0
        First potential value. If None, try value 1
    value1
        Second potential value. If None, try value 2
    ...
    valueN
        Last potential value

    Returns
    -------
    value
        First non-None value

    """
    args = list(args)
    arg = args.pop(0)
    while arg is None and len(args) > 0:
        arg = args.pop(0)
    return arg


def is_integer_like(x):
    """True if ``x`` is an integral number (1, 2.0, np.int32(3)...)."""
    try:
        return float(x) == int(x)
    except (TypeError, ValueError, OverflowError):
        return False


def default_out_of_bounds_value(dtype):
    """Value reported when a volume is sampled outside its field-of-view.

    NaN for floating point (and complex) data, zero otherwise.
    """
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.inexact):
        return dtype.type(np.nan)
    return dtype.type(0)
