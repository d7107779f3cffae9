import os
import logging
import nibabel as nb
import numpy as np
from nibabel.spatialimages import SpatialImage
from .utils import argdef
from .space.affine import voxel_size

logger = logging.getLogger(__name__)

# Image classes used to write each file type
_writers = {
    '.nii': nb.Nifti1Image,
    '.nii.gz': nb.Nifti1Image,
    '.mgh': nb.MGHImage,
    '.mgz': nb.MGHImage,
}


def isfile(x):
    """True if ``x`` designates a volume on disk."""
    return isinstance(x, (str, os.PathLike))


def _default_affine(shape):
    """Create default orientation matrix.

    We follow the same convention as nibabel/SPM: (0,0,0) is in the
    center of the field-of-view.

    """
    shape = np.asarray(shape[:3])
    dim = len(shape)
    shift = -shape.astype(np.float64)/2 + 0.5
    mat = np.eye(dim+1, dtype=np.float64)
    mat[:dim, dim] = shift
    return mat


def _fileparts(fname):
    """Split a filename into directory / basename / extension.

    If the last extension is ``.gz``, this function checks if another
    extension is present, in which case it returns ``.<ext>.gz``
    """
    fname = os.fspath(fname)
    dir = os.path.dirname(fname)
    basename = os.path.basename(fname)
    basename, ext = os.path.splitext(basename)
    if ext == '.gz':
        basename, ext0 = os.path.splitext(basename)
        ext = ext0 + ext
    return dir, basename, ext


def _array_info(x):
    shape = tuple(x.shape) + (1,) * max(0, 3 - x.ndim)
    affine = _default_affine(shape)
    zooms = tuple(voxel_size(affine)) + (1.,) * (len(shape) - 3)
    return {'dtype': x.dtype, 'shape': shape, 'affine': affine,
            'zooms': zooms}


def _image_info(x):
    # Images with fewer than three axes get singleton axes, like arrays
    pad = max(0, 3 - len(x.shape))
    shape = tuple(x.shape) + (1,) * pad
    zooms = tuple(float(z) for z in x.header.get_zooms()) + (1.,) * pad
    return {'dtype': x.get_data_dtype(), 'shape': shape,
            'affine': np.asarray(x.affine, dtype=np.float64),
            'zooms': zooms, 'header': x.header, 'extra': x.extra}


class VolumeReader:
    """Versatile reader for volume files or objects."""

    def __init__(self, dtype=None, allow_memmap=True, copy=True,
                 allow_pickle=False):
        """

        Parameters
        ----------
        dtype : type or str, default=None
            Data type in which to load the input array.
            Files read through nibabel default to float64.

        allow_memmap : bool, default=True
            Allow ``np.memmap`` arrays (i.e., memory-mapped arrays)
            to be returned.

        copy : bool, default=True
            Force the input object to be copied, even if it is already
            an array of the right data type.

        allow_pickle : bool, default=False
            Allow loading pickled object arrays stored in npy files.
        """
        self.dtype = dtype
        self.allow_memmap = allow_memmap
        self.copy = copy
        self.allow_pickle = allow_pickle

    def __call__(self, *args, **kwargs):
        return self.read(*args, **kwargs)

    def _load(self, x, info, mmap_mode='r'):
        # If path -> split into directory / basename / extension
        if isfile(x):
            path, basename, ext = _fileparts(x)
            info['dir'] = path
            info['basename'] = basename
            info['ext'] = ext
            if not os.path.exists(os.fspath(x)):
                raise FileNotFoundError('No such volume: {}'.format(x))
            if ext in ('.npy', '.npz'):
                x = np.load(x, allow_pickle=self.allow_pickle,
                            mmap_mode=mmap_mode)
            else:
                x = nb.load(os.fspath(x))
        return x

    def inspect(self, x):
        """Read the header of a volume without loading its data.

        Returns
        -------
        info : dict
            Keys: 'dir', 'basename', 'ext' (files only), 'dtype',
            'shape', 'affine', 'zooms', 'header', 'extra' (nibabel only)

        """
        info = {}
        x = self._load(x, info)
        if isinstance(x, SpatialImage):
            info.update(_image_info(x))
        else:
            info.update(_array_info(np.asarray(x)))
        return info

    def read(self, x, dtype=None, allow_memmap=None, copy=None,
             read_info=True):
        """Load (and convert) data stored in a file or array.

        Parameters
        ----------
        x : str or nib.SpatialImage or array_like
            An input array, on disk or in memory.

        dtype : type or str, default=self.dtype
            Data type in which to load the input array.

        allow_memmap : bool, default=self.allow_memmap
            Allow ``np.memmap`` arrays (i.e., memory-mapped arrays)
            to be returned.

        copy : bool, default=self.copy
            Force the input object to be copied, even if it is already
            an array of the right data type.

        read_info : bool, default=True
            Also return the header information (see ``inspect``).

        Returns
        -------
        x : np.ndarray
            A numpy array with the specified dtype.

        info : dict, if `read_info`

        """
        dtype = argdef(dtype, self.dtype)
        allow_memmap = argdef(allow_memmap, self.allow_memmap)
        copy = argdef(copy, self.copy)

        info = dict()
        x = self._load(x, info, mmap_mode='r' if allow_memmap else None)

        # Then, if nibabel object -> extract affine / header / extra
        if isinstance(x, SpatialImage):
            info.update(_image_info(x))
            if dtype is None or np.issubdtype(np.dtype(dtype), np.floating):
                x = x.get_fdata(dtype=argdef(dtype, np.float64))
            else:
                x = np.asarray(x.dataobj)
        elif not isinstance(x, np.ndarray):
            try:
                x = np.asarray(x)
            except Exception as e:
                raise TypeError("Input type '{}' not handled"
                                .format(type(x))) from e
        if 'shape' not in info:
            info.update(_array_info(x))

        # Then, convert to the requested data type
        if copy:
            x = np.array(x, dtype=dtype)
        else:
            x = np.asarray(x, dtype=dtype)
        # Then, if memory-mapped and not allow_memmap -> load
        if isinstance(x, np.memmap) and not allow_memmap:
            x = np.array(x)

        if read_info:
            return x, info
        else:
            return x


class VolumeWriter:
    """Versatile writer for volume files."""

    def __init__(self, affine=None, header=None, extra=None,
                 dtype=None, dir=None, ext=None, prefix=None,
                 basename=None, fname=None, dummy=False):
        """

        Parameters
        ----------
        affine : matrix_like, optional
            Orientation matrix

        header :
            Nibabel header

        extra
            Nibabel extra metadata

        dtype : str or type, optional
            Output data type

        dir : str, default=same as input or current directory
            Output directory

        ext : str, default=same as input or '.nii.gz'
            Output extension

        prefix : str, optional
            Output filename prefix

        basename : str, default=prefixed input or prefix or 'array'
            Output basename

        fname : str
            Output file name (full path + name + extension).
            Default: built from dir/prefix/basename/ext

        dummy : bool, default=False
            Do not write anything

        """
        self.affine = affine
        self.header = header
        self.extra = extra
        self.dtype = dtype
        self.dir = dir
        self.ext = ext
        self.prefix = prefix
        self.basename = basename
        self.fname = fname
        self.dummy = dummy

    def __call__(self, *args, **kwargs):
        return self.write(*args, **kwargs)

    def write(self, x, fname=None, info=None, affine=None, header=None,
              extra=None, dtype=None, dir=None, ext=None, prefix=None,
              basename=None, dummy=None):
        """Write a volume on disk and return the (lazy) written object."""

        # --- If dummy, do not do anything ---
        dummy = argdef(dummy, self.dummy)
        if dummy:
            return x

        # --- Parse options ---
        # Priority is: function argument / attributes / defaults
        info = argdef(info, {})
        affine = argdef(affine, self.affine, info.get('affine'))
        header = argdef(header, self.header, info.get('header'))
        extra = argdef(extra, self.extra, info.get('extra'))
        dtype = np.dtype(argdef(dtype, self.dtype, info.get('dtype'), x.dtype))
        dir = argdef(dir, self.dir, info.get('dir'), '.')
        ext = argdef(ext, self.ext, info.get('ext'), '.nii.gz')
        prefix = argdef(prefix, self.prefix, info.get('prefix'), '')
        basename = argdef(basename, self.basename, info.get('basename'),
                          'array' if len(prefix) == 0 else '')
        fname = argdef(fname, self.fname,
                       os.path.join(dir, prefix + basename + ext))
        fname = os.fspath(fname)
        _, _, ext = _fileparts(fname)

        x = np.asarray(x)
        if np.issubdtype(dtype, np.integer) and not np.issubdtype(x.dtype, np.integer):
            # Out-of-bounds NaNs cannot be represented
            x = np.rint(np.nan_to_num(x, nan=0))

        if ext in ('.npy', '.npz'):
            # --- Save using numpy ---
            np.save(fname, x.astype(dtype), allow_pickle=False)
            if not fname.endswith('.npy'):
                fname = fname + '.npy'
            obj = np.load(fname, allow_pickle=False, mmap_mode='r')

        else:
            # --- Save using nibabel ---
            klass = _writers.get(ext)
            if klass is None:
                raise ValueError('Cannot write files with extension {}'
                                 .format(ext))

            # Some formats do not like 4D volumes, even if the fourth
            # dimension is a singleton. In this case, we remove the fourth
            # dimension. However, if the fourth dimension is > 1, we let it
            # untouched in order to trigger warnings or errors.
            if len(x.shape) > 3 and np.all(np.array(x.shape[3:]) == 1):
                x = x.reshape(x.shape[:3])

            # Build nibabel object
            if not isinstance(header, klass.header_class):
                header = None
            obj = klass(x.astype(dtype), affine, header, extra)
            obj.set_data_dtype(dtype)

            # Save on disk
            nb.save(obj, fname)

        logger.info('Wrote {}'.format(fname))
        return obj


class VolumeConverter:
    """Writer-like object that returns arrays instead of writing files."""

    def __init__(self, dtype=None):
        self.dtype = dtype

    def __call__(self, *args, **kwargs):
        return self.write(*args, **kwargs)

    def write(self, x, info=None, dtype=None, **kwargs):
        info = argdef(info, {})
        dtype = np.dtype(argdef(dtype, self.dtype, info.get('dtype'), x.dtype))
        x = np.asarray(x)
        if np.issubdtype(dtype, np.integer) and not np.issubdtype(x.dtype, np.integer):
            x = np.rint(np.nan_to_num(x, nan=0))
        return x.astype(dtype)
