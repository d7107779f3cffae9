from typing import Union, Iterable, Sequence, Callable
import numpy as np
import nibabel as nib

Array = Union[np.ndarray, Iterable, int, float]
Matrix = Array
Vector = Matrix
FileArray = Union[str, nib.spatialimages.SpatialImage]
AnyArray = Union[Array, FileArray]
Oversample = Union[int, Sequence[int], None]
Order = Union[int, str, Callable]
