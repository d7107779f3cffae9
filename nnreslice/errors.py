"""Exceptions raised when a reslicing operation is misconfigured."""


class OversampleError(ValueError):
    """Explicit oversampling factors are invalid (< 1, non-integer or
    not one per spatial axis)."""
    pass


class DimensionError(ValueError):
    """A grid or volume has fewer than three spatial axes."""
    pass
