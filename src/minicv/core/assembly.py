"""Side-by-side and stacked concatenation of matrices."""

import numpy as np

from .errors import ShapeMismatch, UnsupportedOperation
from .matrix import Matrix, destination_form


def _concat(mats, axis, name):
    mats = list(mats)
    if not mats:
        raise UnsupportedOperation(f"{name}: no matrices to concatenate")
    first = mats[0]
    planes = []
    for m in mats:
        if m.dtype != first.dtype or m.channels != first.channels:
            raise ShapeMismatch(f"{name}: type or channel mismatch ({m!r} vs {first!r})")
        if m.dims[1 - axis] != first.dims[1 - axis]:
            raise ShapeMismatch(f"{name}: shape mismatch ({m!r} vs {first!r})")
        planes.append(m.planes())
    return Matrix.from_planes(np.concatenate(planes, axis=axis))


@destination_form
def hconcat(mats):
    """Lay out matrices of equal height side by side."""
    return _concat(mats, 1, "hconcat")


@destination_form
def vconcat(mats):
    """Stack matrices of equal width top to bottom."""
    return _concat(mats, 0, "vconcat")
