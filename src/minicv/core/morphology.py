"""Binary morphology with rectangular structuring elements."""

import logging

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .constants import CV_8U, MORPH_CLOSE, MORPH_DILATE, MORPH_ERODE, MORPH_RECT
from .errors import InvalidDimensions, InvalidOperation, UnsupportedOperation
from .matrix import Matrix, destination_form, require_non_empty

logger = logging.getLogger(__name__)

ON = 255


def get_structuring_element(shape, ksize):
    """Return an all-ones ``ksize.height x ksize.width`` kernel."""
    if shape != MORPH_RECT:
        raise UnsupportedOperation(f"Unsupported structuring element shape: {shape}")
    width, height = ksize
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"Invalid kernel size {width}x{height}")
    return Matrix.ones(height, width, CV_8U)


def _kernel_taps(src, kernel):
    """Stack the source pixels under each active kernel tap.

    Returns a (rows, cols, taps) boolean array; taps falling outside the
    source read as off. The kernel anchor sits at ``floor(k / 2)``.
    """
    require_non_empty(src, "morphology")
    require_non_empty(kernel, "morphology kernel")
    if src.as_numpy().ndim != 2:
        raise InvalidOperation(f"Morphology needs a single-channel 2-D matrix, got {list(src.dims)}")
    on = src.as_numpy() > 0
    active = kernel.planes()[:, :, 0] > 0
    kh, kw = active.shape
    oy, ox = kh // 2, kw // 2
    pad = ((oy, kh - 1 - oy), (ox, kw - 1 - ox))

    return sliding_window_view(np.pad(on, pad), (kh, kw))[:, :, active]


@destination_form
def dilate(src, kernel):
    """Turn a pixel on when any in-bounds tap covers an on pixel."""
    taps = _kernel_taps(src, kernel)
    return Matrix(np.where(taps.any(axis=2), ON, 0).astype(np.uint8))


@destination_form
def erode(src, kernel):
    """Keep a pixel on only when every tap is in bounds and on."""
    taps = _kernel_taps(src, kernel)
    return Matrix(np.where(taps.all(axis=2), ON, 0).astype(np.uint8))


@destination_form
def morphology_ex(src, op, kernel, iterations=1):
    """Apply MORPH_CLOSE (dilate then erode), MORPH_DILATE or MORPH_ERODE."""
    if op == MORPH_DILATE:
        steps = (dilate,)
    elif op == MORPH_ERODE:
        steps = (erode,)
    elif op == MORPH_CLOSE:
        steps = (dilate, erode)
    else:
        raise UnsupportedOperation(f"Unsupported morphology operation: {op}")
    require_non_empty(src, "morphology")

    result = src
    for _ in range(max(1, iterations)):
        for step in steps:
            result = step(result, kernel)
    logger.debug("morphology op %s applied %d time(s) to %s", op, max(1, iterations), src)
    return result
