"""Resampling and constant border padding."""

import numpy as np

from .constants import BORDER_CONSTANT, INTER_LINEAR, INTER_NEAREST, saturate_cast
from .errors import InvalidDimensions, UnsupportedOperation
from .geometry import Scalar
from .matrix import Matrix, destination_form, require_non_empty


def _target_size(src, dsize, fx, fy):
    width, height = dsize
    if width > 0 and height > 0:
        return int(height), int(width)
    if width == 0 and height == 0:
        if fx <= 0 or fy <= 0:
            raise InvalidDimensions(f"Invalid scale factors fx={fx}, fy={fy}")
        target = int(round(src.rows * fy)), int(round(src.cols * fx))
        if min(target) <= 0:
            raise InvalidDimensions(f"Invalid target dimensions {target}")
        return target
    raise InvalidDimensions(f"Invalid size parameters {tuple(dsize)}")


def _nearest_indices(dst_len, src_len):
    coords = np.rint(np.arange(dst_len) * (src_len / dst_len))
    return np.clip(coords, 0, src_len - 1).astype(np.intp)


def _linear_taps(dst_len, src_len):
    """Lower/upper source indices and upper weight for each output position."""
    coords = (np.arange(dst_len) + 0.5) * (src_len / dst_len) - 0.5
    coords = np.maximum(coords, 0.0)
    lower = np.floor(coords).astype(np.intp)
    upper = np.minimum(lower + 1, src_len - 1)
    return lower, upper, coords - lower


@destination_form
def resize(src, dsize, fx=0.0, fy=0.0, interpolation=INTER_LINEAR):
    """Resample ``src`` to ``dsize``; ``Size(0, 0)`` scales by ``fx``/``fy``."""
    require_non_empty(src, "resize")
    height, width = _target_size(src, dsize, fx, fy)
    planes = src.planes()
    h, w, _ = planes.shape

    if interpolation == INTER_NEAREST:
        rows = _nearest_indices(height, h)
        cols = _nearest_indices(width, w)
        return Matrix.from_planes(planes[rows[:, None], cols[None, :]])

    if interpolation != INTER_LINEAR:
        raise UnsupportedOperation(f"Unsupported interpolation: {interpolation}")

    y0, y1, wy = _linear_taps(height, h)
    x0, x1, wx = _linear_taps(width, w)
    values = planes.astype(np.float64)
    wx = wx[None, :, None]
    top = values[y0][:, x0] * (1 - wx) + values[y0][:, x1] * wx
    bottom = values[y1][:, x0] * (1 - wx) + values[y1][:, x1] * wx
    wy = wy[:, None, None]
    blended = top * (1 - wy) + bottom * wy
    return Matrix.from_planes(saturate_cast(blended, src.dtype))


@destination_form
def copy_make_border(src, top, bottom, left, right, border_type=BORDER_CONSTANT,
                     value=Scalar()):
    """Pad ``src`` with a constant border of the given widths."""
    if border_type != BORDER_CONSTANT:
        raise UnsupportedOperation("Only BORDER_CONSTANT is supported")
    if min(top, bottom, left, right) < 0:
        raise InvalidDimensions("Border widths must be non-negative")
    planes = src.planes()
    h, w, c = planes.shape

    fill = Scalar.coerce(value).to_buffer(src.dtype)
    # Channels beyond the scalar's four repeat its first value
    per_channel = np.array([fill[ch] if ch < 4 else fill[0] for ch in range(c)],
                           dtype=planes.dtype)
    canvas = np.empty((h + top + bottom, w + left + right, c), dtype=planes.dtype)
    canvas[...] = per_channel
    canvas[top:top + h, left:left + w] = planes
    return Matrix.from_planes(canvas)
