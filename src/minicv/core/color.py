"""Channel reordering, grayscale conversion and binary thresholding."""

import numpy as np

from .constants import (
    COLOR_BGR2GRAY,
    COLOR_BGR2RGB,
    COLOR_RGB2BGR,
    COLOR_RGB2GRAY,
    CV_8U,
    THRESH_BINARY,
    saturate_cast,
)
from .errors import UnsupportedOperation
from .matrix import Matrix, destination_form

# Luminance weights for R, G, B
GRAY_WEIGHTS = (0.299, 0.587, 0.114)


@destination_form
def cvt_color(src, code):
    """Swap the red/blue channels or reduce a 3-channel image to luminance."""
    if code not in (COLOR_BGR2RGB, COLOR_RGB2BGR, COLOR_RGB2GRAY, COLOR_BGR2GRAY):
        raise UnsupportedOperation(f"Unsupported cvtColor code: {code}")
    if src.channels < 3:
        raise UnsupportedOperation(f"Color conversion requires 3 channels, got {src.channels}")
    planes = src.planes()
    if code in (COLOR_BGR2RGB, COLOR_RGB2BGR):
        return Matrix(np.ascontiguousarray(planes[:, :, 2::-1]))

    # Weights are applied in R, G, B order
    rgb = planes[:, :, :3].astype(np.float64)
    if code == COLOR_BGR2GRAY:
        rgb = rgb[:, :, ::-1]
    gray = rgb @ np.array(GRAY_WEIGHTS)
    return Matrix(saturate_cast(gray, src.dtype))


@destination_form
def threshold(src, thresh, maxval, type=THRESH_BINARY):
    """Set elements above ``thresh`` to ``maxval`` and the rest to 0 (uint8 output)."""
    if type != THRESH_BINARY:
        raise UnsupportedOperation(f"Unsupported threshold type: {type}")
    on = saturate_cast(maxval, CV_8U)
    values = src.as_numpy()
    return Matrix(np.where(values > thresh, on, np.uint8(0)).astype(np.uint8))
