"""Type tags and operation codes understood by the kernel."""

import numpy as np

from .errors import UnsupportedDataType

__all__ = [
    "CV_8U", "CV_32F", "CV_8UC1", "CV_8UC3", "CV_8UC4", "CV_32FC1", "CV_32FC3",
    "COLOR_BGR2RGB", "COLOR_RGB2GRAY", "COLOR_RGB2BGR", "COLOR_BGR2GRAY",
    "BORDER_CONSTANT", "BORDER_REPLICATE", "BORDER_REFLECT",
    "INTER_NEAREST", "INTER_LINEAR", "INTER_CUBIC",
    "THRESH_BINARY", "THRESH_BINARY_INV",
    "MORPH_RECT", "MORPH_CROSS", "MORPH_ELLIPSE",
    "MORPH_ERODE", "MORPH_DILATE", "MORPH_OPEN", "MORPH_CLOSE",
    "RETR_EXTERNAL", "RETR_LIST", "RETR_TREE",
    "CHAIN_APPROX_NONE", "CHAIN_APPROX_SIMPLE",
    "parse_type", "saturate_cast",
]

# Element depths
CV_8U = "uint8"
CV_32F = "float32"

# Depth plus channel count
CV_8UC1 = "uint8_1c"
CV_8UC3 = "uint8_3c"
CV_8UC4 = "uint8_4c"
CV_32FC1 = "float32_1c"
CV_32FC3 = "float32_3c"

NUMPY_DTYPES = {
    CV_8U: np.uint8,
    CV_32F: np.float32,
}

_TYPE_TAGS = {
    CV_8U: (CV_8U, 1),
    CV_8UC1: (CV_8U, 1),
    CV_8UC3: (CV_8U, 3),
    CV_8UC4: (CV_8U, 4),
    CV_32F: (CV_32F, 1),
    CV_32FC1: (CV_32F, 1),
    CV_32FC3: (CV_32F, 3),
}

# Color conversion
COLOR_BGR2RGB = 0
COLOR_RGB2GRAY = 1
COLOR_RGB2BGR = 2
COLOR_BGR2GRAY = 3

# Borders
BORDER_CONSTANT = 0
BORDER_REPLICATE = 1
BORDER_REFLECT = 2

# Interpolation
INTER_NEAREST = 0
INTER_LINEAR = 1
INTER_CUBIC = 2

# Thresholding
THRESH_BINARY = 0
THRESH_BINARY_INV = 1

# Morphology
MORPH_RECT = 0
MORPH_CROSS = 1
MORPH_ELLIPSE = 2

MORPH_ERODE = 0
MORPH_DILATE = 1
MORPH_OPEN = 2
MORPH_CLOSE = 3

# Contours
RETR_EXTERNAL = 0
RETR_LIST = 1
RETR_TREE = 3

CHAIN_APPROX_NONE = 1
CHAIN_APPROX_SIMPLE = 2


def parse_type(tag):
    """Split a type tag into (depth, channels)."""
    try:
        return _TYPE_TAGS[tag]
    except (KeyError, TypeError):
        raise UnsupportedDataType(f"Unsupported data type: {tag!r}") from None


def depth_of(array):
    """Return the depth tag of a numpy array."""
    for depth, dtype in NUMPY_DTYPES.items():
        if array.dtype == dtype:
            return depth
    raise UnsupportedDataType(f"Unsupported element type: {array.dtype}")


def saturate_cast(values, depth):
    """Cast values to a depth; uint8 clips to [0, 255] and rounds half up."""
    values = np.asarray(values)
    if depth == CV_8U:
        if values.dtype == np.uint8:
            return values.copy()
        return np.floor(np.clip(values, 0, 255) + 0.5).astype(np.uint8)
    if depth == CV_32F:
        return values.astype(np.float32)
    raise UnsupportedDataType(f"Unsupported data type: {depth!r}")
