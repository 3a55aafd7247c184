"""Plain geometry value types."""

from typing import NamedTuple

import numpy as np

from .constants import CV_32F, NUMPY_DTYPES, parse_type, saturate_cast
from .errors import DataSizeMismatch


class Point(NamedTuple):
    """Pixel coordinate; x is the column, y the row."""
    x: float
    y: float


class Size(NamedTuple):
    width: int
    height: int


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


class Scalar(tuple):
    """Up to four per-channel values, missing channels default to 0."""

    def __new__(cls, *values):
        if len(values) > 4:
            raise DataSizeMismatch(f"Scalar takes at most 4 values, got {len(values)}")
        return super().__new__(cls, tuple(values) + (0,) * (4 - len(values)))

    @classmethod
    def coerce(cls, value):
        """Accept a Scalar, a sequence of channel values or a single number."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (int, float, np.number)):
            return cls(value)
        return cls(*value)

    @property
    def values(self):
        return tuple(self)

    def to_buffer(self, dtype=CV_32F):
        """Return the four channel values as a numpy buffer of the given depth."""
        depth = dtype if dtype in NUMPY_DTYPES else parse_type(dtype)[0]
        return saturate_cast(np.asarray(self, dtype=np.float64), depth)

    def __repr__(self):
        return f"Scalar{tuple(self)!r}"
