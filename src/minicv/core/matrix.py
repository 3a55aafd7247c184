"""Shape/type-tagged numeric buffer used by every other module."""

import functools
import math

import numpy as np

from .constants import (
    CV_8U,
    CV_32F,
    NUMPY_DTYPES,
    depth_of,
    parse_type,
    saturate_cast,
)
from .errors import (
    DataSizeMismatch,
    IndexOutOfRange,
    InvalidDimensions,
    InvalidOperation,
    ShapeMismatch,
    UnsupportedDataType,
)
from .geometry import Scalar


def _check_dims(dims):
    dims = tuple(int(d) for d in dims)
    if not dims or any(d <= 0 for d in dims):
        raise InvalidDimensions(f"Invalid dimensions: {list(dims)}")
    return dims


def _channel_dims(rows, cols, channels):
    return (rows, cols) if channels == 1 else (rows, cols, channels)


def _depth(tag):
    return tag if tag in NUMPY_DTYPES else parse_type(tag)[0]


def destination_form(func):
    """Add a ``dst=`` keyword that receives the returned matrix wholesale.

    The wrapped operation always computes a fresh result first, so a failure
    leaves the destination untouched.
    """
    @functools.wraps(func)
    def wrapper(*args, dst=None, **kwargs):
        result = func(*args, **kwargs)
        if dst is None:
            return result
        dst.assign(result)
        return dst
    return wrapper


class Matrix:
    """Row-major, channel-interleaved matrix of uint8 or float32 elements.

    Build instances with the named factories (``empty``, ``zeros``, ``ones``,
    ``with_shape_and_fill``, ``from_array``, ``from_buffer``) rather than by
    calling the constructor directly.
    """

    def __init__(self, array):
        depth_of(array)
        self._array = array

    # -- factories --------------------------------------------------------

    @classmethod
    def empty(cls):
        """Return the 0x0 sentinel matrix."""
        return cls(np.zeros((0, 0), dtype=np.uint8))

    @classmethod
    def zeros(cls, rows, cols, dtype=CV_32F):
        depth, channels = parse_type(dtype)
        dims = _check_dims(_channel_dims(rows, cols, channels))
        return cls(np.zeros(dims, dtype=NUMPY_DTYPES[depth]))

    @classmethod
    def ones(cls, rows, cols, dtype=CV_32F):
        depth, channels = parse_type(dtype)
        dims = _check_dims(_channel_dims(rows, cols, channels))
        return cls(np.ones(dims, dtype=NUMPY_DTYPES[depth]))

    @classmethod
    def with_shape_and_fill(cls, rows, cols, type, scalar=None):
        """Allocate ``rows x cols`` of ``type``, every pixel set to ``scalar``."""
        depth, channels = parse_type(type)
        dims = _check_dims(_channel_dims(rows, cols, channels))
        array = np.zeros(dims, dtype=NUMPY_DTYPES[depth])
        if scalar is not None:
            fill = Scalar.coerce(scalar).to_buffer(depth)[:channels]
            array.reshape(-1, channels)[:] = fill
        return cls(array)

    @classmethod
    def from_array(cls, data, dims=None, dtype=CV_32F):
        """Build a matrix from a nested 2-D/3-D literal or a flat list plus dims."""
        depth = _depth(dtype)
        nested = isinstance(data, np.ndarray) and data.ndim > 1
        if not nested and len(data) and isinstance(data[0], (list, tuple, np.ndarray)):
            nested = True
        if nested:
            try:
                values = np.array(data, dtype=np.float64)
            except ValueError:
                raise DataSizeMismatch("Inconsistent row lengths") from None
            if values.ndim not in (2, 3):
                raise DataSizeMismatch("Inconsistent row lengths")
            _check_dims(values.shape)
            return cls(saturate_cast(values, depth))
        if dims is None:
            raise InvalidDimensions("dims required for flat data")
        dims = _check_dims(dims)
        values = np.asarray(data, dtype=np.float64)
        if values.size != math.prod(dims):
            raise DataSizeMismatch(
                f"Data size mismatch: expected {math.prod(dims)}, got {values.size}"
            )
        return cls(saturate_cast(values.reshape(dims), depth))

    @classmethod
    def from_buffer(cls, buffer, dims, dtype=None):
        """Wrap an existing buffer; a numpy buffer of matching dtype is shared."""
        dims = _check_dims(dims)
        if dtype is None:
            if not isinstance(buffer, np.ndarray):
                raise UnsupportedDataType("dtype required for non-numpy buffers")
            depth = depth_of(buffer)
        else:
            depth = _depth(dtype)
        array = np.asarray(buffer)
        if array.size != math.prod(dims):
            raise DataSizeMismatch(
                f"Data size mismatch: expected {math.prod(dims)}, got {array.size}"
            )
        if array.dtype != NUMPY_DTYPES[depth]:
            array = saturate_cast(array, depth)
        return cls(array.reshape(dims))

    # -- shape ------------------------------------------------------------

    @property
    def dims(self):
        return tuple(self._array.shape)

    shape = dims

    @property
    def rows(self):
        return self.dims[0] if self._array.ndim >= 1 else 0

    @property
    def cols(self):
        return self.dims[1] if self._array.ndim >= 2 else 0

    @property
    def channels(self):
        return self.dims[2] if self._array.ndim >= 3 else 1

    @property
    def dtype(self):
        return depth_of(self._array)

    @property
    def size(self):
        return self._array.size

    @property
    def is_empty(self):
        return self._array.size == 0

    @property
    def data(self):
        """Flat view over the element buffer."""
        return self._array.reshape(-1)

    def as_numpy(self):
        return self._array

    def planes(self):
        """View the matrix as a (rows, cols, channels) array."""
        if self._array.ndim not in (2, 3):
            raise InvalidOperation(f"Expected a 2-D or 3-D matrix, got {list(self.dims)}")
        return self._array.reshape(self.rows, self.cols, self.channels)

    @classmethod
    def from_planes(cls, array):
        """Inverse of ``planes``: single-channel results drop the channel axis."""
        if array.shape[2] == 1:
            array = array.reshape(array.shape[0], array.shape[1])
        return cls(np.ascontiguousarray(array))

    # -- element access ---------------------------------------------------

    def _index(self, y, x):
        if self._array.ndim < 2:
            raise InvalidOperation("get/set need a matrix with at least 2 dimensions")
        if not (0 <= y < self.rows and 0 <= x < self.cols):
            raise IndexOutOfRange(f"({y}, {x}) outside {self.rows}x{self.cols} matrix")
        return (y, x) if self._array.ndim == 2 else (y, x) + (0,) * (self._array.ndim - 2)

    def get(self, y, x):
        """Read the first channel at row ``y``, column ``x``."""
        return self._array[self._index(y, x)].item()

    def set(self, y, x, value):
        """Write the first channel at row ``y``, column ``x``."""
        index = self._index(y, x)
        self._array[index] = saturate_cast(value, self.dtype)

    def _row_view(self, row, depth):
        if self.dtype != depth:
            raise UnsupportedDataType(f"Row accessor requires {depth}, matrix is {self.dtype}")
        if self._array.ndim < 2:
            raise InvalidOperation("Row accessors need a matrix with at least 2 dimensions")
        if not 0 <= row < self.rows:
            raise IndexOutOfRange(f"Row {row} outside {self.rows} rows")
        return self._array.reshape(self.rows, -1)[row]

    def float_ptr(self, row):
        """Writable view over one float32 row, channels interleaved."""
        return self._row_view(row, CV_32F)

    def uchar_ptr(self, row):
        """Writable view over one uint8 row, channels interleaved."""
        return self._row_view(row, CV_8U)

    def to_array(self):
        if self._array.ndim != 2:
            raise InvalidOperation("to_array supports 2-D matrices only")
        return self._array.tolist()

    # -- copies and conversion -------------------------------------------

    def roi(self, rect):
        """Return a deep copy of the rectangular region ``rect``."""
        if self._array.ndim < 2:
            raise InvalidOperation("roi needs a matrix with at least 2 dimensions")
        x, y, width, height = (int(v) for v in rect)
        if width <= 0 or height <= 0:
            raise InvalidDimensions(f"Invalid region size {width}x{height}")
        if x < 0 or y < 0 or x + width > self.cols or y + height > self.rows:
            raise IndexOutOfRange(f"Region {tuple(rect)} outside {self.rows}x{self.cols} matrix")
        return Matrix(self._array[y:y + height, x:x + width].copy())

    def copy_to(self, dst):
        """Copy every element into ``dst``, which must have the same dims."""
        if self.dims != dst.dims:
            raise ShapeMismatch(f"shape mismatch: {list(self.dims)} vs {list(dst.dims)}")
        dst._array[...] = saturate_cast(self._array, dst.dtype)

    @destination_form
    def convert_to(self, dtype, scale=1.0):
        """Return the elements scaled and cast to ``dtype``.

        Converting to the current type with unit scale shares the buffer.
        """
        depth = _depth(dtype)
        if depth == self.dtype and scale == 1.0:
            return Matrix(self._array)
        values = self._array if scale == 1.0 else self._array * np.float64(scale)
        return Matrix(saturate_cast(values, depth))

    def clone(self):
        return Matrix(self._array.copy())

    def assign(self, other):
        """Replace this matrix's shape and buffer with ``other``'s."""
        self._array = other._array

    def __repr__(self):
        return f"Matrix(dims={list(self.dims)}, dtype={self.dtype!r})"


def mat_from_array(rows, cols, type, data):
    """Build a ``rows x cols`` matrix of ``type`` from flat channel-interleaved data."""
    depth, channels = parse_type(type)
    dims = _check_dims(_channel_dims(rows, cols, channels))
    values = np.asarray(data, dtype=np.float64)
    if values.size != rows * cols * channels:
        raise DataSizeMismatch(
            f"Data size mismatch: expected {rows * cols * channels}, got {values.size}"
        )
    return Matrix(saturate_cast(values.reshape(dims), depth))


def require_non_empty(matrix, what):
    if matrix.is_empty:
        raise InvalidDimensions(f"{what}: empty source matrix")
