"""Tests for MatVector and the geometry value types."""

import numpy as np
import pytest

from minicv.core import (
    CV_8U,
    DataSizeMismatch,
    IndexOutOfRange,
    InvalidDimensions,
    MatVector,
    Matrix,
    Point,
    Rect,
    Scalar,
    Size,
)


def test_push_get_set():
    """Items come back in push order and can be replaced."""
    vec = MatVector()
    assert vec.empty()
    first, second = Matrix.zeros(1, 1), Matrix.ones(2, 2)
    vec.push(first)
    vec.push(second)
    assert vec.size() == 2
    assert vec.get(1) is second
    vec.set(0, second)
    assert vec[0] is second


def test_bounds_checked_access():
    """Out-of-range indices fail."""
    vec = MatVector([Matrix.zeros(1, 1)])
    with pytest.raises(IndexOutOfRange):
        vec.get(1)
    with pytest.raises(IndexOutOfRange):
        vec.set(-1, Matrix.zeros(1, 1))


def test_resize_and_clear():
    """resize grows with empty matrices and truncates; clear empties."""
    vec = MatVector([Matrix.zeros(1, 1)])
    vec.resize(3)
    assert len(vec) == 3
    assert vec.get(2).is_empty
    vec.resize(1)
    assert vec.size() == 1
    with pytest.raises(InvalidDimensions):
        vec.resize(-1)
    vec.clear()
    assert vec.empty()
    assert vec.to_array() == []


def test_point_size_rect_fields():
    """Value types expose their named fields."""
    assert Point(3, 4).x == 3
    assert Size(640, 480).height == 480
    assert tuple(Rect(1, 2, 3, 4)) == (1, 2, 3, 4)


def test_scalar_padding():
    """Missing channels default to 0 and more than four values fail."""
    assert Scalar(255).values == (255, 0, 0, 0)
    assert Scalar().values == (0, 0, 0, 0)
    with pytest.raises(DataSizeMismatch):
        Scalar(1, 2, 3, 4, 5)


def test_scalar_coerce_and_buffer():
    """Numbers and sequences coerce; uint8 buffers saturate."""
    assert Scalar.coerce(7) == Scalar(7)
    assert Scalar.coerce((1, 2, 3)) == Scalar(1, 2, 3)
    buffer = Scalar(-5, 300, 12.5).to_buffer(CV_8U)
    assert buffer.dtype == np.uint8
    assert buffer.tolist() == [0, 255, 13, 0]
