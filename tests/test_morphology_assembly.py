"""Tests for morphology and matrix concatenation."""

import numpy as np
import pytest

from minicv.core import (
    CV_8U,
    CV_8UC3,
    CV_32F,
    MORPH_CLOSE,
    MORPH_CROSS,
    MORPH_DILATE,
    MORPH_ERODE,
    MORPH_OPEN,
    MORPH_RECT,
    InvalidDimensions,
    InvalidOperation,
    MatVector,
    Matrix,
    ShapeMismatch,
    Size,
    UnsupportedOperation,
    dilate,
    erode,
    get_structuring_element,
    hconcat,
    morphology_ex,
    vconcat,
)


def _binary(rows, cols, on):
    mat = Matrix.zeros(rows, cols, CV_8U)
    for y, x in on:
        mat.set(y, x, 255)
    return mat


def test_structuring_element():
    """Rectangular kernels are all ones of ksize.height x ksize.width."""
    kernel = get_structuring_element(MORPH_RECT, Size(3, 2))
    assert kernel.dims == (2, 3)
    assert kernel.dtype == CV_8U
    assert np.all(kernel.as_numpy() == 1)
    with pytest.raises(UnsupportedOperation):
        get_structuring_element(MORPH_CROSS, Size(3, 3))
    with pytest.raises(InvalidDimensions):
        get_structuring_element(MORPH_RECT, Size(0, 3))


def test_dilate_single_pixel():
    """A lone pixel grows to the kernel footprint."""
    src = _binary(5, 5, [(2, 2)])
    out = dilate(src, get_structuring_element(MORPH_RECT, Size(3, 3)))
    expected = np.zeros((5, 5), dtype=np.uint8)
    expected[1:4, 1:4] = 255
    assert np.array_equal(out.as_numpy(), expected)


def test_erode_treats_outside_as_off():
    """Pixels whose kernel reaches past the edge are eroded."""
    src = Matrix.with_shape_and_fill(3, 3, CV_8U, 255)
    out = erode(src, get_structuring_element(MORPH_RECT, Size(3, 3)))
    assert out.to_array() == [[0, 0, 0], [0, 255, 0], [0, 0, 0]]


def test_close_fills_gap():
    """Closing bridges a one-pixel gap between two pixels."""
    src = _binary(7, 7, [(3, 2), (3, 4)])
    kernel = get_structuring_element(MORPH_RECT, Size(3, 3))
    out = morphology_ex(src, MORPH_CLOSE, kernel)
    expected = np.zeros((7, 7), dtype=np.uint8)
    expected[3, 2:5] = 255
    assert np.array_equal(out.as_numpy(), expected)


def test_close_is_idempotent():
    """Closing a closed image changes nothing."""
    src = _binary(9, 9, [(2, 2), (2, 4), (4, 3), (6, 6), (5, 6)])
    kernel = get_structuring_element(MORPH_RECT, Size(3, 3))
    once = morphology_ex(src, MORPH_CLOSE, kernel)
    twice = morphology_ex(once, MORPH_CLOSE, kernel)
    assert np.array_equal(once.as_numpy(), twice.as_numpy())


def test_morphology_ex_ops_and_iterations():
    """DILATE and ERODE dispatch to the primitives and repeat per iteration."""
    src = _binary(7, 7, [(3, 3)])
    kernel = get_structuring_element(MORPH_RECT, Size(3, 3))
    grown = morphology_ex(src, MORPH_DILATE, kernel, iterations=2)
    assert int((grown.as_numpy() > 0).sum()) == 25
    shrunk = morphology_ex(grown, MORPH_ERODE, kernel)
    assert int((shrunk.as_numpy() > 0).sum()) == 9


def test_morphology_errors():
    """Unsupported ops, empty input and multi-channel input fail."""
    kernel = get_structuring_element(MORPH_RECT, Size(3, 3))
    with pytest.raises(UnsupportedOperation):
        morphology_ex(_binary(3, 3, []), MORPH_OPEN, kernel)
    with pytest.raises(InvalidDimensions):
        morphology_ex(Matrix.empty(), MORPH_CLOSE, kernel)
    with pytest.raises(InvalidOperation):
        dilate(Matrix.zeros(3, 3, CV_8UC3), kernel)


def test_hconcat():
    """Matrices of equal height are laid out side by side."""
    left = Matrix.from_array([[1, 2], [3, 4]])
    right = Matrix.from_array([[5, 6], [7, 8]])
    assert hconcat([left, right]).to_array() == [[1, 2, 5, 6], [3, 4, 7, 8]]


def test_vconcat_from_vector():
    """vconcat accepts a MatVector and writes into dst."""
    mats = MatVector([Matrix.from_array([[1, 2]]), Matrix.from_array([[3, 4]])])
    dst = Matrix.empty()
    vconcat(mats, dst=dst)
    assert dst.to_array() == [[1, 2], [3, 4]]


def test_concat_errors():
    """Empty input and mismatched operands fail."""
    with pytest.raises(UnsupportedOperation):
        hconcat([])
    with pytest.raises(ShapeMismatch):
        hconcat([Matrix.zeros(2, 2), Matrix.zeros(3, 2)])
    with pytest.raises(ShapeMismatch):
        vconcat([Matrix.zeros(2, 2), Matrix.zeros(2, 3)])
    with pytest.raises(ShapeMismatch):
        hconcat([Matrix.zeros(2, 2, CV_32F), Matrix.zeros(2, 2, CV_8U)])


def test_failed_concat_leaves_destination():
    """A failing operation does not touch its destination."""
    dst = Matrix.from_array([[1]])
    with pytest.raises(ShapeMismatch):
        hconcat([Matrix.zeros(2, 2), Matrix.zeros(3, 2)], dst=dst)
    assert dst.to_array() == [[1]]
