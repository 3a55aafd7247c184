"""Tests for the edge-detection capability."""

import numpy as np
import pytest

from minicv.core import (
    CV_8U,
    CV_8UC3,
    CapabilityNotInstalled,
    InvalidOperation,
    Matrix,
    canny,
    has_edge_detector,
    register_edge_detector,
    skimage_edges,
    unregister_edge_detector,
)


@pytest.fixture
def restore_detector():
    yield
    register_edge_detector(skimage_edges)


def _step_image():
    values = np.zeros((20, 20), dtype=np.uint8)
    values[:, 10:] = 255
    return Matrix(values)


def test_default_detector_registered():
    """Importing the package installs the scikit-image detector."""
    assert has_edge_detector()


def test_canny_finds_step_edge():
    """A vertical step produces edges along the step only."""
    out = canny(_step_image(), 50, 150)
    values = out.as_numpy()
    assert out.dtype == CV_8U
    assert set(np.unique(values).tolist()) <= {0, 255}
    assert values[5:15, 8:12].any()
    assert not values[:, :5].any()


def test_canny_flat_image_has_no_edges():
    """An empty background has no edges."""
    out = canny(Matrix.zeros(10, 10, CV_8U))
    assert not out.as_numpy().any()


def test_canny_requires_single_channel():
    """Color input is rejected."""
    with pytest.raises(InvalidOperation):
        canny(Matrix.zeros(4, 4, CV_8UC3))


def test_canny_without_detector(restore_detector):
    """With nothing registered canny reports the missing capability."""
    unregister_edge_detector()
    assert not has_edge_detector()
    with pytest.raises(CapabilityNotInstalled):
        canny(_step_image())


def test_custom_detector(restore_detector):
    """A registered detector replaces the default."""
    calls = []

    def detector(gray, low, high):
        calls.append((low, high))
        return gray > 0

    register_edge_detector(detector)
    out = canny(_step_image(), 200, 100)
    assert calls == [(100, 200)]
    assert out.as_numpy()[0].tolist() == [0] * 10 + [255] * 10
