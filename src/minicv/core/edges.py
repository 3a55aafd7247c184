"""Edge detection as an optional, pluggable capability.

The kernel ships no edge detector of its own. Implementations are registered
under a name; ``canny`` fails with ``CapabilityNotInstalled`` when nothing is
registered for it.
"""

import logging

import numpy as np
from skimage.feature import canny as _skimage_canny

from .errors import CapabilityNotInstalled, InvalidOperation
from .matrix import Matrix, destination_form, require_non_empty

logger = logging.getLogger(__name__)

_detectors = {}


def register_edge_detector(detector, name="canny"):
    """Register ``detector(gray, low, high) -> bool array`` under ``name``."""
    _detectors[name] = detector
    logger.debug("registered edge detector %r", name)


def unregister_edge_detector(name="canny"):
    """Remove a detector; returns the one removed, or None."""
    return _detectors.pop(name, None)


def has_edge_detector(name="canny"):
    return name in _detectors


def skimage_edges(gray, low, high):
    """Canny edges from scikit-image on an 8-bit intensity image."""
    return _skimage_canny(gray.astype(float), sigma=1.0, low_threshold=low, high_threshold=high)


@destination_form
def canny(gray, threshold1=100, threshold2=200):
    """Detect edges in a single-channel matrix; output is uint8 0/255."""
    try:
        detector = _detectors["canny"]
    except KeyError:
        raise CapabilityNotInstalled("No edge detector registered for 'canny'") from None
    require_non_empty(gray, "canny")
    if gray.as_numpy().ndim != 2:
        raise InvalidOperation(f"canny needs a single-channel matrix, got {list(gray.dims)}")
    low, high = sorted((threshold1, threshold2))
    edges = np.asarray(detector(gray.as_numpy(), low, high), dtype=bool)
    return Matrix(np.where(edges, 255, 0).astype(np.uint8))
