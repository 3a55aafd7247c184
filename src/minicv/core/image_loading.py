"""Load and save images as matrices."""

import numpy as np
from PIL import Image

from .constants import CV_8U
from .errors import UnsupportedOperation
from .matrix import Matrix


def load_image(image_path, grayscale=False):
    """Load an image as a uint8 RGB matrix, or single-channel when grayscale."""
    img = Image.open(image_path).convert('L' if grayscale else 'RGB')
    return Matrix(np.array(img, dtype=np.uint8))


def save_image(matrix, image_path):
    """Write a uint8 matrix with 1, 3 or 4 channels."""
    if matrix.dtype != CV_8U or matrix.channels not in (1, 3, 4):
        raise UnsupportedOperation(f"Cannot save {matrix!r} as an image")
    array = matrix.as_numpy()
    if array.ndim == 3 and array.shape[2] == 1:
        array = array[:, :, 0]
    Image.fromarray(np.ascontiguousarray(array)).save(image_path)
