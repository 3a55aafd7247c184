"""Clean classification masks and turn them into polygons."""

import logging

import matplotlib.patches as patches
import numpy as np
from scipy import ndimage

from .assembly import hconcat
from .color import cvt_color, threshold
from .config import VectorizeConfig
from .constants import (
    CHAIN_APPROX_SIMPLE,
    COLOR_RGB2GRAY,
    INTER_NEAREST,
    MORPH_CLOSE,
    MORPH_RECT,
    RETR_EXTERNAL,
)
from .contours import (
    ALL_CONTOURS,
    FILLED,
    Stroke,
    approx_poly_dp,
    arc_length,
    bounding_rect,
    contour_area,
    draw_contours,
    find_contours,
)
from .geometry import Point, Scalar, Size
from .matrix import Matrix
from .morphology import get_structuring_element, morphology_ex
from .sampling import resize

logger = logging.getLogger(__name__)


def remove_small_components(binary, min_area):
    """Drop 8-connected foreground components with fewer than ``min_area`` pixels."""
    on = binary.as_numpy() > 0
    labels, count = ndimage.label(on, structure=np.ones((3, 3), dtype=bool))
    keep = np.bincount(labels.ravel()) >= min_area
    keep[0] = False
    logger.debug("keeping %d of %d component(s)", int(keep.sum()), count)
    return Matrix(np.where(keep[labels], 255, 0).astype(np.uint8))


def clean_mask(mask, config=None):
    """Grayscale, resize, threshold, close and de-speckle a raw mask.

    Returns a single-channel uint8 matrix with foreground 255.
    """
    if config is None:
        config = VectorizeConfig()
    result = mask
    if result.channels >= 3:
        result = cvt_color(result, COLOR_RGB2GRAY)
    if config.target_size:
        result = resize(result, Size(*config.target_size), interpolation=INTER_NEAREST)
    binary = threshold(result, config.threshold, config.max_value)
    if config.kernel_size > 0:
        kernel = get_structuring_element(MORPH_RECT, Size(config.kernel_size, config.kernel_size))
        binary = morphology_ex(binary, MORPH_CLOSE, kernel, iterations=config.close_iterations)
    if config.min_area > 0:
        binary = remove_small_components(binary, config.min_area)
    return binary


def mask_to_polygons(binary, config=None):
    """Trace a binary mask and describe each simplified outline."""
    if config is None:
        config = VectorizeConfig()
    polygons = []
    for index, contour in enumerate(find_contours(binary, RETR_EXTERNAL, CHAIN_APPROX_SIMPLE)):
        area = contour_area(contour)
        if area < config.min_area:
            continue
        perimeter = arc_length(contour, closed=True)
        approx = approx_poly_dp(contour, config.epsilon_factor * perimeter, closed=True)
        x, y, width, height = bounding_rect(contour)
        polygons.append({
            "points": [(float(p.x), float(p.y)) for p in approx],
            "area": area,
            "perimeter": perimeter,
            "bounds": {"x": x, "y": y, "width": width, "height": height},
            "contour_index": index,
        })
    return polygons


def vectorize_mask(mask, config=None):
    """Clean a raw mask and return its polygons."""
    if config is None:
        config = VectorizeConfig()
    binary = clean_mask(mask, config)
    polygons = mask_to_polygons(binary, config)
    logger.info("Vectorized %s mask into %d polygon(s)", "x".join(map(str, mask.dims[:2])), len(polygons))
    return polygons


def render_polygons(image, polygons, color=(255, 0, 0), filled=False):
    """Draw polygons on a copy of ``image``; grayscale images are expanded to RGB."""
    if image.channels == 1:
        canvas = Matrix(np.repeat(image.planes(), 3, axis=2))
    else:
        canvas = image.clone()
    contours = [[Point(*p) for p in polygon["points"]] for polygon in polygons]
    draw_contours(canvas, contours, ALL_CONTOURS, Scalar.coerce(color),
                  FILLED if filled else Stroke(1))
    return canvas


def side_by_side(image, polygons, color=(255, 0, 0)):
    """Original image next to its filled polygon rendering."""
    rendered = render_polygons(image, polygons, color, filled=True)
    if image.channels == 1:
        image = Matrix(np.repeat(image.planes(), 3, axis=2))
    return hconcat([image, rendered])


def polygons_to_patches(polygons, edgecolor="red"):
    """Convert polygons to matplotlib patches for display."""
    return [
        patches.Polygon(
            polygon["points"], closed=True, fill=False, edgecolor=edgecolor, linewidth=2
        )
        for polygon in polygons
    ]
