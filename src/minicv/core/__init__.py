"""Core package for matrix-based image processing."""

from .constants import *  # noqa: F401,F403
from .errors import (
    CapabilityNotInstalled,
    DataSizeMismatch,
    IndexOutOfRange,
    InvalidDimensions,
    InvalidOperation,
    MinicvError,
    ShapeMismatch,
    UnsupportedDataType,
    UnsupportedOperation,
)
from .geometry import Point, Rect, Scalar, Size
from .matrix import Matrix, destination_form, mat_from_array
from .vector import MatVector
from .color import cvt_color, threshold
from .sampling import copy_make_border, resize
from .morphology import dilate, erode, get_structuring_element, morphology_ex
from .contours import (
    ALL_CONTOURS,
    FILLED,
    ByIndex,
    Stroke,
    approx_poly_dp,
    arc_length,
    bounding_rect,
    contour_area,
    contour_to_matrix,
    draw_contours,
    find_contours,
    matrix_to_contour,
)
from .assembly import hconcat, vconcat
from .edges import canny, has_edge_detector, register_edge_detector, skimage_edges, unregister_edge_detector
from .image_loading import load_image, save_image
from .config import VectorizeConfig, load_config, save_config
from .vectorize import (
    clean_mask,
    mask_to_polygons,
    polygons_to_patches,
    remove_small_components,
    render_polygons,
    side_by_side,
    vectorize_mask,
)

register_edge_detector(skimage_edges)
