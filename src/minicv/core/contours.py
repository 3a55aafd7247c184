"""Boundary tracing, contour measurement, simplification and rasterization.

Contours are plain lists of :class:`Point` forming a closed loop. When they
need to travel through a :class:`MatVector` they are stored as ``N x 2``
float32 matrices of ``(x, y)`` rows (see ``contour_to_matrix``).
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy import ndimage

from .constants import (
    CHAIN_APPROX_NONE,
    CHAIN_APPROX_SIMPLE,
    CV_8U,
    CV_32F,
    RETR_EXTERNAL,
)
from .errors import (
    IndexOutOfRange,
    InvalidDimensions,
    InvalidOperation,
    ShapeMismatch,
    UnsupportedOperation,
)
from .geometry import Point, Rect, Scalar
from .matrix import Matrix, require_non_empty
from .vector import MatVector

logger = logging.getLogger(__name__)

# (dy, dx) neighbor offsets, clockwise starting east:
# right, down-right, down, down-left, left, up-left, up, up-right
DIRECTIONS = ((0, 1), (1, 1), (1, 0), (1, -1), (0, -1), (-1, -1), (-1, 0), (-1, 1))

_EIGHT_CONNECTED = np.ones((3, 3), dtype=bool)


# -- drawing choices --------------------------------------------------------

class ContourSelector:
    """Which contours ``draw_contours`` rasterizes."""


@dataclass(frozen=True)
class AllContours(ContourSelector):
    pass


@dataclass(frozen=True)
class ByIndex(ContourSelector):
    index: int


ALL_CONTOURS = AllContours()


class Thickness:
    """How ``draw_contours`` rasterizes a contour."""


@dataclass(frozen=True)
class Filled(Thickness):
    pass


@dataclass(frozen=True)
class Stroke(Thickness):
    width: int = 1


FILLED = Filled()


# -- conversions ------------------------------------------------------------

def matrix_to_contour(matrix):
    """Read an ``N x 2`` matrix of ``(x, y)`` rows as a list of points."""
    if matrix.is_empty:
        return []
    values = matrix.as_numpy()
    if values.shape[-1] != 2:
        raise ShapeMismatch(f"Contour matrix must have 2 columns, got {list(matrix.dims)}")
    return [Point(x, y) for x, y in values.reshape(-1, 2).tolist()]


def contour_to_matrix(contour):
    """Store a contour as an ``N x 2`` float32 matrix."""
    points = _as_points(contour)
    if not points:
        return Matrix.empty()
    return Matrix.from_array([list(p) for p in points], dtype=CV_32F)


def _as_points(contour):
    if isinstance(contour, Matrix):
        return matrix_to_contour(contour)
    return [p if isinstance(p, Point) else Point(*p) for p in contour]


def _as_contour_list(contours):
    if isinstance(contours, MatVector):
        return [matrix_to_contour(m) for m in contours]
    return [_as_points(c) for c in contours]


# -- tracing ----------------------------------------------------------------

def _trace_boundary(on, visited, y, x):
    """Moore-neighbor walk from (y, x) until it returns to the start.

    A start pixel that is not on the boundary cycle (possible for components
    touching the image edge) is never revisited; the walk then stops at the
    first repeated (pixel, arrival direction) state and keeps one cycle.
    """
    h, w = on.shape
    contour = []
    seen = {}
    cy, cx, direction = y, x, 0
    while True:
        state = (cy, cx, direction)
        if state in seen:
            del contour[:seen[state]]
            break
        seen[state] = len(contour)
        contour.append(Point(cx, cy))
        visited[cy, cx] = True
        for k in range(8):
            d = (direction + 7 + k) % 8
            ny, nx = cy + DIRECTIONS[d][0], cx + DIRECTIONS[d][1]
            if 0 <= ny < h and 0 <= nx < w and on[ny, nx]:
                cy, cx, direction = ny, nx, d
                break
        else:
            break
        if cy == y and cx == x:
            break
    return contour


def _is_straight(a, b, c):
    """True when b lies on the segment from a to c, moving the same way."""
    d1x, d1y = b.x - a.x, b.y - a.y
    d2x, d2y = c.x - b.x, c.y - b.y
    return d1x * d2y - d1y * d2x == 0 and d1x * d2x + d1y * d2y > 0


def _compress_runs(contour):
    if len(contour) <= 2:
        return list(contour)
    kept = [contour[0]]
    for b, c in zip(contour[1:-1], contour[2:]):
        if not _is_straight(kept[-1], b, c):
            kept.append(b)
    kept.append(contour[-1])
    if len(kept) >= 3 and _is_straight(kept[-2], kept[-1], kept[0]):
        kept.pop()
    return kept


def find_contours(binary, mode=RETR_EXTERNAL, method=CHAIN_APPROX_SIMPLE,
                  contours=None, hierarchy=None):
    """Trace the external boundary of every foreground component.

    ``binary`` is a single-channel matrix where any non-zero element is
    foreground. Returns a list of contours. When ``contours`` (a MatVector)
    is given it is refilled with one ``N x 2`` matrix per contour; when
    ``hierarchy`` is given it receives ``[next, previous, -1, -1]`` rows.
    """
    if mode != RETR_EXTERNAL:
        raise UnsupportedOperation(f"Unsupported retrieval mode: {mode}")
    if method not in (CHAIN_APPROX_NONE, CHAIN_APPROX_SIMPLE):
        raise UnsupportedOperation(f"Unsupported approximation method: {method}")
    require_non_empty(binary, "find_contours")
    if binary.as_numpy().ndim != 2:
        raise InvalidOperation(f"find_contours needs a single-channel matrix, got {list(binary.dims)}")

    on = binary.as_numpy() > 0
    h, w = on.shape
    labels, _ = ndimage.label(on, structure=_EIGHT_CONNECTED)
    visited = np.zeros_like(on)
    traced = set()
    found = []
    for y in range(1, h - 1):
        # Interior pixels that open a foreground run from the left
        starts = np.flatnonzero(on[y, 1:w - 1] & ~on[y, 0:w - 2]) + 1
        for x in starts.tolist():
            label = labels[y, x]
            if visited[y, x] or label in traced:
                continue
            traced.add(label)
            contour = _trace_boundary(on, visited, y, x)
            if method == CHAIN_APPROX_SIMPLE:
                contour = _compress_runs(contour)
            found.append(contour)
    logger.debug("traced %d contour(s) in %dx%d image", len(found), h, w)

    if contours is not None:
        contours.clear()
        for contour in found:
            contours.push(contour_to_matrix(contour))
    if hierarchy is not None:
        n = len(found)
        if n:
            links = np.full((n, 4), -1, dtype=np.float32)
            links[:-1, 0] = np.arange(1, n)
            links[1:, 1] = np.arange(n - 1)
            hierarchy.assign(Matrix(links))
        else:
            hierarchy.assign(Matrix.empty())
    return found


# -- measurement ------------------------------------------------------------

def _coords(points):
    return np.array([[p.x, p.y] for p in points], dtype=np.float64).reshape(-1, 2)


def contour_area(contour, oriented=False):
    """Polygon area by the shoelace formula; fewer than 3 points give 0."""
    points = _as_points(contour)
    if len(points) < 3:
        return 0.0
    xy = _coords(points)
    x, y = xy[:, 0], xy[:, 1]
    twice = float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))
    return twice / 2 if oriented else abs(twice) / 2


def arc_length(contour, closed=True):
    """Sum of edge lengths, including the wrap-around edge when closed."""
    points = _as_points(contour)
    if len(points) < 2:
        return 0.0
    xy = _coords(points)
    if closed:
        xy = np.vstack([xy, xy[:1]])
    return float(np.hypot(*np.diff(xy, axis=0).T).sum())


def bounding_rect(contour):
    """Smallest pixel-aligned rectangle containing every point."""
    points = _as_points(contour)
    if not points:
        return Rect(0, 0, 0, 0)
    xy = _coords(points)
    x0, y0 = np.floor(xy.min(axis=0)).astype(int)
    x1, y1 = np.floor(xy.max(axis=0)).astype(int)
    return Rect(int(x0), int(y0), int(x1 - x0 + 1), int(y1 - y0 + 1))


# -- simplification ---------------------------------------------------------

def _chord_distances(xy, start, end):
    dx, dy = end - start
    norm = math.hypot(dx, dy)
    if norm == 0:
        return np.hypot(xy[:, 0] - start[0], xy[:, 1] - start[1])
    return np.abs(dx * (start[1] - xy[:, 1]) - (start[0] - xy[:, 0]) * dy) / norm


def _douglas_peucker(points, epsilon):
    xy = _coords(points)
    keep = np.zeros(len(points), dtype=bool)
    keep[0] = keep[-1] = True
    pending = [(0, len(points) - 1)]
    while pending:
        first, last = pending.pop()
        if last - first < 2:
            continue
        distances = _chord_distances(xy[first + 1:last], xy[first], xy[last])
        i = int(np.argmax(distances))
        if distances[i] > epsilon:
            split = first + 1 + i
            keep[split] = True
            pending.append((first, split))
            pending.append((split, last))
    return [p for p, k in zip(points, keep) if k]


def approx_poly_dp(contour, epsilon, closed=True, dst=None):
    """Simplify a contour with Ramer-Douglas-Peucker.

    A closed contour is returned with its first vertex repeated at the end.
    When ``dst`` is given it also receives the result as an ``N x 2`` matrix.
    """
    if epsilon < 0:
        raise UnsupportedOperation(f"epsilon must be non-negative, got {epsilon}")
    points = _as_points(contour)
    if len(points) < 3:
        result = list(points)
    else:
        ring = points[:-1] if closed and points[0] == points[-1] else points
        result = _douglas_peucker(ring, epsilon) if len(ring) >= 3 else list(ring)
        if closed:
            result.append(result[0])
    if dst is not None:
        dst.assign(contour_to_matrix(result))
    return result


# -- rasterization ----------------------------------------------------------

def _draw_line(planes, a, b, color):
    """Integer Bresenham line from a to b, clipped to the canvas."""
    h, w = planes.shape[:2]
    x0, y0 = int(round(a.x)), int(round(a.y))
    x1, y1 = int(round(b.x)), int(round(b.y))
    dx, dy = abs(x1 - x0), -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        if 0 <= x0 < w and 0 <= y0 < h:
            planes[y0, x0, :3] = color
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _fill_polygon(planes, points, color):
    """Even-odd scanline fill."""
    h, w = planes.shape[:2]
    ys = [p.y for p in points]
    y_min = max(0, math.floor(min(ys)))
    y_max = min(h - 1, math.floor(max(ys)))
    edges = list(zip(points, points[1:] + points[:1]))
    for y in range(y_min, y_max + 1):
        xs = sorted(
            a.x + (y - a.y) * (b.x - a.x) / (b.y - a.y)
            for a, b in edges
            if a.y <= y < b.y or b.y <= y < a.y
        )
        for k in range(0, len(xs), 2):
            left = xs[k]
            right = xs[k + 1] if k + 1 < len(xs) else xs[k]
            x0 = max(0, math.floor(left))
            x1 = min(w - 1, math.floor(right))
            if x0 <= x1:
                planes[y, x0:x1 + 1, :3] = color


def draw_contours(image, contours, selector=ALL_CONTOURS, color=Scalar(), thickness=Stroke()):
    """Rasterize contours onto a uint8 canvas with at least 3 channels, in place.

    ``FILLED`` paints the polygon interior; ``Stroke`` draws one-pixel edges
    (wider strokes are drawn one pixel wide).
    """
    if image.dtype != CV_8U or image.channels < 3:
        raise UnsupportedOperation("draw_contours needs a uint8 canvas with at least 3 channels")
    require_non_empty(image, "draw_contours")
    polygons = _as_contour_list(contours)

    if isinstance(selector, ByIndex):
        if not 0 <= selector.index < len(polygons):
            raise IndexOutOfRange(f"Contour index {selector.index} out of range for {len(polygons)}")
        polygons = [polygons[selector.index]]
    elif not isinstance(selector, AllContours):
        raise UnsupportedOperation(f"Unsupported contour selector: {selector!r}")

    if isinstance(thickness, Stroke):
        if thickness.width < 1:
            raise InvalidDimensions(f"Stroke width must be at least 1, got {thickness.width}")
    elif not isinstance(thickness, Filled):
        raise UnsupportedOperation(f"Unsupported thickness: {thickness!r}")

    planes = image.planes()
    # Color channels are truncated toward zero, then clamped
    rgb = np.clip(np.trunc(np.asarray(Scalar.coerce(color)[:3], dtype=np.float64)), 0, 255)
    rgb = rgb.astype(np.uint8)
    for polygon in polygons:
        if not polygon:
            continue
        if isinstance(thickness, Filled):
            _fill_polygon(planes, polygon, rgb)
        else:
            for a, b in zip(polygon, polygon[1:] + polygon[:1]):
                _draw_line(planes, a, b, rgb)
