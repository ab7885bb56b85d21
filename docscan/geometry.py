"""
Point and corner set helpers shared by the rectifier, the corner editor
and the command-line interface.

A corner set is always four points ordered top-left, top-right,
bottom-right, bottom-left. The order is used positionally and is never
re-sorted here.
"""

import numpy as np

from .errors import InvalidCornersError

CORNER_LABELS = ("top-left", "top-right", "bottom-right", "bottom-left")

# Fraction of the image kept clear around freshly placed corners
DEFAULT_INSET = 0.1


def as_corner_array(corners):
    """
    Coerce a corner set to a (4, 2) float64 array.

    Args:
        corners: Four points as (x, y) pairs, {"x": .., "y": ..} dicts,
                 or a numpy array of shape (4, 2)

    Returns:
        New numpy array of shape (4, 2)

    Raises:
        InvalidCornersError: If the input does not hold exactly four points
    """
    if isinstance(corners, np.ndarray):
        pts = corners.astype(np.float64)
    else:
        try:
            pts = np.array([_as_pair(c) for c in corners], dtype=np.float64)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidCornersError(f"Could not read corner points: {e}") from e

    if pts.shape != (4, 2):
        raise InvalidCornersError(f"Expected 4 corner points, got shape {pts.shape}")
    if not np.all(np.isfinite(pts)):
        raise InvalidCornersError("Corner coordinates must be finite")
    return pts


def _as_pair(point):
    if isinstance(point, dict):
        return point["x"], point["y"]
    x, y = point
    return x, y


def distance(p, q):
    """Euclidean distance between two points"""
    return float(np.hypot(q[0] - p[0], q[1] - p[1]))


def rectangle_corners(width, height):
    """Axis-aligned corner set [(0,0), (W,0), (W,H), (0,H)]"""
    return np.array([
        [0.0, 0.0],
        [width, 0.0],
        [width, height],
        [0.0, height]], dtype=np.float64)


def default_corners(width, height, inset=DEFAULT_INSET):
    """
    Starting corners for an image that has none yet, inset from each edge.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        inset: Fraction of each dimension left outside the corners

    Returns:
        numpy array of shape (4, 2)
    """
    near, far = inset, 1.0 - inset
    return np.array([
        [width * near, height * near],
        [width * far, height * near],
        [width * far, height * far],
        [width * near, height * far]], dtype=np.float64)


def polygon_area(corners):
    """Absolute area of the quadrilateral (shoelace formula)"""
    pts = as_corner_array(corners)
    x, y = pts[:, 0], pts[:, 1]
    return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)
