"""
Perspective rectification: flattens the quadrilateral marked by four
corners into an upright rectangular raster.

The output size comes from the corner distances (longest of each opposing
pair of sides), and every output pixel is pulled from the source through
the inverse homography with nearest-neighbour sampling. Samples that land
outside the source stay transparent.
"""

import logging
import math

import numpy as np

from .errors import DegenerateGeometryError
from .geometry import as_corner_array, distance, polygon_area, rectangle_corners
from .projective import compute_transform, map_points
from .raster import as_rgba, new_raster

def round_half_up(value):
    """Round to the nearest integer, halves going up"""
    return int(math.floor(value + 0.5))


def side_lengths(corners):
    """
    Lengths of the four sides of a corner set.

    Returns:
        Tuple (top, bottom, left, right) in pixels
    """
    tl, tr, br, bl = as_corner_array(corners)
    return distance(tl, tr), distance(bl, br), distance(tl, bl), distance(tr, br)


def target_size(corners):
    """Unrounded (width, height) of the rectified output"""
    top, bottom, left, right = side_lengths(corners)
    return max(top, bottom), max(left, right)


def output_shape(corners):
    """Pixel (width, height) of the raster rectify() will allocate"""
    width, height = target_size(corners)
    return round_half_up(width), round_half_up(height)


def validate_corners(corners, min_size=1.0):
    """
    Reject corner sets that cannot produce a meaningful rectification.

    rectify() never calls this; callers that want a hard failure instead of
    a blank or garbled output check first.

    Args:
        corners: Four points ordered TL, TR, BR, BL
        min_size: Smallest acceptable output width/height in pixels

    Returns:
        Tuple (width, height) of the unrounded target size

    Raises:
        InvalidCornersError: If there are not exactly four finite points
        DegenerateGeometryError: If the output would be smaller than
            min_size, or the points enclose no area
    """
    pts = as_corner_array(corners)
    width, height = target_size(pts)
    if width < min_size or height < min_size:
        raise DegenerateGeometryError(
            f"Corners give a {width:.1f}x{height:.1f}px output, below the {min_size:g}px minimum")

    area = polygon_area(pts)
    if area < min_size * min_size:
        raise DegenerateGeometryError(f"Corners enclose no usable area ({area:.2f} px²)")
    return width, height


def rectify(source, corners):
    """
    Resample the quadrilateral bounded by corners into a flat rectangle.

    Args:
        source: Source raster (RGBA, RGB or grayscale uint8 array); not modified
        corners: Four points in source-pixel space ordered TL, TR, BR, BL

    Returns:
        New RGBA raster of shape (round(H), round(W), 4). Pixels whose
        source location falls outside the image (or is not finite) are left
        transparent. Degenerate corners give a blank or garbled raster
        rather than an error.

    Raises:
        InvalidCornersError: If there are not exactly four finite points
    """
    src = as_rgba(source)
    pts = as_corner_array(corners)
    src_h, src_w = src.shape[:2]

    width, height = target_size(pts)
    out_w, out_h = round_half_up(width), round_half_up(height)
    logging.debug("Rectifying %dx%d source to %dx%d output", src_w, src_h, out_w, out_h)

    # Maps destination pixels back into the source
    inverse = compute_transform(rectangle_corners(width, height), pts)

    output = new_raster(out_w, out_h)
    if out_w == 0 or out_h == 0:
        logging.warning("Corners give an empty output (%dx%d)", out_w, out_h)
        return output

    ys, xs = np.mgrid[0:out_h, 0:out_w]
    src_x, src_y = map_points(inverse, xs, ys)

    with np.errstate(invalid="ignore"):
        cols = np.floor(src_x + 0.5)
        rows = np.floor(src_y + 0.5)
        inside = (cols >= 0) & (cols < src_w) & (rows >= 0) & (rows < src_h)

    output[inside] = src[rows[inside].astype(np.intp), cols[inside].astype(np.intp)]
    return output
