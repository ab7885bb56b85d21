"""
Projective transform (homography) between two quadrilaterals.

Coefficients are kept as the flat list [a, b, c, d, e, f, g, h, 1], the
row-major entries of

    | a  b  c |
    | d  e  f |
    | g  h  1 |
"""

import numpy as np

from .geometry import as_corner_array
from .linear_solver import solve


def compute_transform(src, dst):
    """
    Solve for the homography sending each src point onto its dst point.

    To get the inverse mapping, call again with the arguments swapped
    rather than inverting the matrix.

    Args:
        src: Four source points
        dst: Four destination points, in the same order

    Returns:
        Read-only numpy array of 9 coefficients, the last fixed at 1.
        Collinear source points give nan/inf coefficients instead of an error.

    Raises:
        InvalidCornersError: If either side does not hold exactly 4 points
    """
    src = as_corner_array(src)
    dst = as_corner_array(dst)

    a = np.zeros((8, 8), dtype=np.float64)
    b = np.zeros(8, dtype=np.float64)
    for i, ((x, y), (u, v)) in enumerate(zip(src, dst)):
        a[2 * i] = [x, y, 1, 0, 0, 0, -x * u, -y * u]
        b[2 * i] = u
        a[2 * i + 1] = [0, 0, 0, x, y, 1, -x * v, -y * v]
        b[2 * i + 1] = v

    coeffs = np.append(solve(a, b), 1.0)
    coeffs.setflags(write=False)
    return coeffs


def as_matrix(coeffs):
    """Reshape the 9 coefficients into a 3×3 matrix"""
    return np.asarray(coeffs, dtype=np.float64).reshape(3, 3)


def map_point(coeffs, x, y):
    """
    Apply the transform to a single point.

    The denominator is not checked; a zero gives inf/nan coordinates.

    Returns:
        (x, y) tuple of floats
    """
    a, b, c, d, e, f, g, h = (float(v) for v in coeffs[:8])
    with np.errstate(divide="ignore", invalid="ignore"):
        w = np.float64(g * x + h * y + 1.0)
        return float((a * x + b * y + c) / w), float((d * x + e * y + f) / w)


def map_points(coeffs, xs, ys):
    """
    Vectorised map_point over arrays of x and y coordinates.

    Returns:
        Tuple (xs, ys) of float64 arrays with the broadcast shape of the inputs
    """
    a, b, c, d, e, f, g, h = (float(v) for v in coeffs[:8])
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        w = g * xs + h * ys + 1.0
        return (a * xs + b * ys + c) / w, (d * xs + e * ys + f) / w
