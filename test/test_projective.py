"""
Pytest for the homography solver and point mapping.
"""
import numpy as np
import pytest

from docscan.errors import InvalidCornersError
from docscan.projective import as_matrix, compute_transform, map_point, map_points

SRC = [(100, 100), (700, 120), (680, 580), (120, 560)]
DST = [(0, 0), (600, 0), (600, 460), (0, 460)]


def test_maps_each_source_corner_onto_its_destination():
    coeffs = compute_transform(SRC, DST)
    for (x, y), (u, v) in zip(SRC, DST):
        assert map_point(coeffs, x, y) == pytest.approx((u, v), abs=1e-6)


def test_same_points_give_identity():
    coeffs = compute_transform(DST, DST)
    np.testing.assert_allclose(coeffs, [1, 0, 0, 0, 1, 0, 0, 0, 1], atol=1e-12)


def test_last_coefficient_is_fixed_and_result_is_read_only():
    coeffs = compute_transform(SRC, DST)
    assert coeffs.shape == (9,)
    assert coeffs[8] == 1.0
    with pytest.raises(ValueError):
        coeffs[0] = 5.0


def test_swapped_arguments_give_the_inverse():
    forward = as_matrix(compute_transform(SRC, DST))
    inverse = as_matrix(compute_transform(DST, SRC))
    product = forward @ inverse
    np.testing.assert_allclose(product / product[2, 2], np.eye(3), atol=1e-9)


def test_round_trip_through_inverse():
    forward = compute_transform(SRC, DST)
    inverse = compute_transform(DST, SRC)
    u, v = map_point(forward, 400, 300)
    assert map_point(inverse, u, v) == pytest.approx((400, 300), abs=1e-6)


def test_wrong_point_count_is_rejected():
    with pytest.raises(InvalidCornersError):
        compute_transform(SRC[:3], DST[:3])
    with pytest.raises(ValueError):
        compute_transform(SRC, DST + [(1, 1)])


def test_collinear_source_does_not_raise():
    collinear = [(0, 0), (10, 0), (20, 0), (30, 0)]
    coeffs = compute_transform(collinear, DST)
    assert coeffs.shape == (9,)
    assert not np.all(np.isfinite(coeffs[:8]))


def test_zero_denominator_gives_non_finite_point():
    coeffs = np.array([1, 0, 0, 0, 1, 0, -1, 0, 1], dtype=float)
    x, y = map_point(coeffs, 1.0, 0.0)
    assert not np.isfinite(x)


def test_map_points_matches_map_point():
    coeffs = compute_transform(DST, SRC)
    xs = np.array([[0.0, 10.0], [300.0, 599.0]])
    ys = np.array([[0.0, 5.0], [200.0, 459.0]])
    out_x, out_y = map_points(coeffs, xs, ys)
    assert out_x.shape == xs.shape
    for x, y, u, v in zip(xs.ravel(), ys.ravel(), out_x.ravel(), out_y.ravel()):
        assert map_point(coeffs, x, y) == pytest.approx((u, v))
