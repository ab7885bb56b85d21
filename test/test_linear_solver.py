"""
Pytest for the Gaussian elimination solver.
"""
import numpy as np
import pytest

from docscan.linear_solver import solve


def test_solves_known_3x3_system():
    a = [[2, 1, -1], [-3, -1, 2], [-2, 1, 2]]
    b = [8, -11, -3]
    np.testing.assert_allclose(solve(a, b), [2, 3, -1], atol=1e-12)


def test_zero_leading_entry_needs_pivoting():
    a = [[0, 1], [1, 0]]
    b = [2, 3]
    np.testing.assert_allclose(solve(a, b), [3, 2])


def test_tiny_pivot_is_swapped_out():
    # Without partial pivoting the 1e-20 pivot destroys the answer
    a = [[1e-20, 1], [1, 1]]
    b = [1, 2]
    np.testing.assert_allclose(solve(a, b), [1, 1], rtol=1e-9)


def test_matches_numpy_on_random_8x8():
    rng = np.random.default_rng(7)
    a = rng.normal(size=(8, 8)) * 1000
    b = rng.normal(size=8)
    np.testing.assert_allclose(solve(a, b), np.linalg.solve(a, b), rtol=1e-8, atol=1e-12)


def test_inputs_are_not_mutated():
    a = np.array([[0.0, 2.0], [3.0, 1.0]])
    b = np.array([4.0, 5.0])
    a_before, b_before = a.copy(), b.copy()
    solve(a, b)
    np.testing.assert_array_equal(a, a_before)
    np.testing.assert_array_equal(b, b_before)


def test_singular_system_does_not_raise():
    x = solve([[1, 2], [2, 4]], [1, 2])
    assert x.shape == (2,)
    assert not np.all(np.isfinite(x))


def test_rejects_non_square_matrix():
    with pytest.raises(ValueError):
        solve([[1, 2, 3], [4, 5, 6]], [1, 2])


def test_rejects_mismatched_rhs():
    with pytest.raises(ValueError):
        solve([[1, 0], [0, 1]], [1, 2, 3])
