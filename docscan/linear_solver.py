"""
Dense linear system solver used by the projective transform code.
"""

import numpy as np


def solve(a, b):
    """
    Solve a·x = b by Gaussian elimination with partial pivoting.

    Works on float64 copies, so the caller's matrix and vector are left
    untouched. A singular system does not raise: the zero pivot divides
    through and the affected entries come back as nan or inf.

    Args:
        a: N×N coefficient matrix (nested lists or numpy array)
        b: Right-hand side vector of N values

    Returns:
        numpy array of N float64 values

    Raises:
        ValueError: If a is not square or b does not match its size
    """
    a = np.array(a, dtype=np.float64)
    b = np.array(b, dtype=np.float64).reshape(-1)

    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Coefficient matrix must be square, got shape {a.shape}")
    n = a.shape[0]
    if b.shape[0] != n:
        raise ValueError(f"Right-hand side must have {n} entries, got {b.shape[0]}")

    with np.errstate(divide="ignore", invalid="ignore"):
        # Forward elimination
        for i in range(n):
            pivot = i + int(np.argmax(np.abs(a[i:, i])))
            if pivot != i:
                a[[i, pivot]] = a[[pivot, i]]
                b[[i, pivot]] = b[[pivot, i]]

            factors = a[i + 1:, i] / a[i, i]
            a[i + 1:, i:] -= factors[:, np.newaxis] * a[i, i:]
            b[i + 1:] -= factors * b[i]

        # Back substitution
        x = np.zeros(n, dtype=np.float64)
        for i in range(n - 1, -1, -1):
            x[i] = (b[i] - a[i, i + 1:] @ x[i + 1:]) / a[i, i]

    return x
