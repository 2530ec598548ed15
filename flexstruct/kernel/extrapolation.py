# flexstruct/kernel/extrapolation.py
"""
RICHARDSON EXTRAPOLATION: Predicting the Converged Solution
===========================================================

Three solutions s1, s2, s3 computed on successively refined meshes with
element-size parameters h1 > h2 > h3 are fitted with the model

    s(h) = s_inf + c · h^beta

which gives an estimate s_inf of the exact (mesh-independent) value and the
observed convergence rate beta. For the usual halving of the element size
(h = 4, 2, 1) the fit has a closed form; for other refinements the exponent
is the root of a scalar equation.
"""

from typing import Sequence, Tuple

import numpy as np
from scipy.optimize import brentq


def richardson_extrapolate(
    solutions: Sequence[float],
    params: Sequence[float]
) -> Tuple[float, float, float, np.ndarray]:
    """
    Extrapolate three mesh-refinement solutions to zero element size.

    Parameters:
    -----------
    solutions : Sequence[float]
        s1, s2, s3 from the coarsest to the finest mesh
    params : Sequence[float]
        Element-size parameters h1 > h2 > h3 (for example refinement
        factors [4.0, 2.0, 1.0])

    Returns:
    --------
    estimate : float
        Extrapolated solution s_inf
    beta : float
        Observed convergence rate
    c : float
        Coefficient of the error term
    residual : np.ndarray
        Fit residuals s_i - (s_inf + c h_i^beta), zero up to round-off

    Raises:
    -------
    ValueError
        If the data are not three monotonically converging values (successive
        differences of one sign that shrink under refinement)

    Example:
    --------
    >>> round(richardson_extrapolate([2.48, 2.12, 2.03], [4.0, 2.0, 1.0])[0], 6)
    2.0
    """
    s = np.asarray(solutions, dtype=float)
    h = np.asarray(params, dtype=float)
    if s.shape != (3,) or h.shape != (3,):
        raise ValueError("Richardson extrapolation needs exactly three solutions and parameters")
    if not (h[0] > h[1] > h[2] > 0.0):
        raise ValueError(f"Parameters must be positive and decreasing, got {h}")

    d12 = s[0] - s[1]
    d23 = s[1] - s[2]
    if d12 == 0.0 or d23 == 0.0 or d12 / d23 <= 0.0:
        raise ValueError(
            f"Solutions {s} do not converge monotonically; cannot extrapolate"
        )
    ratio = d12 / d23

    q1 = h[0] / h[1]
    q2 = h[1] / h[2]
    if np.isclose(q1, q2):
        beta = np.log(ratio) / np.log(q1)
    else:
        def mismatch(b):
            return (h[0] ** b - h[1] ** b) - ratio * (h[1] ** b - h[2] ** b)

        lo, hi = 1e-6, 1.0
        while mismatch(lo) * mismatch(hi) > 0.0:
            hi *= 2.0
            if hi > 64.0:
                raise ValueError(f"No convergence rate fits solutions {s}")
        beta = brentq(mismatch, lo, hi)

    # Differences that grow under refinement give a non-positive rate
    if not beta > 0.0:
        raise ValueError(
            f"Solutions {s} diverge under refinement (rate {beta:.3g}); cannot extrapolate"
        )

    c = d12 / (h[0] ** beta - h[1] ** beta)
    estimate = s[0] - c * h[0] ** beta
    residual = s - (estimate + c * h ** beta)
    return float(estimate), float(beta), float(c), residual


def normalized_errors(solutions: Sequence[float], estimate: float) -> np.ndarray:
    """|s_i - s_inf| / |s_inf| for each solution."""
    s = np.asarray(solutions, dtype=float)
    return np.abs(s - estimate) / abs(estimate)
