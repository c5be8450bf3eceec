"""L1-penalized least squares by cyclic coordinate descent."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import njit
from sklearn.base import BaseEstimator

NORM_FLOOR = 1e-12
DELTA_FLOOR = 1e-12

DEFAULT_ALPHA = 0.01
DEFAULT_TOLERANCE = 1e-5
DEFAULT_MAX_ITER = 1000


@njit(cache=True, nogil=True)
def soft_threshold(z: float, lam: float) -> float:
    """Proximal operator of the L1 penalty."""
    if z > lam:
        return z - lam
    if z < -lam:
        return z + lam
    return 0.0


@njit(cache=True, nogil=True)
def coordinate_descent(
    X: np.ndarray,
    y: np.ndarray,
    alpha: float,
    tolerance: float,
    max_iter: int,
) -> Tuple[np.ndarray, int]:
    """
    Minimize 0.5 * ||y - Xw||^2 + alpha * ||w||_1.

    Coordinates are visited in index order every sweep and a single running
    residual is updated after each accepted step. Stops once the largest
    coordinate change of a sweep drops below ``tolerance`` or after
    ``max_iter`` sweeps, whichever comes first.

    Returns
    -------
    weights : ndarray of shape (k,)
    n_iter : int
        Number of sweeps performed.
    """
    n, k = X.shape
    weights = np.zeros(k, dtype=np.float64)
    if k == 0:
        return weights, 0

    norms = np.empty(k, dtype=np.float64)
    for j in range(k):
        ss = 0.0
        for i in range(n):
            ss += X[i, j] * X[i, j]
        norms[j] = ss if ss >= NORM_FLOOR else NORM_FLOOR

    resid = y.copy()
    n_iter = 0
    for it in range(max_iter):
        n_iter = it + 1
        max_delta = 0.0

        for j in range(k):
            old = weights[j]

            # add back j's own contribution before re-estimating it
            corr = 0.0
            for i in range(n):
                corr += X[i, j] * resid[i]
            corr += old * norms[j]

            new = soft_threshold(corr, alpha) / norms[j]
            delta = new - old
            if abs(delta) > DELTA_FLOOR:
                for i in range(n):
                    resid[i] -= delta * X[i, j]
                weights[j] = new
                if abs(delta) > max_delta:
                    max_delta = abs(delta)

        if max_delta < tolerance:
            break

    return weights, n_iter


class LassoCD(BaseEstimator):
    """
    Default sparse linear solver used by :class:`surd.SURD`.

    Parameters
    ----------
    alpha : float, default=0.01
        L1 penalty. Negative or NaN values fall back to 0.01; 0 gives ordinary
        least squares.
    tolerance : float, default=1e-5
        Stop once a full sweep changes no weight by more than this.
        Non-positive values fall back to 1e-5.
    max_iter : int, default=1000
        Maximum number of sweeps. Non-positive values fall back to 1000.

    Notes
    -----
    ``fit`` keeps no per-call state on the instance, so a single solver can
    serve concurrent tasks.
    """

    def __init__(
        self,
        alpha: float = DEFAULT_ALPHA,
        tolerance: float = DEFAULT_TOLERANCE,
        max_iter: int = DEFAULT_MAX_ITER,
    ):
        self.alpha = DEFAULT_ALPHA if not alpha >= 0 else float(alpha)
        self.tolerance = DEFAULT_TOLERANCE if not tolerance > 0 else float(tolerance)
        self.max_iter = DEFAULT_MAX_ITER if not max_iter > 0 else int(max_iter)

    def fit(self, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Return the weight vector for ``y ~ X``."""
        X = np.ascontiguousarray(X, dtype=np.float64)
        y = np.ascontiguousarray(y, dtype=np.float64).ravel()
        if X.ndim != 2:
            raise ValueError(f"X must be 2D, got {X.ndim}D")
        if X.shape[0] != y.shape[0]:
            raise ValueError(f"X has {X.shape[0]} rows but y has {y.shape[0]}")
        weights, _ = coordinate_descent(X, y, self.alpha, self.tolerance, self.max_iter)
        return weights
