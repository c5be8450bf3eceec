import numpy as np


def mse(resid):
    """Mean squared error of a residual vector (0.0 when empty)."""
    resid = np.asarray(resid, dtype=np.float64)
    if resid.size == 0:
        return 0.0
    return float(np.mean(resid * resid))


def residuals(X, y, weights):
    """Return y - X @ weights."""
    return y - X @ weights


def residual_mse(X, y, weights):
    """MSE of the fit y ~ X @ weights."""
    return mse(residuals(X, y, weights))
