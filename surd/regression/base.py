"""Solver capability and adapters."""

from __future__ import annotations

import warnings
from typing import Protocol, runtime_checkable

import numpy as np
from sklearn.base import RegressorMixin, clone


@runtime_checkable
class Solver(Protocol):
    """
    Anything that fits a weight vector for one regression subproblem.

    ``fit(X, y)`` receives an (n, k) predictor matrix and a length-n target
    and returns a length-k weight vector. Implementations are called
    concurrently from several workers with disjoint inputs and must not
    keep per-call state on the instance.
    """

    def fit(self, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        ...


class SklearnSolver:
    """
    Use a scikit-learn linear regressor as a solver.

    The estimator is cloned for every call so concurrent fits never share
    a fitted instance. The intercept, if any, is discarded: inputs are
    standardized, so it is zero up to rounding.

    Parameters
    ----------
    estimator : sklearn regressor
        Any estimator exposing ``coef_`` after ``fit`` (Lasso, ElasticNet,
        Ridge, LinearRegression, ...).
    """

    def __init__(self, estimator):
        self.estimator = estimator

    def fit(self, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        model = clone(self.estimator)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            model.fit(X, y)
        return np.asarray(model.coef_, dtype=np.float64).ravel()

    def __repr__(self) -> str:
        return f"SklearnSolver({self.estimator!r})"


def as_solver(obj) -> Solver:
    """Return ``obj`` as a solver, wrapping scikit-learn regressors."""
    if isinstance(obj, type):
        raise TypeError(
            f"solver must be an instance, got the class {obj.__name__}; "
            f"did you mean {obj.__name__}()?"
        )
    if isinstance(obj, RegressorMixin):
        return SklearnSolver(obj)
    if isinstance(obj, Solver):
        return obj
    raise TypeError(
        f"solver must expose fit(X, y) -> weights or be a scikit-learn regressor, "
        f"got {type(obj).__name__}"
    )
