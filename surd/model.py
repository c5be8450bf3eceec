"""Sparse Unbiased Recursive Discovery of a causal order."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Union

import numpy as np
import pandas as pd
from joblib import Parallel
from tqdm import tqdm

from surd._preprocess import constant_columns, standardize, validate_matrix
from surd.core.metrics import mse
from surd.dispatch import dispatch_candidates, select_best
from surd.graph import GraphAccumulator, GraphResult
from surd.regression.base import Solver, as_solver
from surd.regression.lasso import (
    DEFAULT_ALPHA,
    DEFAULT_MAX_ITER,
    DEFAULT_TOLERANCE,
    LassoCD,
)

DEFAULT_WORKERS = 4
PARALLEL_BACKENDS = ("threads", "processes", None)


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class SURDConfig:
    """
    Configuration for :class:`SURD`.

    Non-positive numeric fields are replaced by their defaults when the
    config is created; the instance is immutable afterwards.

    Parameters
    ----------
    alpha : float
        L1 penalty of the default Lasso solver.
    tolerance : float
        Coordinate-descent convergence threshold. Also the minimum absolute
        weight for an edge to be recorded.
    max_iter : int
        Maximum coordinate-descent sweeps per regression.
    workers : int
        Maximum number of regressions running at once.
    verbose : bool
        Print progress.
    parallel_backend : str, optional
        Joblib backend preference: 'threads' (default), 'processes', or
        None for joblib default.
    """
    alpha: float = DEFAULT_ALPHA
    tolerance: float = DEFAULT_TOLERANCE
    max_iter: int = DEFAULT_MAX_ITER
    workers: int = DEFAULT_WORKERS
    verbose: bool = False
    parallel_backend: Optional[str] = "threads"

    def __post_init__(self):
        # `not x > 0` also catches NaN
        if not self.alpha > 0:
            object.__setattr__(self, "alpha", DEFAULT_ALPHA)
        if not self.tolerance > 0:
            object.__setattr__(self, "tolerance", DEFAULT_TOLERANCE)
        if not self.max_iter > 0:
            object.__setattr__(self, "max_iter", DEFAULT_MAX_ITER)
        if not self.workers > 0:
            object.__setattr__(self, "workers", DEFAULT_WORKERS)
        if self.parallel_backend not in PARALLEL_BACKENDS:
            raise ValueError(
                f"parallel_backend must be one of {PARALLEL_BACKENDS}, "
                f"got {self.parallel_backend!r}"
            )


# =============================================================================
# Estimator
# =============================================================================

class SURD:
    """
    Recursive causal ordering by sparse regression.

    Each iteration regresses every still-unordered variable on the other
    unordered ones, places the best explained variable (lowest residual
    MSE, ties to the lowest index) next in the order, and records an edge
    from it to every remaining variable whose weight exceeds the tolerance.

    Parameters
    ----------
    config : SURDConfig, optional
        Run configuration. Defaults to ``SURDConfig()``.
    solver : object, optional
        Replacement for the default :class:`LassoCD`. See :meth:`set_solver`.
    **overrides
        Field overrides applied on top of ``config``
        (``SURD(workers=1)`` is ``SURD(SURDConfig(workers=1))``).

    Examples
    --------
    >>> model = SURD(alpha=0.1, workers=4)
    >>> result = model.fit(X)
    >>> result.order, result.adjacency
    """

    def __init__(
        self,
        config: Optional[SURDConfig] = None,
        *,
        solver=None,
        **overrides,
    ):
        config = config or SURDConfig()
        if overrides:
            config = replace(config, **overrides)
        self.config = config
        self.solver: Solver = LassoCD(
            alpha=config.alpha,
            tolerance=config.tolerance,
            max_iter=config.max_iter,
        )
        if solver is not None:
            self.set_solver(solver)

    def set_solver(self, solver) -> "SURD":
        """
        Replace the sparse linear solver.

        Parameters
        ----------
        solver : object
            Either an object with ``fit(X, y) -> weights`` or a scikit-learn
            regressor (wrapped in :class:`SklearnSolver`). It is called
            concurrently and must be safe for that. Any exception it raises
            aborts :meth:`fit` without a result.

        Returns
        -------
        self
        """
        self.solver = as_solver(solver)
        return self

    def fit(self, X: Union[np.ndarray, pd.DataFrame]) -> GraphResult:
        """
        Discover the causal order of the columns of ``X``.

        Parameters
        ----------
        X : array-like or DataFrame of shape (n_samples, n_variables)

        Returns
        -------
        GraphResult

        Raises
        ------
        InvalidInputError
            X is None, empty, non-numeric or not finite.
        InsufficientSamplesError
            X has fewer than 2 rows.
        """
        X_arr, feature_names = validate_matrix(X)
        n, p = X_arr.shape
        cfg = self.config

        Z = standardize(X_arr)

        if cfg.verbose:
            print(f"SURD: {n} samples x {p} variables, "
                  f"α={cfg.alpha}, workers={cfg.workers}")
            constant = constant_columns(Z)
            if constant.size:
                names = [feature_names[i] for i in constant[:5]]
                suffix = "..." if constant.size > 5 else ""
                print(f"{constant.size} constant column(s) set to zero: {names}{suffix}")

        graph = GraphAccumulator(p, cfg.tolerance)
        active: List[int] = list(range(p))

        with Parallel(n_jobs=cfg.workers, prefer=cfg.parallel_backend) as parallel, \
                tqdm(total=p, disable=not cfg.verbose, desc="SURD") as progress:
            while active:
                if len(active) == 1:
                    last = active.pop()
                    graph.append(last, mse(Z[:, last]))
                    progress.update(1)
                    continue

                fits = dispatch_candidates(Z, active, self.solver, parallel=parallel)
                best = select_best(fits)
                graph.record_selection(best)
                active.remove(best.index)
                progress.update(1)

        result = graph.snapshot(feature_names)

        if cfg.verbose:
            n_edges = int(result.adjacency.sum())
            print(f"Causal order: {result.ordered_names} ({n_edges} edges)")

        return result

    def __repr__(self) -> str:
        return f"SURD({self.config!r}, solver={self.solver!r})"


# =============================================================================
# Convenience Functions
# =============================================================================

def discover_order(
    X: Union[np.ndarray, pd.DataFrame],
    solver=None,
    return_indices: Optional[bool] = None,
    **config,
) -> Union[List[str], List[int]]:
    """
    Causal order of the columns of ``X``.

    Parameters
    ----------
    X : array-like or DataFrame of shape (n_samples, n_variables)
    solver : object, optional
        Custom solver, see :meth:`SURD.set_solver`.
    return_indices : bool, optional
        If True, return column indices. If False, return column names.
        If None, returns names for DataFrame inputs and indices otherwise.
    **config
        Fields of :class:`SURDConfig`.

    Returns
    -------
    order : list of str or list of int
    """
    result = SURD(solver=solver, **config).fit(X)
    if return_indices is None:
        return_indices = not isinstance(X, pd.DataFrame)
    if return_indices:
        return result.order.tolist()
    return result.ordered_names
