"""Per-iteration fan-out: one regression per active candidate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed

from surd.core.metrics import residual_mse
from surd.regression.base import Solver


@dataclass
class CandidateFit:
    """Result of regressing one candidate on the other active variables."""

    index: int
    mse: float
    weights: np.ndarray
    predictors: np.ndarray


def build_subproblem(
    Z: np.ndarray,
    target: int,
    active: Sequence[int],
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Slice the regression of ``target`` on the rest of ``active``.

    Returns
    -------
    predictors : ndarray of int
        Column indices of the predictors, ascending.
    X_sub : ndarray of shape (n, len(predictors))
        Private copy of the predictor columns.
    y : ndarray of shape (n,)
    """
    predictors = np.array(sorted(j for j in active if j != target), dtype=np.int64)
    X_sub = np.ascontiguousarray(Z[:, predictors])
    y = np.ascontiguousarray(Z[:, target])
    return predictors, X_sub, y


def fit_candidate(
    Z: np.ndarray,
    target: int,
    active: Sequence[int],
    solver: Solver,
) -> CandidateFit:
    """Fit one candidate and score it by residual MSE."""
    predictors, X_sub, y = build_subproblem(Z, target, active)

    if predictors.size == 0:
        return CandidateFit(
            index=target,
            mse=float("inf"),
            weights=np.empty(0, dtype=np.float64),
            predictors=predictors,
        )

    weights = np.asarray(solver.fit(X_sub, y), dtype=np.float64).ravel()
    if weights.shape[0] != predictors.size:
        raise ValueError(
            f"solver returned {weights.shape[0]} weights for {predictors.size} predictors"
        )

    return CandidateFit(
        index=target,
        mse=residual_mse(X_sub, y, weights),
        weights=weights,
        predictors=predictors,
    )


def dispatch_candidates(
    Z: np.ndarray,
    active: Sequence[int],
    solver: Solver,
    parallel: Optional[Parallel] = None,
    n_jobs: int = 1,
    prefer: Optional[str] = "threads",
) -> List[CandidateFit]:
    """
    Fit every active candidate and wait for all of them.

    At most ``n_jobs`` fits run at once. The returned list is ordered by
    candidate index, whatever order the tasks finished in. An exception
    from any task propagates and the other results are discarded.

    Parameters
    ----------
    parallel : joblib.Parallel, optional
        Open pool to reuse across iterations. If None, a pool bounded by
        ``n_jobs`` is created for this call.
    """
    candidates = sorted(active)
    if parallel is None:
        parallel = Parallel(n_jobs=n_jobs, prefer=prefer)
    fits = parallel(
        delayed(fit_candidate)(Z, j, candidates, solver) for j in candidates
    )
    return sorted(fits, key=lambda f: f.index)


def _selection_key(fit: CandidateFit) -> Tuple[float, int]:
    mse = fit.mse if not np.isnan(fit.mse) else float("inf")
    return mse, fit.index


def select_best(fits: Sequence[CandidateFit]) -> CandidateFit:
    """Lowest MSE wins; exact ties go to the lowest variable index."""
    if not fits:
        raise ValueError("no candidates to select from")
    return min(fits, key=_selection_key)
