"""Causal graph bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd

from surd.dispatch import CandidateFit


@dataclass(frozen=True, eq=False)
class GraphResult:
    """
    Output of :meth:`surd.SURD.fit`.

    Attributes
    ----------
    order : ndarray of shape (p,)
        Variable indices in causal sequence.
    adjacency : ndarray of shape (p, p), bool
        ``adjacency[i, j]`` is True when i was ordered before j and its
        weight on j exceeded the tolerance.
    weights : ndarray of shape (p, p)
        Signed edge weights, zero where there is no edge.
    residuals : ndarray of shape (p,)
        Residual MSE of the variable chosen at each step (step order, not
        variable order).
    feature_names : list of str
    """

    order: np.ndarray
    adjacency: np.ndarray
    weights: np.ndarray
    residuals: np.ndarray
    feature_names: List[str]

    @property
    def n_features(self) -> int:
        return len(self.order)

    @property
    def ordered_names(self) -> List[str]:
        return [self.feature_names[i] for i in self.order]

    def position(self, i: int) -> int:
        """Step at which variable ``i`` was ordered."""
        return int(np.where(self.order == i)[0][0])

    def edges(self) -> List[Tuple[int, int, float]]:
        """(source, target, weight) triples, sources in causal order."""
        out = []
        for i in self.order:
            for j in self.order:
                if self.adjacency[i, j]:
                    out.append((int(i), int(j), float(self.weights[i, j])))
        return out

    def to_frame(self) -> pd.DataFrame:
        """Edge table with one row per directed edge."""
        rows = [
            {
                "source": self.feature_names[i],
                "target": self.feature_names[j],
                "weight": w,
                "abs_weight": abs(w),
            }
            for i, j, w in self.edges()
        ]
        return pd.DataFrame(rows, columns=["source", "target", "weight", "abs_weight"])

    def adjacency_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.adjacency, index=self.feature_names, columns=self.feature_names)

    def weights_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.weights, index=self.feature_names, columns=self.feature_names)

    def get_order_info(self) -> pd.DataFrame:
        """
        Per-step summary.

        Returns
        -------
        DataFrame with columns:
            step: position in the causal order
            feature: name of the variable chosen at that step
            residual_mse: its residual MSE
            n_children: number of outgoing edges
        """
        return pd.DataFrame({
            "step": np.arange(self.n_features),
            "feature": self.ordered_names,
            "residual_mse": self.residuals,
            "n_children": self.adjacency[self.order].sum(axis=1),
        })


class GraphAccumulator:
    """Mutable state of one discovery run; frozen by :meth:`snapshot`."""

    def __init__(self, p: int, tolerance: float):
        self.p = p
        self.tolerance = tolerance
        self.order: List[int] = []
        self.adjacency = np.zeros((p, p), dtype=bool)
        self.weights = np.zeros((p, p), dtype=np.float64)
        self.residuals = np.zeros(p, dtype=np.float64)

    @property
    def complete(self) -> bool:
        return len(self.order) == self.p

    def append(self, var: int, mse: float) -> None:
        """Place ``var`` next in the order with its residual MSE."""
        self.residuals[len(self.order)] = mse
        self.order.append(var)

    def record_selection(self, best: CandidateFit) -> None:
        """Append the winning candidate and its edges to the still-active variables."""
        self.append(best.index, best.mse)
        for j, w in zip(best.predictors, best.weights):
            if abs(w) > self.tolerance:
                self.adjacency[best.index, j] = True
                self.weights[best.index, j] = w

    def snapshot(self, feature_names: List[str]) -> GraphResult:
        order = np.array(self.order, dtype=np.int64)
        arrays = (order, self.adjacency.copy(), self.weights.copy(), self.residuals.copy())
        for arr in arrays:
            arr.setflags(write=False)
        return GraphResult(*arrays, feature_names=list(feature_names))
