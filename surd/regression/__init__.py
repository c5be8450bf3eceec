"""Sparse linear solvers for the per-candidate regressions."""

from surd.regression.base import SklearnSolver, Solver, as_solver
from surd.regression.lasso import LassoCD, coordinate_descent, soft_threshold

__all__ = [
    "LassoCD",
    "SklearnSolver",
    "Solver",
    "as_solver",
    "coordinate_descent",
    "soft_threshold",
]
