__version__ = "0.1.0"

from surd._preprocess import standardize
from surd.core.metrics import mse
from surd.exceptions import InsufficientSamplesError, InvalidInputError, SURDError
from surd.graph import GraphResult
from surd.model import SURD, SURDConfig, discover_order
from surd.regression import (
    LassoCD,
    SklearnSolver,
    Solver,
    coordinate_descent,
    soft_threshold,
)

__all__ = [
    "__version__",
    "SURD",
    "SURDConfig",
    "GraphResult",
    "discover_order",
    "Solver",
    "LassoCD",
    "SklearnSolver",
    "coordinate_descent",
    "soft_threshold",
    "standardize",
    "mse",
    "SURDError",
    "InvalidInputError",
    "InsufficientSamplesError",
]
