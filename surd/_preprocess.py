"""Input preprocessing: conversion, validation, standardization."""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from numba import njit

from surd.exceptions import InsufficientSamplesError, InvalidInputError

STD_FLOOR = 1e-12


# --- Input conversion ---


def to_numpy(data, dtype=np.float64) -> np.ndarray:
    """Convert Pandas/Polars/list to numpy array."""
    if hasattr(data, "to_pandas"):
        data = data.to_pandas()
    if isinstance(data, (pd.DataFrame, pd.Series)):
        try:
            return data.to_numpy(dtype=dtype, na_value=np.nan)
        except TypeError:
            arr = data.to_numpy()
            if arr.dtype == object:
                arr = np.where(pd.isna(arr), np.nan, arr)
            return arr.astype(dtype)
    if hasattr(data, "values"):
        return np.asarray(data.values, dtype=dtype)
    return np.asarray(data, dtype=dtype)


def extract_feature_names(X) -> Optional[List[str]]:
    """Extract column names from DataFrame, or None for ndarray."""
    if hasattr(X, "columns"):
        return list(X.columns)
    return None


# --- Validation ---


def validate_matrix(X) -> Tuple[np.ndarray, List[str]]:
    """
    Validate and convert the input matrix.

    Raises
    ------
    InvalidInputError
        X is None, not two-dimensional, has no rows or no columns, has
        non-numeric columns or contains NaN/inf.
    InsufficientSamplesError
        X has a single row.
    """
    if X is None:
        raise InvalidInputError("nil input matrix")

    feature_names = extract_feature_names(X)
    if hasattr(X, "select_dtypes"):
        non_numeric = X.select_dtypes(include=["object", "category", "string"]).columns.tolist()
        if non_numeric:
            sample = non_numeric[:5]
            suffix = "..." if len(non_numeric) > 5 else ""
            raise InvalidInputError(
                f"Non-numeric columns found: {sample}{suffix}. Encode them first."
            )

    try:
        X_arr = to_numpy(X, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Input matrix is not numeric: {exc}") from exc

    if X_arr.ndim != 2:
        raise InvalidInputError(f"Input matrix must be 2D, got {X_arr.ndim}D")

    n, p = X_arr.shape
    if n == 0 or p == 0:
        raise InvalidInputError(f"empty input matrix ({n} x {p})")
    if n < 2:
        raise InsufficientSamplesError(f"need at least 2 rows, got {n}")
    if not np.isfinite(X_arr).all():
        raise InvalidInputError("Non-finite values in X are not allowed.")

    if feature_names is None:
        feature_names = [f"x{i}" for i in range(p)]

    return X_arr, feature_names


# --- Standardization ---


@njit(cache=True)
def _standardize_columns(X: np.ndarray) -> np.ndarray:
    n, p = X.shape
    Z = np.empty((n, p), dtype=np.float64)
    for j in range(p):
        mean = 0.0
        for i in range(n):
            mean += X[i, j]
        mean /= n

        var = 0.0
        for i in range(n):
            var += (X[i, j] - mean) ** 2
        var /= n
        std = np.sqrt(var)

        if std < STD_FLOOR:
            for i in range(n):
                Z[i, j] = 0.0
        else:
            for i in range(n):
                Z[i, j] = (X[i, j] - mean) / std
    return Z


def standardize(X) -> np.ndarray:
    """
    Rescale each column to zero mean and unit population variance.

    Columns with standard deviation below 1e-12 carry no information and are
    set to zero. The input is not modified.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)

    Returns
    -------
    Z : ndarray of shape (n_samples, n_features), float64
    """
    X_arr = np.ascontiguousarray(to_numpy(X, dtype=np.float64))
    if X_arr.ndim != 2:
        raise ValueError(f"standardize expects a 2D array, got {X_arr.ndim}D")
    return _standardize_columns(X_arr)


def constant_columns(Z: np.ndarray) -> np.ndarray:
    """Indices of standardized columns that collapsed to zero."""
    return np.where(~np.any(Z != 0.0, axis=0))[0]
