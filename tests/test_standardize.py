import numpy as np
import pandas as pd
import pytest

from surd import mse, standardize
from surd._preprocess import constant_columns, validate_matrix
from surd.exceptions import InsufficientSamplesError, InvalidInputError


def test_standardize_single_column():
    Z = standardize(np.array([[1.0], [2.0], [3.0]]))
    expected = np.array([[-np.sqrt(1.5)], [0.0], [np.sqrt(1.5)]])
    np.testing.assert_allclose(Z, expected, atol=1e-6)


def test_standardize_multiple_columns():
    X = np.array([[1, 4], [2, 5], [3, 6]], dtype=float)
    Z = standardize(X)
    col = np.array([-np.sqrt(1.5), 0.0, np.sqrt(1.5)])
    np.testing.assert_allclose(Z, np.column_stack([col, col]), atol=1e-6)


def test_standardize_constant_column_is_zero():
    Z = standardize(np.array([[5.0], [5.0], [5.0]]))
    np.testing.assert_array_equal(Z, np.zeros((3, 1)))


def test_standardize_moments():
    rng = np.random.default_rng(0)
    X = rng.normal(loc=3.0, scale=7.0, size=(200, 5))
    Z = standardize(X)

    np.testing.assert_allclose(Z.mean(axis=0), 0.0, atol=1e-6)
    np.testing.assert_allclose(Z.std(axis=0), 1.0, atol=1e-6)


def test_standardize_does_not_mutate_input():
    X = np.array([[1.0, 2.0], [3.0, 5.0], [4.0, 9.0]])
    before = X.copy()
    standardize(X)
    np.testing.assert_array_equal(X, before)


def test_standardize_accepts_dataframe():
    df = pd.DataFrame({"a": [1, 2, 3], "b": [7, 7, 7]})
    Z = standardize(df)
    assert Z.shape == (3, 2)
    np.testing.assert_array_equal(constant_columns(Z), [1])


@pytest.mark.parametrize(
    "resid, expected",
    [
        ([], 0.0),
        ([2.0], 4.0),
        ([1.0, 2.0, 3.0], 14.0 / 3.0),
        ([-1.0, -2.0, 3.0], 14.0 / 3.0),
    ],
)
def test_mse(resid, expected):
    assert mse(resid) == pytest.approx(expected, abs=1e-12)


def test_validate_matrix_names():
    df = pd.DataFrame(np.ones((3, 2)), columns=["u", "v"])
    X_arr, names = validate_matrix(df)
    assert names == ["u", "v"]
    assert X_arr.dtype == np.float64

    _, names = validate_matrix(np.ones((3, 2)))
    assert names == ["x0", "x1"]


def test_validate_matrix_errors():
    with pytest.raises(InvalidInputError, match="nil"):
        validate_matrix(None)
    with pytest.raises(InvalidInputError, match="empty"):
        validate_matrix(np.empty((0, 3)))
    with pytest.raises(InvalidInputError, match="2D"):
        validate_matrix(np.ones(4))
    with pytest.raises(InsufficientSamplesError, match="at least 2 rows"):
        validate_matrix(np.ones((1, 3)))
    with pytest.raises(InvalidInputError, match="Non-finite"):
        validate_matrix(np.array([[1.0, np.nan], [2.0, 3.0]]))
    with pytest.raises(InvalidInputError, match="Non-numeric"):
        validate_matrix(pd.DataFrame({"a": [1.0, 2.0], "b": ["x", "y"]}))
