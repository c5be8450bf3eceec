import numpy as np
import pytest

from surd import LassoCD, coordinate_descent, soft_threshold


@pytest.mark.parametrize(
    "X, y, alpha, expected, tol",
    [
        (np.array([[1.0], [2.0], [3.0]]), [2.0, 4.0, 6.0], 0.0, [2.0], 1e-12),
        (np.array([[1.0], [2.0], [3.0]]), [2.0, 4.0, 6.0], 0.01, [1.999285714285714], 1e-12),
        (np.array([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]]), [2.0, 4.0, 6.0], 0.0, [2.0, 0.0], 1e-6),
        (np.zeros((3, 1)), [1.0, 2.0, 3.0], 0.1, [0.0], 1e-6),
    ],
    ids=["ols", "regularized", "one_zero_feature", "zero_variance_feature"],
)
def test_lasso_fit(X, y, alpha, expected, tol):
    model = LassoCD(alpha=alpha, tolerance=1e-14, max_iter=10000)
    weights = model.fit(X, np.asarray(y))

    assert weights.shape == (len(expected),)
    np.testing.assert_allclose(weights, expected, rtol=0, atol=tol)


def test_soft_threshold():
    for z in np.linspace(-1.0, 1.0, 21):
        assert soft_threshold(z, 1.0) == 0.0
        assert soft_threshold(z, 0.0) == z
    assert soft_threshold(3.0, 1.0) == 2.0
    assert soft_threshold(-3.0, 1.0) == -2.0


def test_coordinate_descent_reports_sweeps():
    X = np.array([[1.0], [2.0], [3.0]])
    y = np.array([2.0, 4.0, 6.0])

    weights, n_iter = coordinate_descent(X, y, 0.0, 1e-10, 100)

    assert weights[0] == pytest.approx(2.0)
    assert n_iter == 2


def test_coordinate_descent_stops_at_max_iter():
    rng = np.random.default_rng(3)
    base = rng.normal(size=(50, 1))
    X = np.hstack([base, base + 1e-3 * rng.normal(size=(50, 1))])
    y = base.ravel() + rng.normal(size=50)

    weights, n_iter = coordinate_descent(X, y, 0.0, 1e-15, 3)

    assert n_iter == 3
    assert np.all(np.isfinite(weights))


def test_empty_predictors():
    weights = LassoCD().fit(np.empty((5, 0)), np.arange(5.0))
    assert weights.shape == (0,)


def test_defaults_for_invalid_params():
    model = LassoCD(alpha=-1.0, tolerance=0.0, max_iter=-5)
    assert model.alpha == 0.01
    assert model.tolerance == 1e-5
    assert model.max_iter == 1000

    assert LassoCD(alpha=0.0).alpha == 0.0


def test_fit_is_stateless():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(40, 3))
    y = X @ np.array([1.0, 0.0, -2.0]) + 0.01 * rng.normal(size=40)
    model = LassoCD(alpha=0.1)

    w1 = model.fit(X, y)
    model.fit(rng.normal(size=(40, 2)), rng.normal(size=40))
    w2 = model.fit(X, y)

    np.testing.assert_array_equal(w1, w2)
    assert not hasattr(model, "coef_")


def test_sparsity_with_large_penalty():
    rng = np.random.default_rng(1)
    X = rng.normal(size=(100, 4))
    y = 2.0 * X[:, 0] + 0.1 * rng.normal(size=100)

    weights = LassoCD(alpha=1e6).fit(X, y)

    np.testing.assert_array_equal(weights, np.zeros(4))


def test_shape_mismatch_raises():
    with pytest.raises(ValueError, match="rows but y has"):
        LassoCD().fit(np.ones((4, 2)), np.ones(3))


def test_nan_params_fall_back_to_defaults():
    model = LassoCD(alpha=float("nan"), tolerance=float("nan"), max_iter=float("nan"))
    assert model.alpha == 0.01
    assert model.tolerance == 1e-5
    assert model.max_iter == 1000

    X = np.array([[1.0], [2.0], [3.0]])
    weights = model.fit(X, np.array([2.0, 4.0, 6.0]))
    assert weights[0] == pytest.approx((28.0 - 0.01) / 14.0)
