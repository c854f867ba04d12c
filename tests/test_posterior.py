import numpy as np
import pytest
from sklearn.gaussian_process import GaussianProcessRegressor
from sklearn.gaussian_process.kernels import Matern

from unigp.gp.covariance import Matern12, SklearnCovariance
from unigp.gp.kernel import NumericalInstabilityError, build_kernel
from unigp.gp.posterior import posterior, posterior_mean, posterior_std
from unigp.gp.state import OptimizationState
from unigp.opt.acquisition import EI, POI


XS = [0.0, 1.0, 2.0]
YS = [0.5, -1.0, 2.0]


def test_interpolates_noiseless_samples(make_state):
    state = make_state(XS, YS, noise=0.0)
    for x, y in zip(XS, YS):
        assert posterior_mean(x, state) == pytest.approx(y, abs=1e-9)
        assert posterior_std(x, state) == 0.0


def test_reverts_to_prior_far_from_samples(make_state):
    state = make_state(XS, YS, noise=1e-2, cov_func=Matern12(sigma=2.0), prior_mean=lambda x: x)
    assert posterior_mean(100.0, state) == pytest.approx(100.0, abs=1e-9)
    assert posterior_std(100.0, state) == pytest.approx(2.0, abs=1e-9)


def test_std_is_positive_between_samples(make_state):
    state = make_state(XS, YS, noise=1e-3)
    assert 0.0 < posterior_std(0.5, state) < 1.0


def test_matches_sklearn_gaussian_process(make_state):
    noise = 0.1
    X = np.array(XS + [3.5])
    y = np.array(YS + [0.25])
    kernel = Matern(length_scale=1.0, length_scale_bounds="fixed", nu=0.5)
    gpr = GaussianProcessRegressor(kernel=kernel, alpha=noise ** 2, optimizer=None, normalize_y=False)
    gpr.fit(X.reshape(-1, 1), y)

    grid = np.linspace(-1.0, 4.5, 23)
    ref_mu, ref_std = gpr.predict(grid.reshape(-1, 1), return_std=True)

    for cov in (Matern12(), SklearnCovariance(kernel)):
        state = make_state(list(X), list(y), noise=noise, cov_func=cov)
        mu, std = posterior(grid, state)
        np.testing.assert_allclose(mu, ref_mu, atol=1e-8)
        np.testing.assert_allclose(std, ref_std, atol=1e-6)


def test_negative_variance_is_surfaced(make_state):
    good = make_state(XS, YS, noise=0.0)
    # EN/JP: a corrupted inverse makes the radicand clearly negative.
    bad = OptimizationState(
        objective=good.objective,
        noise=good.noise,
        bounds=good.bounds,
        points=good.points,
        cov_func=good.cov_func,
        K=good.K,
        inv_K=2.0 * good.inv_K,
        acq_func=good.acq_func,
    )
    with pytest.raises(NumericalInstabilityError, match="noise"):
        posterior_std(1.0, bad)


def test_queries_do_not_touch_state(make_state):
    state = make_state(XS, YS, noise=1e-2)
    K, inv_K, x, y = state.K.copy(), state.inv_K.copy(), state.points.x.copy(), state.points.y.copy()
    posterior(np.linspace(-2, 4, 11), state)
    assert np.array_equal(state.K, K)
    assert np.array_equal(state.inv_K, inv_K)
    assert np.array_equal(state.points.x, x)
    assert np.array_equal(state.points.y, y)


def _direct_std(x, state):
    k = np.array([state.cov_func(x, xi) for xi in state.points.x])
    K = build_kernel(state.cov_func, state.points.x, state.noise)
    return np.sqrt(state.cov_func(x, x) - k @ np.linalg.solve(K, k))


def test_small_variance_kernel_keeps_uncertainty(make_state):
    state = make_state([0.0, 1.0], [1e-4, 0.0], noise=1e-6, cov_func=Matern12(sigma=1e-4))
    sigma = posterior_std(0.002, state)
    assert sigma > 0.0
    assert sigma == pytest.approx(_direct_std(0.002, state), rel=1e-3)
    assert POI(tau=0.0)(0.002, state) > 0.0
    assert EI(tau=0.0)(0.002, state) > 0.0


def test_small_noise_keeps_uncertainty_at_sample(make_state):
    state = make_state([0.0, 1.0], [0.5, -0.5], noise=1e-6)
    sigma = posterior_std(0.0, state)
    assert sigma > 0.0
    assert sigma == pytest.approx(_direct_std(0.0, state), rel=1e-2)


def test_slightly_negative_variance_is_surfaced(make_state):
    good = make_state(XS, YS, noise=0.0)
    bad = OptimizationState(
        objective=good.objective,
        noise=good.noise,
        bounds=good.bounds,
        points=good.points,
        cov_func=good.cov_func,
        K=good.K,
        inv_K=(1.0 + 1e-11) * good.inv_K,
        acq_func=good.acq_func,
    )
    with pytest.raises(NumericalInstabilityError):
        posterior_std(1.0, bad)
