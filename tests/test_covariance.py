import numpy as np
import pytest
from sklearn.gaussian_process.kernels import RBF, ConstantKernel, Matern

from unigp.gp.covariance import (
    Matern12,
    Matern32,
    Matern52,
    SklearnCovariance,
    SquaredExponential,
    make_covariance,
)


@pytest.mark.parametrize(
    "ours, ref",
    [
        (Matern12(length_scale=0.7), Matern(length_scale=0.7, nu=0.5)),
        (Matern32(length_scale=0.7), Matern(length_scale=0.7, nu=1.5)),
        (Matern52(length_scale=0.7), Matern(length_scale=0.7, nu=2.5)),
        (SquaredExponential(length_scale=0.7), RBF(length_scale=0.7)),
    ],
)
def test_matches_sklearn_kernels(ours, ref):
    xs = np.linspace(-2.0, 2.0, 9)
    expected = ref(xs.reshape(-1, 1))
    got = np.array([[ours(a, b) for b in xs] for a in xs])
    np.testing.assert_allclose(got, expected, atol=1e-12)


@pytest.mark.parametrize("cls", [Matern12, Matern32, Matern52, SquaredExponential])
def test_scale_and_symmetry(cls):
    cov = cls(sigma=2.0)
    assert cov(0.3, 0.3) == pytest.approx(4.0)
    assert cov(-1.2, 0.9) == cov(0.9, -1.2)
    assert 0.0 < cov(0.0, 1.0) < 4.0


def test_sklearn_adapter():
    cov = SklearnCovariance(ConstantKernel(4.0) * Matern(length_scale=1.0, nu=0.5))
    assert cov(0.0, 1.5) == pytest.approx(Matern12(sigma=2.0)(0.0, 1.5))


def test_make_covariance():
    assert make_covariance("matern5", sigma=2.0) == Matern52(sigma=2.0)
    assert make_covariance("sq_exp") == SquaredExponential()
    with pytest.raises(ValueError, match="Unknown"):
        make_covariance("periodic")
