"""Covariance (kernel) functions.

English:
    Stationary 1-D covariance functions of the distance r = |x1 - x2| / l:
      - Matern 1/2 (exponential)
      - Matern 3/2
      - Matern 5/2
      - squared exponential
    plus an adapter so any scikit-learn kernel can be plugged in.

    Every covariance is a frozen dataclass called as cov(x1, x2) -> float,
    so it is symmetric and carries its hyperparameters explicitly.

日本語:
    距離 r = |x1 - x2| / l に基づく1次元の定常共分散関数です。
      - Matern 1/2（指数型）
      - Matern 3/2
      - Matern 5/2
      - 二乗指数
    scikit-learnのカーネルを差し込むためのアダプタも提供します。
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable
import math
import numpy as np

CovarianceFunction = Callable[[float, float], float]


def _radius(x1: float, x2: float, length_scale: float) -> float:
    return abs(float(x1) - float(x2)) / length_scale


@dataclass(frozen=True)
class Matern12:
    sigma: float = 1.0
    length_scale: float = 1.0

    def __call__(self, x1: float, x2: float) -> float:
        r = _radius(x1, x2, self.length_scale)
        return self.sigma ** 2 * math.exp(-r)


@dataclass(frozen=True)
class Matern32:
    sigma: float = 1.0
    length_scale: float = 1.0

    def __call__(self, x1: float, x2: float) -> float:
        r = math.sqrt(3.0) * _radius(x1, x2, self.length_scale)
        return self.sigma ** 2 * (1.0 + r) * math.exp(-r)


@dataclass(frozen=True)
class Matern52:
    sigma: float = 1.0
    length_scale: float = 1.0

    def __call__(self, x1: float, x2: float) -> float:
        r = _radius(x1, x2, self.length_scale)
        s = math.sqrt(5.0) * r
        return self.sigma ** 2 * (1.0 + s + (5.0 / 3.0) * r * r) * math.exp(-s)


@dataclass(frozen=True)
class SquaredExponential:
    sigma: float = 1.0
    length_scale: float = 1.0

    def __call__(self, x1: float, x2: float) -> float:
        r = _radius(x1, x2, self.length_scale)
        return self.sigma ** 2 * math.exp(-0.5 * r * r)


@dataclass(frozen=True)
class SklearnCovariance:
    """Wrap a scikit-learn kernel as a scalar covariance function.

    EN:
        e.g. SklearnCovariance(ConstantKernel(2.0) * Matern(nu=1.5)).
        Hyperparameters are used as given; nothing is fitted here.

    JP:
        scikit-learnのカーネルをスカラー共分散関数として使います。
        ハイパーパラメータは与えられた値のまま（学習しません）。
    """

    kernel: Any

    def __call__(self, x1: float, x2: float) -> float:
        a = np.array([[float(x1)]])
        b = np.array([[float(x2)]])
        return float(self.kernel(a, b)[0, 0])


_REGISTRY = {
    "matern1": Matern12,
    "matern3": Matern32,
    "matern5": Matern52,
    "sq_exp": SquaredExponential,
}


def make_covariance(name: str, **params: Any) -> CovarianceFunction:
    """Build a covariance function by name (matern1, matern3, matern5, sq_exp)."""
    if name not in _REGISTRY:
        raise ValueError(f"Unknown covariance function: {name}")
    return _REGISTRY[name](**params)
