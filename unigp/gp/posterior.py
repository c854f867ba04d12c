"""GP posterior mean / standard deviation.

English:
    mu(x)    = m(x) + k^T K^-1 (y - m(X))
    sigma(x) = sqrt(cov(x, x) - k^T K^-1 k),   k_i = cov(x, X_i)

    Both are read-only queries on an OptimizationState and accept any x,
    not only points inside the search bounds.

日本語:
    事後平均と事後標準偏差です。状態を変更しない純粋な問い合わせで、
    探索範囲外の点も受け付けます。
"""

from __future__ import annotations
from typing import Sequence, Tuple
import math
import numpy as np

from .kernel import NumericalInstabilityError
from .state import OptimizationState

# EN: round-off slack, in units of eps times the larger of the two subtracted terms.
# JP: 丸め誤差の許容幅（引き算する2項の大きい方 × eps の倍数）。
_VAR_ULPS = 64


def _cross_cov(x: float, state: OptimizationState) -> np.ndarray:
    return np.array([state.cov_func(x, xi) for xi in state.points.x], dtype=float)


def posterior_mean(x: float, state: OptimizationState) -> float:
    k = _cross_cov(x, state)
    prior = np.array([state.prior_mean(xi) for xi in state.points.x], dtype=float)
    resid = state.points.y - prior
    return float(state.prior_mean(x) + k @ state.inv_K @ resid)


def posterior_std(x: float, state: OptimizationState) -> float:
    """Posterior standard deviation at x.

    EN:
        A radicand within round-off of zero is returned as exactly 0.0.
        A clearly negative one raises NumericalInstabilityError (noise too small).

    JP:
        丸め誤差程度の負値は0.0として返します。明らかな負値は
        NumericalInstabilityErrorを送出します（ノイズが小さすぎる）。
    """
    k_xx = state.cov_func(x, x)
    k = _cross_cov(x, state)
    explained = float(k @ state.inv_K @ k)
    var = float(k_xx - explained)
    tol = _VAR_ULPS * np.finfo(float).eps * max(abs(k_xx), abs(explained))
    if abs(var) <= tol:
        return 0.0
    if var < 0:
        raise NumericalInstabilityError(
            f"Negative posterior variance {var:.3e} at x={x}; increase the objective function noise."
        )
    return math.sqrt(var)


def posterior(xs: Sequence[float], state: OptimizationState) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorized (mu, sigma) over many points (plots / reports)."""
    xs = np.asarray(xs, dtype=float).reshape(-1)
    mu = np.array([posterior_mean(x, state) for x in xs], dtype=float)
    std = np.array([posterior_std(x, state) for x in xs], dtype=float)
    return mu, std
