"""Kernel matrix construction and inversion.

English:
    K[i, j] = cov(x_i, x_j) + noise^2 * [i == j]

    The matrix is built once from scratch and then extended by one bordered
    row/column per new sample (O(n) covariance calls). Its inverse is always
    recomputed from the full extended matrix through a Cholesky factorization;
    no rank-one update of the inverse is attempted, so round-off does not
    accumulate across iterations.

日本語:
    K[i, j] = cov(x_i, x_j) + noise^2 * [i == j]

    初期化時に一度だけ全体を計算し、その後は新しいサンプルごとに1行1列を
    追加します（共分散関数の呼び出しはO(n)）。逆行列は毎回、拡張後の行列全体の
    コレスキー分解から計算し直します（逐次更新による誤差の蓄積を避けるため）。
"""

from __future__ import annotations
from typing import Sequence
import numpy as np
from scipy import linalg

from .covariance import CovarianceFunction


class NumericalInstabilityError(np.linalg.LinAlgError):
    """Kernel is not positive definite or the posterior variance went negative.

    EN: usually duplicate samples combined with (near) zero noise; increase `noise`.
    JP: 重複サンプルとほぼゼロのノイズが原因のことが多いです。`noise`を大きくしてください。
    """


def build_kernel(cov_func: CovarianceFunction, points: Sequence[float], noise: float) -> np.ndarray:
    xs = np.asarray(points, dtype=float)
    n = len(xs)
    K = np.empty((n, n), dtype=float)
    for i in range(n):
        for j in range(i, n):
            K[i, j] = K[j, i] = cov_func(xs[i], xs[j])
    K[np.diag_indices(n)] += noise ** 2
    return K


def extend_kernel(
    cov_func: CovarianceFunction,
    K: np.ndarray,
    old_points: Sequence[float],
    new_point: float,
    noise: float,
) -> np.ndarray:
    """Return the (n+1)x(n+1) bordered kernel [[K, k], [k^T, cov(x,x) + noise^2]].

    The top-left n x n block is an exact copy of `K`.
    """
    K = np.asarray(K, dtype=float)
    xs = np.asarray(old_points, dtype=float)
    n = len(xs)
    if K.shape != (n, n):
        raise ValueError(f"K has shape {K.shape}, expected {(n, n)} for {n} points")

    k = np.array([cov_func(x, new_point) for x in xs], dtype=float)
    out = np.empty((n + 1, n + 1), dtype=float)
    out[:n, :n] = K
    out[:n, n] = k
    out[n, :n] = k
    out[n, n] = cov_func(new_point, new_point) + noise ** 2
    return out


def invert_kernel(K: np.ndarray) -> np.ndarray:
    """Invert a positive definite kernel matrix.

    Raises NumericalInstabilityError when the Cholesky factorization fails.
    """
    K = np.asarray(K, dtype=float)
    try:
        c, lower = linalg.cho_factor(K, lower=True)
    except np.linalg.LinAlgError as e:
        raise NumericalInstabilityError(
            "Kernel matrix is not positive definite; increase the objective function noise."
        ) from e
    inv = linalg.cho_solve((c, lower), np.eye(K.shape[0]))
    # EN/JP: remove round-off asymmetry.
    return 0.5 * (inv + inv.T)
