"""Bayesian optimization loop.

English:
    optimize(): validate the run parameters, seed the samples (both bounds
    when no initial points are given), build the kernel and run `evals`
    iterations of

        x_new = argmax acq(x)        (piecewise bounded search)
        y_new = objective(x_new)     (the one expensive call per iteration)
        state = update_state(state, x_new, y_new)

    resume(): continue from any previous final state with a fresh budget.

    Configuration errors raise ValueError before the objective is called.
    Numerical errors (NumericalInstabilityError) propagate unchanged; the
    cure is a larger `noise`.

日本語:
    optimize(): 実行パラメータを検証し、初期点（未指定なら両端）を評価して
    カーネルを構築したのち、`evals`回の反復（獲得関数の最大化 → 目的関数の評価
    → 状態の更新）を行います。
    resume(): 以前の最終状態から新しい評価回数で再開します。

    設定エラーは目的関数を呼ぶ前にValueErrorを送出します。数値エラー
    （NumericalInstabilityError）はそのまま伝播します（`noise`を大きくしてください）。

Troubleshooting:
    "not positive definite" or "negative posterior variance" means the noise
    is too close to zero for the current samples.
"""

from __future__ import annotations
from typing import Callable, Optional, Sequence, Tuple, Union
import logging
import math
import numpy as np

from ..config import BOConfig, GPConfig, LocalOptConfig
from ..gp.covariance import CovarianceFunction, make_covariance
from ..gp.state import (
    AcquisitionFunction,
    MeanFunction,
    ObjectiveFunction,
    OptimizationState,
    SampleSet,
    init_state,
    update_state,
)
from .acq_optimizer import find_acq_opt
from .acquisition import make_acquisition

logger = logging.getLogger(__name__)

Callback = Callable[[OptimizationState, int], None]
InitialPoints = Union[SampleSet, Tuple[Sequence[float], Sequence[float]]]


class NonFiniteObjectiveError(ArithmeticError):
    """The objective returned NaN or inf; the evaluation is already spent.

    EN: raised instead of ValueError, which is reserved for bad run parameters.
    JP: 設定エラー（ValueError）とは区別し、目的関数の異常値として送出します。
    """


def _evaluate(objective: ObjectiveFunction, x: float) -> float:
    y = float(objective(x))
    if not math.isfinite(y):
        raise NonFiniteObjectiveError(f"Objective returned {y} at x={x}")
    return y


def _check_bounds(bounds: Tuple[float, float]) -> Tuple[float, float]:
    if len(bounds) != 2:
        raise ValueError("`bounds` must be a (lo, hi) pair")
    lo, hi = float(bounds[0]), float(bounds[1])
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ValueError("`bounds` must be finite")
    if lo >= hi:
        raise ValueError(f"`bounds` must satisfy lo < hi, got ({lo}, {hi})")
    return lo, hi


def _check_noise(noise: float) -> float:
    noise = float(noise)
    if not math.isfinite(noise) or noise < 0:
        raise ValueError(f"`noise` must be a finite value >= 0, got {noise}")
    if noise == 0:
        logger.warning("noise == 0: the kernel may not be invertible; a small positive noise is recommended")
    return noise


def _as_sample_set(points: InitialPoints) -> SampleSet:
    if not isinstance(points, SampleSet):
        x, y = points
        points = SampleSet(x, y)
    if len(points) < 2:
        raise ValueError(f"At least 2 initial points are required, got {len(points)}")
    return points


def optimize(
    objective: ObjectiveFunction,
    bounds: Tuple[float, float],
    cov_func: CovarianceFunction,
    acq_func: AcquisitionFunction,
    *,
    noise: float = GPConfig.noise,
    prior_mean: Optional[MeanFunction] = None,
    points: Optional[InitialPoints] = None,
    evals: int = GPConfig.evals,
    local_cfg: LocalOptConfig = LocalOptConfig(),
    callback: Optional[Callback] = None,
) -> OptimizationState:
    """Run Bayesian optimization (maximization) of `objective` on `bounds`.

    Parameters
    ----------
    objective:
        x -> y, possibly noisy, assumed expensive.
    bounds:
        (lo, hi) with lo < hi.
    cov_func:
        symmetric (x1, x2) -> covariance, e.g. Matern12(sigma=2.0).
    acq_func:
        (x, state) -> fitness, e.g. UCB(beta=1.0).
    noise:
        assumed deviation of a single evaluation; should be > 0.
    prior_mean:
        prior belief x -> y (default: constant zero).
    points:
        initial samples as SampleSet or (x, y); default evaluates both bounds.
    evals:
        objective evaluations to spend (>= 1; >= 2 without `points`, the two
        bound evaluations are counted).
    callback:
        called as callback(state, iteration) after every acquisition step.

    Returns
    -------
    The final OptimizationState (a valid input for `resume`).

    Raises
    ------
    ValueError:
        invalid run parameters (before any objective call).
    NonFiniteObjectiveError:
        the objective returned NaN or inf.
    NumericalInstabilityError:
        the kernel stopped being positive definite; increase `noise`.

    Example
    -------
        state = optimize(math.sin, (-math.pi, math.pi), Matern12(sigma=2.0), UCB(),
                         noise=1e-2, evals=10, prior_mean=lambda x: x)
        x_best, y_best = best_so_far(state)
    """
    lo, hi = _check_bounds(bounds)
    noise = _check_noise(noise)
    if evals < 1:
        raise ValueError("`evals` has to be >= 1")
    if points is None and evals < 2:
        raise ValueError("`evals` has to be >= 2 when no initial points are given")
    if points is not None:
        points = _as_sample_set(points)
    else:
        # EN: seed with both bounds; these two calls count toward `evals`.
        # JP: 両端で初期化します（この2回も`evals`に含めます）。
        xs = [lo, hi]
        points = SampleSet(xs, [_evaluate(objective, x) for x in xs])
        evals -= 2

    state = init_state(objective, (lo, hi), cov_func, acq_func, points, noise, prior_mean)
    logger.info("GP-BO start: %d initial samples, %d evaluations on [%g, %g]", len(points), evals, lo, hi)
    return resume(state, evals=evals, local_cfg=local_cfg, callback=callback)


def resume(
    state: OptimizationState,
    *,
    evals: int = GPConfig.evals,
    local_cfg: LocalOptConfig = LocalOptConfig(),
    callback: Optional[Callback] = None,
) -> OptimizationState:
    """Continue a previous run for `evals` more evaluations (0 returns `state` as is)."""
    if evals < 0:
        raise ValueError("`evals` has to be >= 0 when resuming")

    for it in range(1, evals + 1):
        x_new, acq_val = find_acq_opt(state, local_cfg)
        y_new = _evaluate(state.objective, x_new)
        state = update_state(state, x_new, y_new)
        logger.debug("iter %d: x=%.6g y=%.6g acq=%.6g", it, x_new, y_new, acq_val)
        if callback is not None:
            callback(state, it)

    if evals:
        x_best, y_best = best_so_far(state)
        logger.info("GP-BO done: %d samples, best y=%.6g at x=%.6g", state.n_samples, y_best, x_best)
    return state


def best_so_far(state: OptimizationState) -> Tuple[float, float]:
    """Return the sample (x, y) with the largest observed y (first one on ties)."""
    i = int(np.argmax(state.points.y))
    return float(state.points.x[i]), float(state.points.y[i])


def run_from_config(
    objective: ObjectiveFunction,
    bounds: Tuple[float, float],
    cfg: BOConfig = BOConfig(),
    prior_mean: Optional[MeanFunction] = None,
    points: Optional[InitialPoints] = None,
    callback: Optional[Callback] = None,
) -> OptimizationState:
    """optimize() with covariance / acquisition chosen by name in a BOConfig."""
    cov_func = make_covariance(cfg.kernel, sigma=cfg.sigma, length_scale=cfg.length_scale)
    acq_params = {"beta": cfg.beta} if cfg.acquisition == "ucb" else {"tau": cfg.tau}
    acq_func = make_acquisition(cfg.acquisition, **acq_params)
    return optimize(
        objective,
        bounds,
        cov_func,
        acq_func,
        noise=cfg.gp.noise,
        prior_mean=prior_mean,
        points=points,
        evals=cfg.gp.evals,
        local_cfg=cfg.local,
        callback=callback,
    )
