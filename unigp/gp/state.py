"""Optimization state.

English:
    SampleSet and OptimizationState are frozen. The optimization loop never
    mutates a state; it builds the next one with `update_state`, which extends
    the samples, the kernel and its inverse together. A caller therefore can
    never observe new samples paired with a stale kernel.

日本語:
    SampleSetとOptimizationStateは不変（frozen）です。ループは状態を書き換えず、
    `update_state`でサンプル・カーネル・逆行列をまとめて更新した新しい状態を
    作ります。サンプルだけ更新されてカーネルが古い、という状態は観測されません。
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Sequence, Tuple
import numpy as np

from .covariance import CovarianceFunction
from .kernel import build_kernel, extend_kernel, invert_kernel

ObjectiveFunction = Callable[[float], float]
MeanFunction = Callable[[float], float]
# x, state -> fitness (higher is better)
AcquisitionFunction = Callable[[float, Any], float]


def zero_mean(x: float) -> float:
    return 0.0


def _frozen(a: Sequence[float]) -> np.ndarray:
    arr = np.array(a, dtype=float).reshape(-1)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class SampleSet:
    """Evaluated points in evaluation order.

    EN: x[i] is where the objective was evaluated, y[i] the observed value.
    JP: x[i]は評価した点、y[i]は観測値（評価順）。
    """

    x: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        x = _frozen(self.x)
        y = _frozen(self.y)
        if len(x) != len(y):
            raise ValueError(f"x and y must have the same length ({len(x)} != {len(y)})")
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
            raise ValueError("Sample points and values must be finite.")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __len__(self) -> int:
        return len(self.x)

    def append(self, x: float, y: float) -> "SampleSet":
        return SampleSet(np.append(self.x, float(x)), np.append(self.y, float(y)))


@dataclass(frozen=True, eq=False)
class OptimizationState:
    """Everything about a (possibly finished) Bayesian optimization run.

    EN:
        objective, noise, bounds, cov_func, acq_func and prior_mean stay the same
        for the lifetime of a run; points, K and inv_K are replaced each iteration.
        A final state is a valid restart point for `resume`.

    JP:
        objective, noise, bounds, cov_func, acq_func, prior_mean は実行中不変で、
        points, K, inv_K は反復ごとに置き換わります。最終状態から`resume`で再開できます。
    """

    objective: ObjectiveFunction
    noise: float
    bounds: Tuple[float, float]
    points: SampleSet
    cov_func: CovarianceFunction
    K: np.ndarray
    inv_K: np.ndarray
    acq_func: AcquisitionFunction
    prior_mean: MeanFunction = zero_mean

    @property
    def n_samples(self) -> int:
        return len(self.points)


def init_state(
    objective: ObjectiveFunction,
    bounds: Tuple[float, float],
    cov_func: CovarianceFunction,
    acq_func: AcquisitionFunction,
    points: SampleSet,
    noise: float,
    prior_mean: Optional[MeanFunction] = None,
) -> OptimizationState:
    K = build_kernel(cov_func, points.x, noise)
    inv_K = invert_kernel(K)
    K.flags.writeable = False
    inv_K.flags.writeable = False
    return OptimizationState(
        objective=objective,
        noise=float(noise),
        bounds=(float(bounds[0]), float(bounds[1])),
        points=points,
        cov_func=cov_func,
        K=K,
        inv_K=inv_K,
        acq_func=acq_func,
        prior_mean=prior_mean if prior_mean is not None else zero_mean,
    )


def update_state(state: OptimizationState, x_new: float, y_new: float) -> OptimizationState:
    """Return a new state with (x_new, y_new) appended; `state` is left untouched."""
    K = extend_kernel(state.cov_func, state.K, state.points.x, x_new, state.noise)
    inv_K = invert_kernel(K)
    K.flags.writeable = False
    inv_K.flags.writeable = False
    return replace(state, points=state.points.append(x_new, y_new), K=K, inv_K=inv_K)
