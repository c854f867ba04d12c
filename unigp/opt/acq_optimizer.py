"""Piecewise maximization of the acquisition function.

English:
    The posterior (and thus the acquisition function) is multi-modal, with
    uncertainty peaks between samples. A single bounded search over [lo, hi]
    tends to settle in the mode nearest its start, so instead the domain is
    cut at the sorted sample locations:

        [lo, x_(1)], [x_(1), x_(2)], ..., [x_(n), hi]

    and a bounded Brent search (scipy) minimizes -acq on every piece.
    The best piece wins; ties keep the first (leftmost) piece.

日本語:
    獲得関数はサンプル間に不確実性のピークを持つ多峰関数です。
    範囲全体で1回だけ探索すると近くの峰に収束しやすいため、
    ソート済みサンプル位置で区間を分割し、各区間で -acq を
    有界Brent法（scipy）で最小化します。最良の区間を採用し、
    同値の場合は先（左）の区間を優先します。
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, Tuple
import logging
import numpy as np
from scipy.optimize import minimize_scalar

from ..config import LocalOptConfig
from ..gp.state import OptimizationState

logger = logging.getLogger(__name__)


def partition_domain(bounds: Tuple[float, float], xs: Sequence[float]) -> List[Tuple[float, float]]:
    """Split [lo, hi] at the sorted sample points into len(xs) + 1 adjacent pieces.

    EN: samples outside the bounds are clipped onto them, so the pieces always cover [lo, hi].
    JP: 範囲外のサンプルは境界にクリップし、区間が常に[lo, hi]を覆うようにします。
    """
    lo, hi = float(bounds[0]), float(bounds[1])
    breaks = np.clip(np.sort(np.asarray(xs, dtype=float)), lo, hi)
    edges = [lo, *breaks.tolist(), hi]
    return list(zip(edges[:-1], edges[1:]))


def find_local_opt(
    f: Callable[[float], float],
    a: float,
    b: float,
    cfg: LocalOptConfig = LocalOptConfig(),
) -> Tuple[float, float]:
    """Minimize f on [a, b]; return (x*, f(x*))."""
    if a == b:
        return float(a), float(f(a))
    res = minimize_scalar(
        f,
        bounds=(a, b),
        method="bounded",
        options={"xatol": cfg.xatol, "maxiter": cfg.maxiter},
    )
    if not res.success:
        logger.warning(
            "bounded search on [%.6g, %.6g] did not converge (%s); using x=%.6g",
            a, b, res.message, float(res.x),
        )
    return float(res.x), float(res.fun)


def local_optima(
    f: Callable[[float], float],
    intervals: Sequence[Tuple[float, float]],
    cfg: LocalOptConfig = LocalOptConfig(),
) -> List[Tuple[float, float]]:
    """Run find_local_opt on every interval; results keep the interval order."""
    if cfg.max_workers > 1 and len(intervals) > 1:
        with ThreadPoolExecutor(max_workers=min(cfg.max_workers, len(intervals))) as executor:
            return list(executor.map(lambda ab: find_local_opt(f, ab[0], ab[1], cfg), intervals))
    return [find_local_opt(f, a, b, cfg) for a, b in intervals]


def find_acq_opt(state: OptimizationState, cfg: LocalOptConfig = LocalOptConfig()) -> Tuple[float, float]:
    """Return (x, acq(x)) maximizing the state's acquisition function over its bounds."""
    # EN: the minimizer sees -acq; the sign is flipped back on return.
    # JP: 最小化器には -acq を渡し、返す前に符号を戻します。
    def neg_acq(x: float) -> float:
        return -state.acq_func(x, state)

    intervals = partition_domain(state.bounds, state.points.x)
    candidates = local_optima(neg_acq, intervals, cfg)

    best_x, best_val = candidates[0]
    for (a, b), (x, val) in zip(intervals, candidates):
        logger.debug("sub-interval [%.6g, %.6g]: x=%.6g acq=%.6g", a, b, x, -val)
        if val < best_val:
            best_x, best_val = x, val
    return best_x, -best_val
