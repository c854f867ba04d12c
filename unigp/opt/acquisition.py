"""Acquisition functions (maximization, higher is better).

English:
    - UCB: mu + beta * sigma
    - POI: Phi((mu - tau) / sigma)
    - EI:  (mu - tau) * Phi(z) + sigma * phi(z),  z = (mu - tau) / sigma

    tau defaults to the best observed value of the state being scored.
    POI and EI return 0 where sigma == 0 (an already sampled point cannot improve).

日本語:
    - UCB: mu + beta * sigma
    - POI: 改善確率
    - EI:  期待改善量
    tauの既定値は観測済みの最大値です。sigma == 0 の点ではPOI/EIは0を返します。
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
from scipy.stats import norm

from ..gp.posterior import posterior_mean, posterior_std
from ..gp.state import AcquisitionFunction, OptimizationState


def _threshold(tau: Optional[float], state: OptimizationState) -> float:
    return float(state.points.y.max()) if tau is None else float(tau)


@dataclass(frozen=True)
class UCB:
    beta: float = 1.0

    def __call__(self, x: float, state: OptimizationState) -> float:
        return posterior_mean(x, state) + self.beta * posterior_std(x, state)


@dataclass(frozen=True)
class POI:
    tau: Optional[float] = None

    def __call__(self, x: float, state: OptimizationState) -> float:
        sigma = posterior_std(x, state)
        if sigma == 0:
            return 0.0
        mu = posterior_mean(x, state)
        return float(norm.cdf((mu - _threshold(self.tau, state)) / sigma))


@dataclass(frozen=True)
class EI:
    tau: Optional[float] = None

    def __call__(self, x: float, state: OptimizationState) -> float:
        sigma = posterior_std(x, state)
        if sigma == 0:
            return 0.0
        mu = posterior_mean(x, state)
        imp = mu - _threshold(self.tau, state)
        z = imp / sigma
        return float(imp * norm.cdf(z) + sigma * norm.pdf(z))


_REGISTRY = {"ucb": UCB, "poi": POI, "ei": EI}


def make_acquisition(name: str, **params: Any) -> AcquisitionFunction:
    """Build an acquisition function by name (ucb, poi, ei)."""
    if name not in _REGISTRY:
        raise ValueError(f"Unknown acquisition function: {name}")
    return _REGISTRY[name](**params)
