"""Central configuration dataclasses.

English:
    Keep run / local-search / demo settings in one place.

日本語:
    実行・局所探索・デモの設定を一箇所で管理します。
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class GPConfig:
    """Run parameters.

    EN:
        noise: assumed deviation of a single objective evaluation (should be > 0).
        evals: objective evaluations to spend (>= 2 when no initial points are given).

    JP:
        noise: 目的関数1回評価あたりの想定ノイズ（標準偏差、0より大きくすべき）。
        evals: 評価回数（初期点なしの場合は2以上）。
    """

    noise: float = 1e-4
    evals: int = 1


@dataclass(frozen=True)
class LocalOptConfig:
    """Bounded 1-D search settings for each sub-interval."""

    xatol: float = 1e-10   # absolute x tolerance of bounded Brent
    maxiter: int = 500
    max_workers: int = 1   # >1 searches sub-intervals in a thread pool


@dataclass(frozen=True)
class PlotConfig:
    points: int = 200
    legend: bool = True
    legend_loc: str = "lower right"


@dataclass(frozen=True)
class BOConfig:
    """Name-keyed choices used by scripts (see make_covariance / make_acquisition)."""

    kernel: str = "matern1"
    sigma: float = 1.0
    length_scale: float = 1.0
    acquisition: str = "ucb"
    beta: float = 1.0              # ucb only
    tau: Optional[float] = None    # poi / ei; None = best observed value
    gp: GPConfig = field(default_factory=GPConfig)
    local: LocalOptConfig = field(default_factory=LocalOptConfig)
