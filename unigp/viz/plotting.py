"""Plot the state of a GP-BO run.

English:
    Objective, posterior mean, mean +/- sigma band, acquisition function
    (shifted by +1 so it sits above the axis) and the samples.
    Uses only the read-only query API (posterior, state.points, ...).

日本語:
    目的関数・事後平均・平均±σ・獲得関数（+1だけ上にずらす）・サンプル点を描画します。
    状態は読み取りのみで、変更しません。
"""

from __future__ import annotations
from typing import Optional
import numpy as np
import matplotlib.pyplot as plt

from ..config import PlotConfig
from ..gp.posterior import posterior
from ..gp.state import OptimizationState


def plot_state(state: OptimizationState, cfg: PlotConfig = PlotConfig(), ax: Optional[plt.Axes] = None):
    """Draw the state on `ax` (a new figure if None) and return the figure."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 5))
    else:
        fig = ax.figure

    lo, hi = state.bounds
    xs = np.linspace(lo, hi, cfg.points)
    mu, std = posterior(xs, state)
    f = np.array([state.objective(x) for x in xs], dtype=float)
    acq = np.array([state.acq_func(x, state) for x in xs], dtype=float)

    ax.plot(xs, f, color="blue", label="objective function")
    ax.plot(xs, mu, color="red", label="obj. func. approximation")
    ax.plot(xs, mu + std, color="orange", label="obj. func. approx. uncertainty")
    ax.plot(xs, mu - std, color="orange")
    ax.plot(xs, acq + 1.0, color="green", label="acquisition function")
    ax.scatter(state.points.x, state.points.y, color="black", zorder=5, label="data")
    ax.set_xlim(lo, hi)
    ax.set_xlabel("x")
    ax.grid(True, alpha=0.3)
    if cfg.legend:
        ax.legend(loc=cfg.legend_loc)
    return fig
