"""Run trace and summary.

English:
    Turn an OptimizationState into a tidy table (one row per evaluation)
    and a JSON-friendly summary, e.g. for scripts/run_gp_bo.py.

日本語:
    最適化の状態を評価ごとの表（pandas.DataFrame）とJSON向けの要約に変換します。
"""

from __future__ import annotations
from typing import Any, Dict
import numpy as np
import pandas as pd

from ..gp.state import OptimizationState
from ..opt.loop import best_so_far


def trace_frame(state: OptimizationState) -> pd.DataFrame:
    """Columns: eval (1-based), x, y, best_y (running maximum of y)."""
    y = np.asarray(state.points.y, dtype=float)
    return pd.DataFrame(
        {
            "eval": np.arange(1, len(y) + 1),
            "x": np.asarray(state.points.x, dtype=float),
            "y": y,
            "best_y": np.maximum.accumulate(y),
        }
    )


def summarize(state: OptimizationState) -> Dict[str, Any]:
    x_best, y_best = best_so_far(state)
    return {
        "n_evals": state.n_samples,
        "x_best": x_best,
        "y_best": y_best,
        "bounds": list(state.bounds),
        "noise": state.noise,
        "x": state.points.x.tolist(),
        "y": state.points.y.tolist(),
    }
