"""Test configuration.

English:
    Allow running `pytest` without installing the package, and use a
    non-interactive matplotlib backend.

日本語:
    パッケージをインストールしなくても `pytest` が動くように
    import path を調整し、matplotlib は非対話バックエンドを使います。
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

# Repo root contains the `unigp/` package directory.
ROOT = Path(__file__).resolve().parents[1]

# EN: Add the parent dir so `import unigp` works.
# JP: `import unigp` が通るように親ディレクトリを追加。
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def make_state():
    """Build an OptimizationState directly from samples (no objective calls)."""
    from unigp.gp.covariance import Matern12
    from unigp.gp.state import SampleSet, init_state
    from unigp.opt.acquisition import UCB

    def _make(xs, ys, noise=1e-4, cov_func=None, acq_func=None, bounds=None, prior_mean=None, objective=None):
        bounds = bounds if bounds is not None else (min(xs) - 1.0, max(xs) + 1.0)
        return init_state(
            objective if objective is not None else (lambda x: 0.0),
            bounds,
            cov_func if cov_func is not None else Matern12(),
            acq_func if acq_func is not None else UCB(),
            SampleSet(xs, ys),
            noise,
            prior_mean,
        )

    return _make
