#!/usr/bin/env python3
"""GP Bayesian optimization demo on a built-in 1-D objective.

Example:
  python scripts/run_gp_bo.py --objective sin --kernel matern1 --sigma 2 --acq ucb --noise 1e-2 --evals 8 --prior-mean identity --out artifacts/gp_bo.json --plot artifacts/gp_bo.png
"""

from __future__ import annotations
import argparse
import json
import logging
import math
import os
import sys
from pathlib import Path

# EN: Allow running as a script without install.
# JP: インストール前でも実行できるようにパスを追加。
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from unigp.config import BOConfig, GPConfig, LocalOptConfig
from unigp.eval.trace import summarize, trace_frame
from unigp.opt.loop import best_so_far, run_from_config


OBJECTIVES = {
    "sin": (math.sin, (-math.pi, math.pi)),
    "neg_quadratic": (lambda x: -(x - 0.3) ** 2, (-2.0, 2.0)),
    # EN/JP: several local maxima; the global one is near x = 2.0.
    "bumpy": (lambda x: math.sin(3.0 * x) + 0.5 * math.exp(-((x - 2.0) ** 2)), (0.0, 4.0)),
}

PRIOR_MEANS = {
    "zero": None,
    "identity": lambda x: x,
}


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--objective", default="sin", choices=sorted(OBJECTIVES))
    p.add_argument("--lo", type=float, default=None, help="Lower bound (default: objective's own).")
    p.add_argument("--hi", type=float, default=None, help="Upper bound (default: objective's own).")
    p.add_argument("--kernel", default="matern1", choices=["matern1", "matern3", "matern5", "sq_exp"])
    p.add_argument("--sigma", type=float, default=1.0)
    p.add_argument("--length-scale", type=float, default=1.0)
    p.add_argument("--acq", default="ucb", choices=["ucb", "poi", "ei"])
    p.add_argument("--beta", type=float, default=1.0)
    p.add_argument("--noise", type=float, default=1e-4)
    p.add_argument("--evals", type=int, default=8)
    p.add_argument("--prior-mean", default="zero", choices=sorted(PRIOR_MEANS))
    p.add_argument("--workers", type=int, default=1)
    p.add_argument("--out", default=None, help="Write a JSON summary here.")
    p.add_argument("--plot", default=None, help="Save a PNG of the final state here.")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    objective, (lo, hi) = OBJECTIVES[args.objective]
    bounds = (args.lo if args.lo is not None else lo, args.hi if args.hi is not None else hi)
    cfg = BOConfig(
        kernel=args.kernel,
        sigma=args.sigma,
        length_scale=args.length_scale,
        acquisition=args.acq,
        beta=args.beta,
        gp=GPConfig(noise=args.noise, evals=args.evals),
        local=LocalOptConfig(max_workers=args.workers),
    )

    state = run_from_config(objective, bounds, cfg, prior_mean=PRIOR_MEANS[args.prior_mean])

    print(trace_frame(state).to_string(index=False))
    x_best, y_best = best_so_far(state)
    print(f"Best: x={x_best:.6g} y={y_best:.6g}")

    if args.out:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(summarize(state), f, indent=2)
        print(f"Saved: {args.out}")

    if args.plot:
        from unigp.viz.plotting import plot_state

        os.makedirs(os.path.dirname(args.plot) or ".", exist_ok=True)
        fig = plot_state(state)
        fig.savefig(args.plot, dpi=120, bbox_inches="tight")
        print(f"Saved plot: {args.plot}")


if __name__ == "__main__":
    main()
