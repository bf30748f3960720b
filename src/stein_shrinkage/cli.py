from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from .config import InvalidParameterError, RULES, RidgeSpec, SimulationSpec
from .logger import ExperimentLogger
from .monte_carlo import run_monte_carlo, summary_to_dict
from .report import build_report, estimates_table, write_report
from .ridge import run_ridge_demo
from .simulation import run_simulation


def _fmt(values: np.ndarray) -> str:
    return "[" + ", ".join(f"{v:.4f}" for v in np.asarray(values, dtype=float)) + "]"


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="James–Stein shrinkage simulation (grouped normal means).")
    ap.add_argument("--groups", type=int, default=10, help="number of groups P")
    ap.add_argument("--per-group", type=int, default=5, help="observations per group N (>= 2)")
    ap.add_argument("--sigma", type=float, default=5.0, help="known within-group standard deviation")
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--rule", choices=RULES, default="reference")
    ap.add_argument("--replicates", type=int, default=0, help="Monte Carlo replicates (0 disables)")
    ap.add_argument("--ridge", action="store_true", help="also run the ridge multicollinearity demo")
    ap.add_argument("--out-dir", type=str, default="", help="write report, tables, figures and log here")
    ap.add_argument("--no-figures", action="store_true")
    args = ap.parse_args(argv)

    spec = SimulationSpec(
        n_groups=args.groups,
        n_per_group=args.per_group,
        sigma=args.sigma,
        seed=args.seed,
        rule=args.rule,
    )
    try:
        spec.validate()
        if args.replicates < 0:
            raise InvalidParameterError("--replicates must be >= 0")
        result = run_simulation(spec)
        mc = run_monte_carlo(spec, n_replicates=args.replicates) if args.replicates > 0 else None
        ridge = run_ridge_demo(RidgeSpec(seed=args.seed)) if args.ridge else None
    except InvalidParameterError as e:
        raise SystemExit(f"invalid parameter: {e}")

    print(f"True means:          {_fmt(result.true_means)}")
    print(f"Sample means:        {_fmt(result.sample_means)}")
    print(f"Shrunken estimates:  {_fmt(result.shrunken_estimates)}")
    print(f"Shrinkage factor:    {result.shrinkage_factor:.4f}")
    print(f"MSE (sample means):  {result.mse_sample:.4f}")
    print(f"MSE (shrunken):      {result.mse_shrunken:.4f}")
    if mc is not None:
        s = mc.stats
        print(
            f"Monte Carlo ({mc.n_replicates}): mean MSE sample={s['mean_mse_sample']:.4f} "
            f"shrunken={s['mean_mse_shrunken']:.4f} win_rate={s['win_rate_shrunken']:.3f} "
            f"p={s['paired_p_value']:.3g}"
        )
    if ridge is not None:
        print(ridge.to_string(index=False, float_format=lambda v: f"{v:.4f}"))

    if not args.out_dir:
        return 0

    out = Path(args.out_dir)
    tabdir = out / "tables"
    figdir = out / "figures"
    tabdir.mkdir(parents=True, exist_ok=True)

    logger = ExperimentLogger(out)
    logger.log("simulation", result.to_dict())

    estimates_table(result).to_csv(tabdir / "estimates.csv", index=False)
    if mc is not None:
        mc.runs.to_csv(tabdir / "monte_carlo_runs.csv", index=False)
        logger.log("monte_carlo", summary_to_dict(mc))
    if ridge is not None:
        ridge.to_csv(tabdir / "ridge.csv", index=False)
        logger.log("ridge", {"table": ridge.to_dict(orient="records")})

    write_report(build_report(result, monte_carlo=mc, ridge=ridge), out / "report.json")

    if not args.no_figures:
        from .plots import plot_estimates, plot_monte_carlo, plot_ridge_demo

        plot_estimates(result, figdir / "estimates.png")
        if mc is not None:
            plot_monte_carlo(mc, figdir / "monte_carlo_mse.png")
        if ridge is not None:
            plot_ridge_demo(ridge, figdir / "ridge.png")

    print(f"Wrote outputs to {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
