from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from scipy import stats

from .config import InvalidParameterError, SimulationSpec
from .randomization import RandomizationEngine
from .simulation import run_simulation


@dataclass(frozen=True)
class MonteCarloSummary:
    spec: SimulationSpec
    n_replicates: int
    master_seed: int
    runs: pd.DataFrame
    stats: Dict[str, float]


def _paired_test(a: np.ndarray, b: np.ndarray) -> tuple[float, float]:
    """Paired t-test of a vs b. Identical columns give (0, 1) instead of NaN."""
    diff = a - b
    if diff.size < 2 or not np.any(diff != diff[0]):
        return 0.0, 1.0
    res = stats.ttest_rel(a, b)
    return float(res.statistic), float(res.pvalue)


def run_monte_carlo(
    spec: SimulationSpec = SimulationSpec(),
    *,
    n_replicates: int = 1000,
    master_seed: Optional[int] = None,
) -> MonteCarloSummary:
    """Repeats the simulation on independent seeds and compares both estimators.

    Each replicate reuses ``spec`` with only the seed replaced; replicate seeds
    come from ``RandomizationEngine(master_seed)`` (defaults to ``spec.seed``),
    so the whole study is reproducible.
    """
    spec.validate()
    if n_replicates < 1:
        raise InvalidParameterError("n_replicates must be >= 1")
    master = spec.seed if master_seed is None else int(master_seed)

    seeds = RandomizationEngine(master).seeds(n_replicates)
    rows = []
    for i, seed in enumerate(seeds):
        res = run_simulation(replace(spec, seed=seed))
        rows.append(
            {
                "replicate": i,
                "seed": seed,
                "shrinkage_factor": res.shrinkage_factor,
                "mse_sample": res.mse_sample,
                "mse_shrunken": res.mse_shrunken,
            }
        )
    runs = pd.DataFrame(rows)
    runs["improvement"] = runs["mse_sample"] - runs["mse_shrunken"]

    mse_sample = runs["mse_sample"].to_numpy(dtype=float)
    mse_shrunken = runs["mse_shrunken"].to_numpy(dtype=float)
    mean_sample = float(np.mean(mse_sample))
    mean_shrunken = float(np.mean(mse_shrunken))
    t_stat, p_value = _paired_test(mse_shrunken, mse_sample)

    summary = {
        "mean_mse_sample": mean_sample,
        "mean_mse_shrunken": mean_shrunken,
        "mean_shrinkage_factor": float(runs["shrinkage_factor"].mean()),
        "win_rate_shrunken": float(np.mean(mse_shrunken < mse_sample)),
        "relative_risk_reduction": float(1.0 - mean_shrunken / mean_sample) if mean_sample > 0 else 0.0,
        "paired_t_statistic": t_stat,
        "paired_p_value": p_value,
    }
    return MonteCarloSummary(spec=spec, n_replicates=n_replicates, master_seed=master, runs=runs, stats=summary)


def summary_to_dict(summary: MonteCarloSummary) -> Dict[str, Any]:
    return {
        "spec": summary.spec.to_dict(),
        "n_replicates": int(summary.n_replicates),
        "master_seed": int(summary.master_seed),
        "stats": dict(summary.stats),
    }
