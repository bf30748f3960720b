from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from .monte_carlo import MonteCarloSummary, summary_to_dict
from .simulation import SimulationResult

REPORT_VERSION = "0.1.0"


@dataclass(frozen=True)
class SimulationReport:
    version: str
    created_utc: str
    spec: Dict[str, Any]
    results: Dict[str, Any]
    verdict: Dict[str, Any]
    monte_carlo: Optional[Dict[str, Any]] = None
    ridge: Optional[Dict[str, Any]] = None


def _json_default(obj: Any) -> Any:
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, pd.DataFrame):
        return obj.to_dict(orient="records")
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {obj.__class__.__name__} is not JSON serialisable")


def estimates_table(result: SimulationResult) -> pd.DataFrame:
    """One row per group: truth, sample mean, shrunken estimate and their errors."""
    return pd.DataFrame(
        {
            "group": np.arange(len(result.true_means)),
            "true_mean": result.true_means,
            "sample_mean": result.sample_means,
            "shrunken_estimate": result.shrunken_estimates,
            "group_variance": result.group_variances,
            "sq_err_sample": (result.sample_means - result.true_means) ** 2,
            "sq_err_shrunken": (result.shrunken_estimates - result.true_means) ** 2,
        }
    )


def build_report(
    result: SimulationResult,
    *,
    monte_carlo: Optional[MonteCarloSummary] = None,
    ridge: Optional[pd.DataFrame] = None,
) -> SimulationReport:
    """Bundles one run (plus optional replicated study and ridge table) for export."""
    created = datetime.now(timezone.utc).isoformat()

    verdict = {
        "shrunken_wins": bool(result.mse_shrunken < result.mse_sample),
        "mse_ratio": float(result.mse_shrunken / result.mse_sample) if result.mse_sample > 0 else 1.0,
        "rule": result.spec.rule,
    }
    if monte_carlo is not None:
        verdict["mean_shrunken_wins"] = bool(
            monte_carlo.stats["mean_mse_shrunken"] <= monte_carlo.stats["mean_mse_sample"]
        )

    ridge_dict = None
    if ridge is not None:
        best = ridge.loc[ridge["coef_mse"].idxmin()]
        ridge_dict = {
            "table": ridge.to_dict(orient="records"),
            "best_alpha": float(best["alpha"]),
            "best_coef_mse": float(best["coef_mse"]),
        }

    return SimulationReport(
        version=REPORT_VERSION,
        created_utc=created,
        spec=result.spec.to_dict(),
        results=result.to_dict(),
        verdict=verdict,
        monte_carlo=summary_to_dict(monte_carlo) if monte_carlo is not None else None,
        ridge=ridge_dict,
    )


def write_report(report: SimulationReport, out_path: str | Path) -> None:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "version": report.version,
        "created_utc": report.created_utc,
        "spec": report.spec,
        "results": report.results,
        "verdict": report.verdict,
        "monte_carlo": report.monte_carlo,
        "ridge": report.ridge,
    }
    out_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False, default=_json_default),
        encoding="utf-8",
    )
