"""stein_shrinkage

Reproducible numeric companion to a report on James–Stein estimation and
Ridge Regression.

The package exposes:
- the grouped-normal shrinkage simulation (sample means vs shrunken estimates)
- a replicated Monte Carlo comparison of both estimators
- a ridge regression illustration under multicollinearity
- JSON report export, JSONL experiment logging and matplotlib figures
"""

from .config import InvalidParameterError, RidgeSpec, SimulationSpec
from .logger import ExperimentLogger
from .monte_carlo import MonteCarloSummary, run_monte_carlo
from .randomization import RandomizationEngine
from .report import build_report, estimates_table, write_report
from .ridge import make_collinear_design, ridge_coefficients, ridge_path, run_ridge_demo
from .simulation import (
    SimulationResult,
    draw_grouped_samples,
    mean_squared_error,
    run_simulation,
    shrink_toward_mean,
    shrinkage_factor,
    unbiased_group_variance,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidParameterError",
    "SimulationSpec",
    "RidgeSpec",
    "ExperimentLogger",
    "RandomizationEngine",
    "SimulationResult",
    "draw_grouped_samples",
    "unbiased_group_variance",
    "shrinkage_factor",
    "shrink_toward_mean",
    "mean_squared_error",
    "run_simulation",
    "MonteCarloSummary",
    "run_monte_carlo",
    "make_collinear_design",
    "ridge_coefficients",
    "ridge_path",
    "run_ridge_demo",
    "build_report",
    "estimates_table",
    "write_report",
]
