from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from .monte_carlo import MonteCarloSummary  # noqa: E402
from .simulation import SimulationResult  # noqa: E402


def plot_estimates(result: SimulationResult, out_png: str | Path) -> Path:
    """True means, sample means and shrunken estimates per group."""
    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)
    idx = np.arange(len(result.true_means))

    fig = plt.figure(figsize=(11, 5.5))
    plt.scatter(idx, result.true_means, marker="o", s=60, label="true mean")
    plt.scatter(idx, result.sample_means, marker="x", s=60, label="sample mean")
    plt.scatter(idx, result.shrunken_estimates, marker="^", s=60, label="shrunken")
    for i in idx:
        plt.plot([i, i], [result.sample_means[i], result.shrunken_estimates[i]], color="grey", linewidth=1.0)
    plt.axhline(result.overall_mean, color="black", linestyle="--", linewidth=1.0, label="overall mean")
    plt.title(f"Shrinkage factor f = {result.shrinkage_factor:.3f}", fontsize=14, pad=15)
    plt.xlabel("Group", fontsize=12)
    plt.ylabel("Estimate", fontsize=12)
    plt.grid(True, alpha=0.3, linestyle="--")
    plt.legend()
    fig.tight_layout()
    fig.savefig(out_png, dpi=140)
    plt.close(fig)
    return out_png


def plot_monte_carlo(summary: MonteCarloSummary, out_png: str | Path) -> Path:
    """Histogram of per-replicate MSE for both estimators."""
    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)
    runs = summary.runs

    fig = plt.figure(figsize=(11, 5.5))
    bins = 40
    plt.hist(runs["mse_sample"], bins=bins, alpha=0.5, label="sample means")
    plt.hist(runs["mse_shrunken"], bins=bins, alpha=0.5, label="shrunken")
    plt.axvline(summary.stats["mean_mse_sample"], color="C0", linestyle="--")
    plt.axvline(summary.stats["mean_mse_shrunken"], color="C1", linestyle="--")
    plt.title(f"MSE over {summary.n_replicates} replicates", fontsize=14, pad=15)
    plt.xlabel("MSE", fontsize=12)
    plt.ylabel("Count", fontsize=12)
    plt.grid(True, alpha=0.3, linestyle="--")
    plt.legend()
    fig.tight_layout()
    fig.savefig(out_png, dpi=140)
    plt.close(fig)
    return out_png


def plot_ridge_demo(frame: pd.DataFrame, out_png: str | Path) -> Path:
    """Coefficient error and norm against the penalty (log x-axis, alpha=0 shown at the left edge)."""
    out_png = Path(out_png)
    out_png.parent.mkdir(parents=True, exist_ok=True)
    alpha = frame["alpha"].to_numpy(dtype=float)
    positive = alpha[alpha > 0]
    floor = float(positive.min()) / 10.0 if positive.size else 1e-3
    x = np.where(alpha > 0, alpha, floor)

    fig, ax1 = plt.subplots(figsize=(11, 5.5))
    ax1.plot(x, frame["coef_mse"], marker="o", linewidth=2.0, color="C0")
    ax1.set_xscale("log")
    ax1.set_xlabel("alpha", fontsize=12)
    ax1.set_ylabel("coefficient MSE", fontsize=12, color="C0")
    ax2 = ax1.twinx()
    ax2.plot(x, frame["coef_norm"], marker="s", linewidth=1.5, color="C1")
    ax2.set_ylabel("||beta_hat||", fontsize=12, color="C1")
    ax1.set_title("Ridge under multicollinearity", fontsize=14, pad=15)
    ax1.grid(True, alpha=0.3, linestyle="--")
    fig.tight_layout()
    fig.savefig(out_png, dpi=140)
    plt.close(fig)
    return out_png
