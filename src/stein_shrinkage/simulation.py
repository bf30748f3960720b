from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .config import RULES, InvalidParameterError, SimulationSpec
from .randomization import make_generator


@dataclass(frozen=True)
class SimulationResult:
    """Everything one shrinkage run produces.

    Arrays are indexed by group in draw order. ``group_variances`` is kept for
    completeness; the shrinkage factor only uses the aggregate dispersion of
    the sample means.
    """
    spec: SimulationSpec
    true_means: np.ndarray
    samples: np.ndarray
    sample_means: np.ndarray
    group_variances: np.ndarray
    overall_mean: float
    total_deviation: float
    raw_factor: float
    degenerate: bool
    shrinkage_factor: float
    shrunken_estimates: np.ndarray
    mse_sample: float
    mse_shrunken: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spec": self.spec.to_dict(),
            "true_means": self.true_means.tolist(),
            "sample_means": self.sample_means.tolist(),
            "group_variances": self.group_variances.tolist(),
            "overall_mean": float(self.overall_mean),
            "total_deviation": float(self.total_deviation),
            "raw_factor": float(self.raw_factor),
            "degenerate": bool(self.degenerate),
            "shrinkage_factor": float(self.shrinkage_factor),
            "shrunken_estimates": self.shrunken_estimates.tolist(),
            "mse_sample": float(self.mse_sample),
            "mse_shrunken": float(self.mse_shrunken),
        }


def draw_grouped_samples(spec: SimulationSpec) -> Tuple[np.ndarray, np.ndarray]:
    """Draws the true means, then each group's observations in group order."""
    spec.validate()
    rng = make_generator(spec.seed)
    true_means = rng.normal(spec.prior_mean, spec.prior_sd, size=spec.n_groups)
    rows = [rng.normal(mu, spec.sigma, size=spec.n_per_group) for mu in true_means]
    samples = np.vstack(rows).astype(float)
    return np.asarray(true_means, dtype=float), samples


def unbiased_group_variance(samples: np.ndarray) -> np.ndarray:
    """Per-row sample variance with divisor N - 1."""
    samples = np.asarray(samples, dtype=float)
    if samples.ndim != 2:
        raise InvalidParameterError("samples must be a 2D array (groups x observations)")
    n = samples.shape[1]
    if n < 2:
        raise InvalidParameterError("at least 2 observations per group are required for an unbiased variance")
    dev = samples - samples.mean(axis=1, keepdims=True)
    return np.sum(dev**2, axis=1) / (n - 1)


def _all_equal(x: np.ndarray) -> bool:
    """True when there is no dispersion at all (empty or constant)."""
    return x.size == 0 or bool(np.all(x == x[0]))


def shrinkage_factor(
    sample_means: np.ndarray,
    sigma: float,
    *,
    rule: str = "reference",
    n_per_group: Optional[int] = None,
) -> Tuple[float, float]:
    """Returns ``(raw, clamped)`` weight kept on each sample mean's deviation.

    reference:    raw = sigma^2 * (P - 3) / S
    james_stein:  raw = 1 - (P - 3) * (sigma^2 / N) / S

    with S the total squared deviation of the sample means from their mean.
    Identical sample means leave nothing to shrink: both values are 1 and no
    division happens. This is decided on the means themselves, since rounding
    in the grand mean can leave S a hair above zero.
    """
    if rule not in RULES:
        raise InvalidParameterError(f"rule must be one of {RULES}, got {rule!r}")
    x = np.asarray(sample_means, dtype=float)
    if _all_equal(x):
        return 1.0, 1.0
    p = int(x.size)
    s = float(np.sum((x - np.mean(x)) ** 2))

    var = float(sigma) ** 2
    if rule == "reference":
        raw = var * (p - 3) / s
    else:
        if n_per_group is None or n_per_group < 1:
            raise InvalidParameterError("james_stein rule needs n_per_group >= 1")
        raw = 1.0 - (p - 3) * (var / float(n_per_group)) / s

    return float(raw), float(np.clip(raw, 0.0, 1.0))


def shrink_toward_mean(sample_means: np.ndarray, factor: float) -> np.ndarray:
    """overall_mean + factor * (sample_means - overall_mean).

    The two limits are returned exactly rather than through the arithmetic,
    which would otherwise leave rounding residue.
    """
    x = np.asarray(sample_means, dtype=float)
    f = float(factor)
    if not 0.0 <= f <= 1.0:
        raise InvalidParameterError("factor must be in [0, 1]")
    if f == 1.0:
        return x.copy()
    center = float(np.mean(x))
    if f == 0.0:
        return np.full_like(x, center)
    return center + f * (x - center)


def mean_squared_error(estimates: np.ndarray, truth: np.ndarray) -> float:
    a = np.asarray(estimates, dtype=float)
    b = np.asarray(truth, dtype=float)
    if a.shape != b.shape:
        raise InvalidParameterError(f"shape mismatch: {a.shape} vs {b.shape}")
    return float(np.mean((a - b) ** 2))


def summarize_groups(samples: np.ndarray, sigma: float, *, rule: str = "reference") -> Dict[str, Any]:
    """Estimates and shrinks from an already drawn (groups x observations) matrix."""
    samples = np.asarray(samples, dtype=float)
    variances = unbiased_group_variance(samples)
    sample_means = samples.mean(axis=1)
    overall = float(np.mean(sample_means))
    degenerate = _all_equal(sample_means)
    s = 0.0 if degenerate else float(np.sum((sample_means - overall) ** 2))
    raw, f = shrinkage_factor(sample_means, sigma, rule=rule, n_per_group=samples.shape[1])
    return {
        "sample_means": sample_means,
        "group_variances": variances,
        "overall_mean": overall,
        "total_deviation": s,
        "raw_factor": raw,
        "degenerate": degenerate,
        "shrinkage_factor": f,
        "shrunken_estimates": shrink_toward_mean(sample_means, f),
    }


def run_simulation(spec: SimulationSpec = SimulationSpec()) -> SimulationResult:
    """One full run: draw, estimate, shrink, score against the true means."""
    spec.validate()
    true_means, samples = draw_grouped_samples(spec)
    g = summarize_groups(samples, spec.sigma, rule=spec.rule)

    return SimulationResult(
        spec=spec,
        true_means=true_means,
        samples=samples,
        sample_means=g["sample_means"],
        group_variances=g["group_variances"],
        overall_mean=g["overall_mean"],
        total_deviation=g["total_deviation"],
        raw_factor=g["raw_factor"],
        degenerate=g["degenerate"],
        shrinkage_factor=g["shrinkage_factor"],
        shrunken_estimates=g["shrunken_estimates"],
        mse_sample=mean_squared_error(g["sample_means"], true_means),
        mse_shrunken=mean_squared_error(g["shrunken_estimates"], true_means),
    )
