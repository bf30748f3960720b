from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict


RULES = ("reference", "james_stein")


class InvalidParameterError(ValueError):
    """Raised when a simulation or demo parameter is out of its valid range."""


@dataclass(frozen=True)
class SimulationSpec:
    """Parameters of one grouped-normal shrinkage run.

    The defaults are the reference scenario: 10 groups of 5 observations,
    known sigma 5, true means drawn from N(0, 10), seed 42.
    All fields are declared ex ante and serialised with the results.
    """

    n_groups: int = 10
    n_per_group: int = 5
    sigma: float = 5.0
    seed: int = 42

    # Prior over the true group means
    prior_mean: float = 0.0
    prior_sd: float = 10.0

    # Shrinkage factor formula, see simulation.shrinkage_factor
    rule: str = "reference"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        if self.n_per_group < 2:
            raise InvalidParameterError("n_per_group must be >= 2 (variance divisor is n_per_group - 1)")
        if self.n_groups < 1:
            raise InvalidParameterError("n_groups must be positive")
        if not math.isfinite(self.sigma) or self.sigma < 0:
            raise InvalidParameterError("sigma must be finite and >= 0")
        if not math.isfinite(self.prior_sd) or self.prior_sd < 0:
            raise InvalidParameterError("prior_sd must be finite and >= 0")
        if not math.isfinite(self.prior_mean):
            raise InvalidParameterError("prior_mean must be finite")
        if self.rule not in RULES:
            raise InvalidParameterError(f"rule must be one of {RULES}, got {self.rule!r}")


@dataclass(frozen=True)
class RidgeSpec:
    """Parameters of the multicollinearity illustration."""

    n_samples: int = 50
    n_features: int = 5
    correlation: float = 0.95
    noise_sd: float = 1.0
    alpha: float = 1.0
    seed: int = 42

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        if self.n_features < 1:
            raise InvalidParameterError("n_features must be positive")
        # centring spends one degree of freedom, OLS (alpha=0) needs X'X of full rank
        if self.n_samples <= self.n_features:
            raise InvalidParameterError("n_samples must exceed n_features")
        if not (-1.0 < self.correlation < 1.0):
            raise InvalidParameterError("correlation must be in (-1, 1)")
        # equicorrelation matrix is positive definite only above -1/(p-1)
        if self.n_features > 1 and self.correlation <= -1.0 / (self.n_features - 1):
            raise InvalidParameterError("correlation too negative for a valid equicorrelated design")
        if not math.isfinite(self.noise_sd) or self.noise_sd < 0:
            raise InvalidParameterError("noise_sd must be finite and >= 0")
        if not math.isfinite(self.alpha) or self.alpha < 0:
            raise InvalidParameterError("alpha must be finite and >= 0")
