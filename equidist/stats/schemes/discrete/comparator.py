"""
equidist.stats.schemes.discrete.comparator
==========================================

Bayesian model comparison of two outcome tallies.

`BayesianComparator.compare` returns a `Verdict` holding both log marginal
likelihoods, the posterior probability that the tallies came from different
generators, and the decision `equal = posterior <= threshold`.

Inconclusive evidence is read as "equal": the test only rejects sameness
when the data argue for a difference. How often a real but small difference
slips through is controlled by `replicates` and `threshold`.

Note that even two identical tallies never push the posterior of difference
to zero. For two balanced binary tallies of size n under a uniform prior the
Bayes factor in favour of *same* is about sqrt(n / pi), so the posterior
floor is roughly 1 / (1 + sqrt(n / pi)); thresholds below that floor reject
everything.

Examples
--------
>>> from equidist.stats.schemes.discrete.comparator import BayesianComparator
>>> comparator = BayesianComparator(threshold=0.9)
>>> comparator.compare((50, 50), (48, 52), (1.0, 1.0)).equal
True
>>> comparator.compare((90, 10), (10, 90), (1.0, 1.0)).equal
False
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Sequence

from equidist.core.errors import ConfigurationError
from equidist.stats.common.dirichlet import log_marginals
from equidist.stats.common.logspace import log_sum_exp
from equidist.stats.schemes.discrete.model import PosteriorPayload, SeedVerdictPayload


@dataclass(frozen=True)
class Verdict:
    """Outcome of comparing two tallies."""

    same_log_marginal: float
    different_log_marginal: float
    posterior: float
    threshold: float

    @property
    def equal(self) -> bool:
        return self.posterior <= self.threshold

    def posterior_payload(self, seed: int, run: str = "") -> PosteriorPayload:
        return {
            "run": run,
            "seed": seed,
            "same_log_marginal": self.same_log_marginal,
            "different_log_marginal": self.different_log_marginal,
            "posterior": self.posterior,
        }

    def verdict_payload(self, seed: int, run: str = "") -> SeedVerdictPayload:
        return {
            "run": run,
            "seed": seed,
            "equal": self.equal,
            "posterior": self.posterior,
            "threshold": self.threshold,
        }


@dataclass(frozen=True)
class BayesianComparator:
    """
    Dirichlet-multinomial marginal likelihood ratio test.

    Attributes:
        threshold: posterior probability of difference above which the
            tallies are declared unequal; must lie in (0, 1)
    """

    threshold: float

    def __post_init__(self) -> None:
        if not 0.0 < self.threshold < 1.0:
            raise ConfigurationError(f"threshold must be in (0, 1), got {self.threshold}")

    def compare(
        self, c1: Sequence[int], c2: Sequence[int], alpha: Sequence[float]
    ) -> Verdict:
        """Compare two aligned tallies under Dirichlet prior `alpha`."""
        if len(c1) != len(c2):
            raise ValueError(f"tallies have different lengths: {len(c1)} and {len(c2)}")
        same, different = log_marginals(c1, c2, alpha)
        posterior = -math.expm1(same - log_sum_exp(same, different))
        return Verdict(
            same_log_marginal=same,
            different_log_marginal=different,
            posterior=posterior,
            threshold=self.threshold,
        )
