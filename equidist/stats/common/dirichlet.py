"""
equidist.stats.common.dirichlet
===============================

Dirichlet-multinomial marginal likelihoods and the two-sample model
comparison built on them.

Given categorical counts `x` and a Dirichlet prior `alpha`, integrating out
the unknown category probabilities gives the Dirichlet-multinomial pmf:

    log p(x | alpha) = lgamma(A) + lgamma(n + 1) - lgamma(n + A)
                       + sum_k [lgamma(x_k + alpha_k) - lgamma(alpha_k) - lgamma(x_k + 1)]

with A = sum(alpha) and n = sum(x). Two tallies are compared by contrasting
two hypotheses with equal prior odds:

- *same*: both tallies were drawn from one shared categorical distribution
- *different*: each tally has its own, independently drawn distribution

The posterior probability of *different* is the quantity the equivalence
decider thresholds.

Examples
--------
>>> import math
>>> from equidist.stats.common.dirichlet import dirichlet_multinomial_log_pmf
>>> # uniform prior on two outcomes: every count split is equally likely
>>> math.isclose(math.exp(dirichlet_multinomial_log_pmf([3, 2], [1.0, 1.0])), 1 / 6)
True
"""

from __future__ import annotations
import math
from typing import Sequence

import numpy as np
from scipy.special import gammaln

from equidist.stats.common.logspace import log_sum_exp


def _validate(x: Sequence[int], alpha: Sequence[float]) -> None:
    if len(x) != len(alpha):
        raise ValueError(
            f"tally has {len(x)} categories but prior has {len(alpha)}"
        )
    if any(c < 0 for c in x):
        raise ValueError("tally counts must be non-negative")
    if any(a <= 0 for a in alpha):
        raise ValueError("Dirichlet prior entries must be positive")


def dirichlet_multinomial_log_pmf(x: Sequence[int], alpha: Sequence[float]) -> float:
    """Log marginal likelihood of one tally under a Dirichlet(alpha) prior."""
    _validate(x, alpha)
    counts = np.asarray(x, dtype=float)
    prior = np.asarray(alpha, dtype=float)
    total_prior = prior.sum()
    n = counts.sum()
    log_pmf = gammaln(total_prior) + gammaln(n + 1.0) - gammaln(n + total_prior)
    log_pmf += np.sum(gammaln(counts + prior) - gammaln(prior) - gammaln(counts + 1.0))
    return float(log_pmf)


def joint_dirichlet_multinomial_log_pmf(
    x1: Sequence[int], x2: Sequence[int], alpha: Sequence[float]
) -> float:
    """Log marginal likelihood of two tallies sharing one categorical distribution."""
    _validate(x1, alpha)
    _validate(x2, alpha)
    c1 = np.asarray(x1, dtype=float)
    c2 = np.asarray(x2, dtype=float)
    prior = np.asarray(alpha, dtype=float)
    total_prior = prior.sum()
    n1, n2 = c1.sum(), c2.sum()
    log_pmf = (
        gammaln(total_prior)
        + gammaln(n1 + 1.0)
        + gammaln(n2 + 1.0)
        - gammaln(n1 + n2 + total_prior)
    )
    log_pmf += np.sum(
        gammaln(c1 + c2 + prior)
        - gammaln(prior)
        - gammaln(c1 + 1.0)
        - gammaln(c2 + 1.0)
    )
    return float(log_pmf)


def log_marginals(
    x1: Sequence[int], x2: Sequence[int], alpha: Sequence[float]
) -> tuple[float, float]:
    """Return (same, different) log marginal likelihoods for two tallies.

    The tallies are put in a canonical order first, so swapping them gives
    bit-identical results.
    """
    t1, t2 = tuple(x1), tuple(x2)
    if t2 < t1:
        t1, t2 = t2, t1
    same = joint_dirichlet_multinomial_log_pmf(t1, t2, alpha)
    different = dirichlet_multinomial_log_pmf(t1, alpha) + dirichlet_multinomial_log_pmf(
        t2, alpha
    )
    return same, different


def posterior_difference_probability(
    x1: Sequence[int], x2: Sequence[int], alpha: Sequence[float]
) -> float:
    """Posterior probability that two tallies came from different generators.

    Computes 1 - exp(same - logsumexp(same, different)) under equal prior
    odds for the two hypotheses.
    """
    same, different = log_marginals(x1, x2, alpha)
    return -math.expm1(same - log_sum_exp(same, different))
