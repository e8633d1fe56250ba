"""
equidist.api.equivalence
========================

Facade for building equivalence oracles with sensible defaults.

Examples
--------
>>> from equidist.api.equivalence import equivalence_oracle
>>> from equidist.kernel.distributions import bernoulli
>>> oracle = equivalence_oracle([False, True], sensitivity="balanced", seeds=2)
>>> oracle.confidence.replicates, oracle.confidence.threshold
(2000, 0.9)
>>> oracle.are_equivalent(bernoulli(0.5), bernoulli(0.5))
True
"""

from __future__ import annotations
from typing import Any, Iterable, Literal, Optional

from equidist.core.effects import IDENTITY, Effect
from equidist.core.errors import ConfigurationError
from equidist.core.rng import StateSpace
from equidist.core.traits import LedgerOps
from equidist.runtime.decider import EquivalenceDecider, ExactDecider
from equidist.stats.schemes.discrete.model import Confidence, DiscreteOutcomeSpace

Sensitivity = Literal["conservative", "balanced", "sensitive"]

# (replicates, threshold on the posterior probability of difference)
SENSITIVITY_PRESETS = {
    "conservative": (1000, 0.99),  # rejects only overwhelming differences
    "balanced": (2000, 0.9),
    "sensitive": (5000, 0.5),  # more samples, rejects on a posterior majority
}


def confidence_for(
    sensitivity: Sensitivity = "balanced",
    replicates: Optional[int] = None,
    threshold: Optional[float] = None,
) -> Confidence:
    """
    Map a sensitivity level to a `Confidence`, with optional overrides.

    Parameters
    ----------
    sensitivity : {"conservative", "balanced", "sensitive"}, default="balanced"
        Detection sensitivity:
        - "conservative": fewer false "not equivalent" calls, misses subtle differences
        - "balanced": good default for property tests
        - "sensitive": catches smaller differences, at a higher sampling cost
    replicates : int, optional
        Overrides the preset's replicate count
    threshold : float, optional
        Overrides the preset's decision threshold
    """
    if sensitivity not in SENSITIVITY_PRESETS:
        raise ConfigurationError(
            f"sensitivity must be one of {sorted(SENSITIVITY_PRESETS)}, got {sensitivity!r}"
        )
    preset_replicates, preset_threshold = SENSITIVITY_PRESETS[sensitivity]
    return Confidence(
        replicates=preset_replicates if replicates is None else replicates,
        threshold=preset_threshold if threshold is None else threshold,
    )


def equivalence_oracle(
    values: Iterable[Any],
    sensitivity: Sensitivity = "balanced",
    replicates: Optional[int] = None,
    threshold: Optional[float] = None,
    prior: Optional[Iterable[float]] = None,
    strict: bool = False,
    seeds: int = 4,
    base_seed: int = 0,
    effect: Effect = IDENTITY,
    ledger: Optional[LedgerOps] = None,
    comparison_id: Optional[str] = None,
) -> EquivalenceDecider:
    """
    Create a decider for random variables over a declared set of outcomes.

    Parameters
    ----------
    values : iterable
        The distinct outcomes the variables can produce
    sensitivity : str, default="balanced"
        Preset for replicates and threshold (see `confidence_for`)
    replicates, threshold : optional
        Override the preset
    prior : iterable of float, optional
        Dirichlet prior per outcome; all ones when omitted
    strict : bool, default=False
        Raise on undeclared outcomes instead of dropping them
    seeds : int, default=4
        Number of SplitMix states to compare at
    base_seed : int, default=0
        First integer seed; states use `base_seed .. base_seed + seeds - 1`
    effect : Effect, default=IDENTITY
        Effect context of the variables
    ledger : LedgerOps, optional
        Audit trail for tallies, posteriors and decisions

    Returns
    -------
    EquivalenceDecider
    """
    return EquivalenceDecider(
        states=StateSpace.splitmix(seeds, base_seed=base_seed),
        space=DiscreteOutcomeSpace.of(values, prior=prior, strict=strict),
        confidence=confidence_for(sensitivity, replicates, threshold),
        effect=effect,
        ledger=ledger,
        comparison_id=comparison_id,
    )


def exact_equivalence(
    seeds: int = 4,
    base_seed: int = 0,
    effect: Effect = IDENTITY,
    ledger: Optional[LedgerOps] = None,
    comparison_id: Optional[str] = None,
) -> ExactDecider:
    """
    Create a decider that compares variables value by value at every seed.

    No sampling and no outcome space are involved, so this also covers
    continuous variables. Two variables are equivalent only if they produce
    equal results (under `effect.eqv`) from each of the `seeds` states.

    Examples
    --------
    >>> from equidist.kernel.distributions import InverseTransformExponential
    >>> exp = InverseTransformExponential()
    >>> exact_equivalence().are_equivalent(exp(2.0), exp.standard().map(lambda e: e / 2.0))
    True
    """
    return ExactDecider(
        states=StateSpace.splitmix(seeds, base_seed=base_seed),
        effect=effect,
        ledger=ledger,
        comparison_id=comparison_id,
    )
