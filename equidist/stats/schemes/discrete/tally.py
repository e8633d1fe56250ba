"""
equidist.stats.schemes.discrete.tally
=====================================

Monte Carlo outcome counting.

`SamplingTally.tally(rv)` is itself a random variable: it draws `replicates`
samples of `rv`, each on its own split of the incoming generator state, and
counts how often each declared outcome occurred.

Samples outside the declared outcome space are dropped (and logged at DEBUG
level), so the tally may sum to less than `replicates`. A strict outcome
space raises `UnknownOutcomeError` instead.

Examples
--------
>>> from equidist.stats.schemes.discrete.model import DiscreteOutcomeSpace
>>> from equidist.stats.schemes.discrete.tally import SamplingTally
>>> counter = SamplingTally(DiscreteOutcomeSpace.of("abc"), replicates=5)
>>> counter.count(["a", "c", "a", "z", "a"])
(3, 0, 1)
"""

from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable

from equidist.core.errors import ConfigurationError, UnknownOutcomeError
from equidist.core.random_variable import RandomVariable
from equidist.stats.schemes.discrete.model import DiscreteOutcomeSpace, OutcomeTally

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplingTally:
    """Counts outcomes of repeated, independent trials of a random variable."""

    space: DiscreteOutcomeSpace[Any]
    replicates: int

    def __post_init__(self) -> None:
        if self.replicates < 1:
            raise ConfigurationError(f"replicates must be >= 1, got {self.replicates}")

    def tally(self, rv: RandomVariable[Any]) -> RandomVariable[OutcomeTally]:
        """Random variable yielding the outcome counts of `replicates` trials."""
        return rv.fork().replicate(self.replicates).map(self.count)

    def count(self, samples: Iterable[Any]) -> OutcomeTally:
        """Count `samples` per declared outcome, in declaration order."""
        counts = Counter(samples)
        tally = tuple(counts.pop(value, 0) for value in self.space.values)
        if counts:
            dropped = sum(counts.values())
            if self.space.strict:
                unknown = sorted(map(repr, counts))[:5]
                raise UnknownOutcomeError(
                    f"{dropped} sample(s) outside the declared outcome space, e.g. {', '.join(unknown)}"
                )
            logger.debug(
                "Dropped %d of %d sample(s) outside the declared outcome space",
                dropped,
                dropped + sum(tally),
            )
        return tally
