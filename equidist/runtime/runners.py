"""
equidist.runtime.runners
========================

Runners that execute many equivalence checks, for studying how often the
statistical path accepts or rejects.

A single check is deterministic for a fixed state space. To estimate error
rates, `RepeatedTrialRunner` builds a fresh decider for every trial (the
factory receives the trial number and should hand out disjoint seeds) and
records each result.

Examples
--------
>>> from equidist.api.equivalence import equivalence_oracle
>>> from equidist.kernel.distributions import bernoulli
>>> from equidist.runtime.runners import RepeatedTrialRunner
>>> runner = RepeatedTrialRunner(
...     lambda t: equivalence_oracle([False, True], replicates=200, threshold=0.9,
...                                  seeds=1, base_seed=t),
...     trials=3,
... )
>>> runner.acceptance_rate(bernoulli(0.05), bernoulli(0.95))
0.0
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List

from equidist.core.errors import ConfigurationError
from equidist.core.random_variable import RandomVariable
from equidist.runtime.decider import EquivalenceDecider, EquivalenceResult

logger = logging.getLogger(__name__)


class RepeatedTrialRunner:
    """
    Runs the same comparison under many independent deciders.

    Useful for simulation studies of false-equal / false-unequal rates.
    """

    def __init__(self, decider_factory: Callable[[int], EquivalenceDecider], trials: int):
        if trials < 1:
            raise ConfigurationError(f"trials must be >= 1, got {trials}")
        self.decider_factory = decider_factory
        self.trials = trials
        self._results_history: List[EquivalenceResult] = []

    def run(self, x: RandomVariable[Any], y: RandomVariable[Any]) -> List[EquivalenceResult]:
        """Run every trial and return its results."""
        results = [self.decider_factory(t).decide(x, y) for t in range(self.trials)]
        self._results_history.extend(results)
        return results

    def acceptance_rate(self, x: RandomVariable[Any], y: RandomVariable[Any]) -> float:
        """Fraction of trials that judged `x` and `y` equivalent."""
        results = self.run(x, y)
        accepted = sum(1 for r in results if r.equivalent)
        logger.info("Accepted %d of %d trials", accepted, len(results))
        return accepted / len(results)

    def get_summary(self) -> Dict[str, Any]:
        """Summary over every result collected so far."""
        history = self._results_history
        return {
            "runner_type": "repeated_trials",
            "total_checks": len(history),
            "equivalent_count": sum(1 for r in history if r.equivalent),
            "paths": sorted({r.path for r in history}),
        }

    def get_results_history(self) -> List[EquivalenceResult]:
        return self._results_history.copy()

    def reset(self) -> None:
        self._results_history.clear()
