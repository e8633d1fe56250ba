"""
equidist.runtime.decider
========================

Decide whether two random variables describe the same distribution.

`EquivalenceDecider` walks a finite `StateSpace` in order. At every state it
tallies both variables (same incoming state for both) and asks the
`BayesianComparator` whether the tallies could share one generator. The
per-seed verdicts are AND-ed inside the effect context and the loop stops
at the first seed judged unequal, so later seeds are never sampled.

If the effect can collapse the resulting `F[bool]` to a concrete bool, that
bool is the answer. If it cannot (for example the lazy `Deferred` effect),
the statistical result is discarded and the variables are compared
extensionally instead: at every state, `effect.eqv(x.simulate(s), y.simulate(s))`.
That path draws no samples and ignores `Confidence` entirely.

`ExactDecider` runs the extensional comparison on its own. It needs neither
an outcome space nor a confidence, so it also works for continuous
variables.

Statistically inconclusive evidence counts as "equal". Two distributions that
differ only slightly can be declared equivalent; raise `replicates` (or lower
`threshold`) to make that less likely.

Every call to `decide` gets its own `run_id`, written into all ledger
payloads of that call, so repeated checks under one `comparison_id` stay
apart in the audit trail.

Examples
--------
>>> from equidist.core.rng import StateSpace
>>> from equidist.kernel.distributions import bernoulli
>>> from equidist.runtime.decider import EquivalenceDecider
>>> from equidist.stats.schemes.discrete.model import Confidence, DiscreteOutcomeSpace
>>> decider = EquivalenceDecider(
...     states=StateSpace.splitmix(2),
...     space=DiscreteOutcomeSpace.boolean(),
...     confidence=Confidence(replicates=500, threshold=0.9),
... )
>>> decider.are_equivalent(bernoulli(0.1), bernoulli(0.9))
False
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from equidist.core.effects import IDENTITY, Effect, finish, proceed
from equidist.core.names import Namespace
from equidist.core.random_variable import RandomVariable
from equidist.core.rng import StateSpace
from equidist.core.traits import LedgerOps
from equidist.stats.schemes.discrete.comparator import BayesianComparator, Verdict
from equidist.stats.schemes.discrete.model import (
    Confidence,
    DecisionPayload,
    DiscreteOutcomeSpace,
    OutcomeTally,
    TallyPayload,
)
from equidist.stats.schemes.discrete.tally import SamplingTally

logger = logging.getLogger(__name__)

STATISTICAL = "statistical"
EXACT = "exact"


@dataclass
class EquivalenceResult:
    """Outcome of one equivalence check."""

    equivalent: bool
    path: str
    seeds_evaluated: int
    seeds_total: int
    verdicts: List[Verdict] = field(default_factory=list)
    run_id: str = ""


def _new_run_id() -> str:
    return uuid.uuid4().hex[:12]


def _conclude(
    ledger: Optional[LedgerOps], comparison_id: str, result: EquivalenceResult
) -> EquivalenceResult:
    logger.info(
        "Comparison %s: equivalent=%s via %s path (%d/%d seeds)",
        comparison_id,
        result.equivalent,
        result.path,
        result.seeds_evaluated,
        result.seeds_total,
    )
    if ledger is not None:
        decision: DecisionPayload = {
            "run": result.run_id,
            "equivalent": result.equivalent,
            "path": result.path,
            "seeds_evaluated": result.seeds_evaluated,
            "seeds_total": result.seeds_total,
        }
        ledger.emit(
            time_index=str(result.seeds_evaluated),
            comparison_id=comparison_id,
            seed_index="decision",
            topic="equiv:decision",
            body=dict(decision),
            tag="equiv:decision",
        )
    return result


@dataclass
class ExactDecider:
    """
    Extensional equivalence: equal values at every enumerated state.

    Parameters
    ----------
    states : StateSpace
        Finite enumeration of generator states to compare at
    effect : Effect, default=IDENTITY
        Effect context the variables run in; `effect.eqv` compares results
    ledger : LedgerOps, optional
        If given, the decision is appended
    comparison_id : str, optional
        Entity name for ledger records; a random id per check when omitted

    Examples
    --------
    >>> from equidist.core.rng import StateSpace
    >>> from equidist.kernel.distributions import Gumbel
    >>> exact = ExactDecider(StateSpace.splitmix(3))
    >>> exact.are_equivalent(Gumbel()(0.0, 1.0), Gumbel().standard())
    True
    """

    states: StateSpace
    effect: Effect = IDENTITY
    ledger: Optional[LedgerOps] = None
    comparison_id: Optional[str] = None

    def are_equivalent(self, x: RandomVariable[Any], y: RandomVariable[Any]) -> bool:
        return self.decide(x, y).equivalent

    def decide(self, x: RandomVariable[Any], y: RandomVariable[Any]) -> EquivalenceResult:
        comparison_id = self.comparison_id or f"cmp-{_new_run_id()}"
        equivalent, evaluated = self.compare(x, y)
        result = EquivalenceResult(
            equivalent=equivalent,
            path=EXACT,
            seeds_evaluated=evaluated,
            seeds_total=len(self.states),
            run_id=_new_run_id(),
        )
        return _conclude(self.ledger, comparison_id, result)

    def compare(self, x: RandomVariable[Any], y: RandomVariable[Any]) -> Tuple[bool, int]:
        """(all states agree, states evaluated); stops at the first disagreement."""
        evaluated = 0
        for state in self.states:
            evaluated += 1
            if not self.effect.eqv(x.simulate(state, self.effect), y.simulate(state, self.effect)):
                return False, evaluated
        return True, evaluated


@dataclass
class EquivalenceDecider:
    """
    Two-tier distributional equivalence oracle.

    Parameters
    ----------
    states : StateSpace
        Finite enumeration of generator states to compare at
    space : DiscreteOutcomeSpace
        Declared outcomes (and prior) of the variables under comparison
    confidence : Confidence
        Replicates per seed and decision threshold
    effect : Effect, default=IDENTITY
        Effect context the variables run in
    ledger : LedgerOps, optional
        If given, every tally, posterior, verdict and decision is appended
    comparison_id : str, optional
        Entity name for ledger records; a random id per check when omitted
    """

    states: StateSpace
    space: DiscreteOutcomeSpace[Any]
    confidence: Confidence
    effect: Effect = IDENTITY
    ledger: Optional[LedgerOps] = None
    comparison_id: Optional[str] = None

    def __post_init__(self) -> None:
        self._tally = SamplingTally(self.space, self.confidence.replicates)
        self._comparator = BayesianComparator(self.confidence.threshold)

    def are_equivalent(self, x: RandomVariable[Any], y: RandomVariable[Any]) -> bool:
        """True iff `x` and `y` are judged to describe the same distribution."""
        return self.decide(x, y).equivalent

    def decide(self, x: RandomVariable[Any], y: RandomVariable[Any]) -> EquivalenceResult:
        run_id = _new_run_id()
        comparison_id = self.comparison_id or f"cmp-{run_id}"
        verdicts: List[Verdict] = []

        outcome = self.effect.collapse(self._all_seeds_equal(x, y, verdicts, comparison_id, run_id))
        if outcome is not None:
            result = EquivalenceResult(
                equivalent=bool(outcome),
                path=STATISTICAL,
                seeds_evaluated=len(verdicts),
                seeds_total=len(self.states),
                verdicts=verdicts,
                run_id=run_id,
            )
        else:
            logger.debug(
                "Effect %r cannot be collapsed; comparing extensionally", self.effect
            )
            equivalent, evaluated = ExactDecider(self.states, self.effect).compare(x, y)
            result = EquivalenceResult(
                equivalent=equivalent,
                path=EXACT,
                seeds_evaluated=evaluated,
                seeds_total=len(self.states),
                run_id=run_id,
            )
        return _conclude(self.ledger, comparison_id, result)

    # ---- statistical path ----

    def _all_seeds_equal(
        self,
        x: RandomVariable[Any],
        y: RandomVariable[Any],
        verdicts: List[Verdict],
        comparison_id: str,
        run_id: str,
    ) -> Any:
        """`F[bool]`: lazy AND of per-seed verdicts, stopping at the first failure."""
        effect = self.effect
        states = self.states

        def step(index: int) -> Any:
            if index >= len(states):
                return effect.pure(finish(True))
            verdict = self._seed_verdict(index, x, y, verdicts, comparison_id, run_id)
            return effect.map(verdict, lambda equal: proceed(index + 1) if equal else finish(False))

        return effect.tail_rec_m(0, step)

    def _seed_verdict(
        self,
        index: int,
        x: RandomVariable[Any],
        y: RandomVariable[Any],
        verdicts: List[Verdict],
        comparison_id: str,
        run_id: str,
    ) -> Any:
        effect = self.effect
        state = self.states[index]
        tally_x = self._tally.tally(x).simulate(state, effect)

        def with_x(cx: OutcomeTally) -> Any:
            tally_y = self._tally.tally(y).simulate(state, effect)
            return effect.map(
                tally_y, lambda cy: self._judge(index, cx, cy, verdicts, comparison_id, run_id)
            )

        return effect.flat_map(tally_x, with_x)

    def _judge(
        self,
        index: int,
        cx: OutcomeTally,
        cy: OutcomeTally,
        verdicts: List[Verdict],
        comparison_id: str,
        run_id: str,
    ) -> bool:
        verdict = self._comparator.compare(cx, cy, self.space.prior)
        verdicts.append(verdict)
        logger.debug(
            "Seed %d: tallies %s vs %s, posterior of difference %.4g (threshold %g)",
            index,
            cx,
            cy,
            verdict.posterior,
            verdict.threshold,
        )
        if self.ledger is not None:
            self._record_seed(self.ledger, comparison_id, run_id, index, cx, cy, verdict)
        return verdict.equal

    def _record_seed(
        self,
        ledger: LedgerOps,
        comparison_id: str,
        run_id: str,
        index: int,
        cx: OutcomeTally,
        cy: OutcomeTally,
        verdict: Verdict,
    ) -> None:
        tallies: TallyPayload = {
            "run": run_id,
            "seed": index,
            "x": list(cx),
            "y": list(cy),
            "replicates": self.confidence.replicates,
        }
        ledger.write_event(
            time_index=str(index),
            namespace=Namespace.TALLIES,
            kind="observed",
            comparison_id=comparison_id,
            seed_index=str(index),
            payload_type="SeedTally",
            payload=dict(tallies),
            tag="tally:discrete",
        )
        ledger.write_event(
            time_index=str(index),
            namespace=Namespace.STATS,
            kind="updated",
            comparison_id=comparison_id,
            seed_index=str(index),
            payload_type="DMPosterior",
            payload=dict(verdict.posterior_payload(index, run_id)),
            tag="stat:dm-posterior",
        )
        ledger.emit(
            time_index=str(index),
            comparison_id=comparison_id,
            seed_index=str(index),
            topic="equiv:seed",
            body=dict(verdict.verdict_payload(index, run_id)),
            tag="equiv:seed",
        )
