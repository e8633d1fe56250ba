"""
equidist.stats.schemes.discrete.model
=====================================

Configuration objects and typed payloads for the discrete equivalence scheme.

- `Confidence`: replicate count and decision threshold
- `DiscreteOutcomeSpace`: declared outcomes and their Dirichlet prior
- TypedDict payload contracts for ledger records

Examples
--------
>>> from equidist.stats.schemes.discrete.model import Confidence, DiscreteOutcomeSpace
>>> Confidence(replicates=2000, threshold=0.9).replicates
2000
>>> DiscreteOutcomeSpace.of(["H", "T"]).prior
(1.0, 1.0)
>>> DiscreteOutcomeSpace.boolean().values
(False, True)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Optional, Tuple, TypedDict, TypeVar

from equidist.core.errors import ConfigurationError

A = TypeVar("A")

OutcomeTally = Tuple[int, ...]


# --- Typed payloads used in ledger records ---


class TallyPayload(TypedDict):
    run: str
    seed: int
    x: List[int]
    y: List[int]
    replicates: int


class PosteriorPayload(TypedDict):
    run: str
    seed: int
    same_log_marginal: float
    different_log_marginal: float
    posterior: float


class SeedVerdictPayload(TypedDict):
    run: str
    seed: int
    equal: bool
    posterior: float
    threshold: float


class DecisionPayload(TypedDict):
    run: str
    equivalent: bool
    path: str
    seeds_evaluated: int
    seeds_total: int


# --- Configuration ---


@dataclass(frozen=True)
class Confidence:
    """
    Sensitivity of the statistical equivalence test.

    Attributes:
        replicates: Monte Carlo sample size per variable per seed
        threshold: posterior probability of difference above which two
            variables are declared unequal
    """

    replicates: int
    threshold: float

    def __post_init__(self) -> None:
        if isinstance(self.replicates, bool) or not isinstance(self.replicates, int):
            raise ConfigurationError(f"replicates must be an int, got {self.replicates!r}")
        if self.replicates < 1:
            raise ConfigurationError(f"replicates must be >= 1, got {self.replicates}")
        if not 0.0 < self.threshold < 1.0:
            raise ConfigurationError(f"threshold must be in (0, 1), got {self.threshold}")


@dataclass(frozen=True)
class DiscreteOutcomeSpace(Generic[A]):
    """
    The declared finite outcomes of a random variable and a Dirichlet prior.

    Attributes:
        values: distinct, hashable outcomes in a fixed order
        prior: positive Dirichlet concentration per outcome (all ones by default)
        strict: if True, sampling an undeclared outcome is an error instead
            of being dropped from the tally
    """

    values: Tuple[A, ...]
    prior: Tuple[float, ...]
    strict: bool = False

    def __post_init__(self) -> None:
        if not self.values:
            raise ConfigurationError("outcome space must declare at least one value")
        if len(self.prior) != len(self.values):
            raise ConfigurationError(
                f"prior has {len(self.prior)} entries for {len(self.values)} outcomes"
            )
        if len(set(self.values)) != len(self.values):
            raise ConfigurationError("outcome values must be distinct")
        if any(not a > 0 for a in self.prior):
            raise ConfigurationError("Dirichlet prior entries must be positive")

    @classmethod
    def of(
        cls,
        values: Iterable[A],
        prior: Optional[Iterable[float]] = None,
        strict: bool = False,
    ) -> "DiscreteOutcomeSpace[A]":
        vals = tuple(values)
        alpha = tuple(float(a) for a in prior) if prior is not None else (1.0,) * len(vals)
        return cls(vals, alpha, strict)

    @classmethod
    def boolean(cls) -> "DiscreteOutcomeSpace[bool]":
        return cls.of([False, True])  # type: ignore[return-value]

    @classmethod
    def unit(cls) -> "DiscreteOutcomeSpace[None]":
        return cls.of([None])  # type: ignore[return-value]

    def index_of(self, value: Any) -> int:
        return self.values.index(value)

    def __len__(self) -> int:
        return len(self.values)
