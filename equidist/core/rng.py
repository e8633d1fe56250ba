"""
equidist.core.rng
=================

Generator-state contract and a concrete splittable generator.

A generator state is an opaque, immutable value. Identical states always
produce identical outputs and identical splits, so any computation that
threads a state through is reproducible from its seed.

- `RandomGeneratorState`: the protocol the core relies on.
- `SplitMix`: SplitMix64 state (seed, gamma); `split` and `next_long` are O(1).
- `StateSpace`: a finite, ordered enumeration of states for exhaustive checks.

The generator is SplittableRandom as published by Steele, Lea and Flood
("Fast splittable pseudorandom number generators", OOPSLA 2014): a
Weyl sequence with increment `gamma`, finalised by the MurmurHash3-style
64-bit mixer, and `split` deriving a fresh odd gamma.

Examples
--------
>>> from equidist.core.rng import SplitMix, StateSpace
>>> s = SplitMix.from_seed(42)
>>> s.next_long() == s.next_long()
True
>>> child, parent = s.split()
>>> child != parent
True
>>> len(StateSpace.splitmix(3))
3
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Protocol, Tuple, TypeVar, runtime_checkable

from equidist.core.errors import ConfigurationError

S = TypeVar("S", bound="RandomGeneratorState")

MASK64 = (1 << 64) - 1
GOLDEN_GAMMA = 0x9E3779B97F4A7C15


@runtime_checkable
class RandomGeneratorState(Protocol):
    """Deterministic, splittable pseudo-random state."""

    def split(self: S) -> Tuple[S, S]:
        """Return two states with independent, non-overlapping futures."""
        ...

    def next_long(self: S) -> Tuple[S, int]:
        """Return the successor state and the next 64-bit output."""
        ...


def _mix64(z: int) -> int:
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
    return z ^ (z >> 31)


def _mix_gamma(z: int) -> int:
    z = ((z ^ (z >> 33)) * 0xFF51AFD7ED558CCD) & MASK64
    z = ((z ^ (z >> 33)) * 0xC4CEB9FE1A85EC53) & MASK64
    z = (z ^ (z >> 33)) | 1
    # gammas with too few bit transitions give poorly mixed streams
    if bin(z ^ (z >> 1)).count("1") < 24:
        z ^= 0xAAAAAAAAAAAAAAAA
    return z


@dataclass(frozen=True)
class SplitMix:
    """SplitMix64 generator state.

    Attributes:
        seed: current 64-bit counter
        gamma: odd 64-bit increment
    """

    seed: int
    gamma: int = GOLDEN_GAMMA

    def __post_init__(self) -> None:
        if not 0 <= self.seed <= MASK64:
            raise ConfigurationError(f"seed must fit in 64 bits, got {self.seed}")
        if not 0 < self.gamma <= MASK64 or self.gamma % 2 == 0:
            raise ConfigurationError(f"gamma must be an odd 64-bit value, got {self.gamma}")

    @classmethod
    def from_seed(cls, seed: int) -> "SplitMix":
        """Create a state from any integer seed (reduced modulo 2**64)."""
        return cls(seed & MASK64, GOLDEN_GAMMA)

    def next_long(self) -> Tuple["SplitMix", int]:
        seed = (self.seed + self.gamma) & MASK64
        return SplitMix(seed, self.gamma), _mix64(seed)

    def split(self) -> Tuple["SplitMix", "SplitMix"]:
        s1 = (self.seed + self.gamma) & MASK64
        s2 = (s1 + self.gamma) & MASK64
        return SplitMix(_mix64(s1), _mix_gamma(s2)), SplitMix(s2, self.gamma)


@dataclass(frozen=True)
class StateSpace:
    """
    A finite, ordered enumeration of generator states.

    Every state is visited exactly once, always in the same order. The
    equivalence decider requires one of these: it compares two random
    variables at each listed state.

    Parameters
    ----------
    states : tuple
        Distinct generator states, in visiting order
    """

    states: Tuple[Any, ...]

    def __post_init__(self) -> None:
        if not self.states:
            raise ConfigurationError("StateSpace must contain at least one state")
        try:
            distinct = len(set(self.states))
        except TypeError:
            # unhashable states cannot be checked for duplicates
            distinct = len(self.states)
        if distinct != len(self.states):
            raise ConfigurationError("StateSpace must not contain duplicate states")

    @classmethod
    def of(cls, states: Iterable[Any]) -> "StateSpace":
        return cls(tuple(states))

    @classmethod
    def from_seeds(cls, seeds: Iterable[int]) -> "StateSpace":
        """Enumerate `SplitMix` states built from integer seeds."""
        return cls(tuple(SplitMix.from_seed(s) for s in seeds))

    @classmethod
    def splitmix(cls, n: int, base_seed: int = 0) -> "StateSpace":
        """Enumerate `n` SplitMix states seeded `base_seed .. base_seed + n - 1`."""
        if n < 1:
            raise ConfigurationError(f"StateSpace size must be positive, got {n}")
        return cls.from_seeds(range(base_seed, base_seed + n))

    def __iter__(self) -> Iterator[Any]:
        return iter(self.states)

    def __len__(self) -> int:
        return len(self.states)

    def __getitem__(self, index: int) -> Any:
        return self.states[index]
