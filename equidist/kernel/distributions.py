"""
equidist.kernel.distributions
=============================

Samplers for common distributions, built only from `RandomVariable`
primitives. Each is a small closed-form transform of uniform draws.

Capabilities that depend on another capability receive it explicitly at
construction (`Gumbel(exponential=...)`), so alternative samplers can be
swapped in without touching callers.

Examples
--------
>>> from equidist.core.rng import SplitMix
>>> from equidist.kernel.distributions import bernoulli, uniform
>>> u = uniform().simulate(SplitMix.from_seed(1))
>>> 0.0 <= u < 1.0
True
>>> bernoulli(1.0).simulate(SplitMix.from_seed(1))
True
"""

from __future__ import annotations
import bisect
import math
from dataclasses import dataclass, field
from itertools import accumulate
from typing import Protocol, Sequence

from equidist.core.errors import ConfigurationError
from equidist.core.random_variable import RandomVariable, next_long

_DOUBLE_UNIT = 1.0 / (1 << 53)


def uniform() -> RandomVariable[float]:
    """Uniform float in [0, 1) from the top 53 bits of one draw."""
    return next_long().map(lambda bits: (bits >> 11) * _DOUBLE_UNIT)


def bernoulli(p: float) -> RandomVariable[bool]:
    """True with probability `p`."""
    if not 0.0 <= p <= 1.0:
        raise ConfigurationError(f"Bernoulli probability must be in [0, 1], got {p}")
    return uniform().map(lambda u: u < p)


def categorical(weights: Sequence[float]) -> RandomVariable[int]:
    """Index `i` with probability proportional to `weights[i]`."""
    if not weights or any(w < 0 for w in weights):
        raise ConfigurationError("categorical weights must be non-empty and non-negative")
    cumulative = list(accumulate(float(w) for w in weights))
    total = cumulative[-1]
    if total <= 0:
        raise ConfigurationError("categorical weights must not all be zero")
    last = len(cumulative) - 1

    def pick(u: float) -> int:
        # bisect_right skips zero-weight entries sharing a cumulative value
        return min(bisect.bisect_right(cumulative, u * total), last)

    return uniform().map(pick)


class Exponential(Protocol):
    def standard(self) -> RandomVariable[float]: ...

    def __call__(self, rate: float) -> RandomVariable[float]: ...


@dataclass(frozen=True)
class InverseTransformExponential:
    """Exponential sampling by inverting the CDF of a uniform draw."""

    def standard(self) -> RandomVariable[float]:
        return uniform().map(lambda u: -math.log1p(-u))

    def __call__(self, rate: float) -> RandomVariable[float]:
        if rate <= 0:
            raise ConfigurationError(f"Exponential rate must be positive, got {rate}")
        return self.standard().map(lambda e: e / rate)


@dataclass(frozen=True)
class Gumbel:
    """Gumbel sampling as `-log(E)` for a standard exponential `E`."""

    exponential: Exponential = field(default_factory=InverseTransformExponential)

    def standard(self) -> RandomVariable[float]:
        # E == 0.0 only when the uniform draw is exactly 0
        return self.exponential.standard().map(
            lambda e: -math.log(e) if e > 0.0 else math.inf
        )

    def __call__(self, location: float, scale: float) -> RandomVariable[float]:
        if scale <= 0:
            raise ConfigurationError(f"Gumbel scale must be positive, got {scale}")
        return self.standard().map(lambda g: g * scale + location)
