"""
equidist.stats.common.logspace
==============================

Numerically stable arithmetic on log-probabilities.

Examples
--------
>>> import math
>>> from equidist.stats.common.logspace import log_sum_exp
>>> math.isclose(log_sum_exp(0.0, 0.0), math.log(2.0))
True
>>> math.isclose(log_sum_exp(-1000.0, -1000.0), -1000.0 + math.log(2.0))
True
"""

from __future__ import annotations
import math

LOG_2 = math.log(2.0)


def log_sum_exp(a: float, b: float) -> float:
    """Return log(exp(a) + exp(b)) without overflow or underflow.

    Args:
        a, b: log-scale values (may be -inf)

    Returns:
        max(a, b) + log1p(exp(-|a - b|)); exactly a + log(2) when a == b.

    Note:
        The equal case is handled separately so that two -inf inputs give
        -inf instead of nan from (-inf) - (-inf).
    """
    if a == b:
        return a + LOG_2
    hi, lo = (a, b) if a > b else (b, a)
    return hi + math.log1p(math.exp(lo - hi))


def log1m_exp(x: float) -> float:
    """Return log(1 - exp(x)) for x <= 0.

    Uses log(-expm1(x)) near zero and log1p(-exp(x)) further out, which keeps
    full precision over the whole range.
    """
    if x > 0:
        raise ValueError(f"log1m_exp is defined for x <= 0, got {x}")
    if x == 0:
        return -math.inf
    if x > -LOG_2:
        return math.log(-math.expm1(x))
    return math.log1p(-math.exp(x))
