"""
equidist: seed-driven random variables and a distributional equivalence oracle.

Random computations are described as immutable, monadic `RandomVariable`
values: a function of a splittable generator state and an auxiliary context,
run inside an effect context. Because a computation is a pure function of
its seed, the same seed always replays the same draws.

On top of that kernel sits the question property tests keep asking: do two
random variables describe the same distribution? `EquivalenceDecider`
answers it by tallying both variables at every state of a finite state space
and comparing the tallies with a Dirichlet-multinomial Bayes factor; when the
effect cannot be run to a concrete bool it falls back to exact, seed-by-seed
comparison. Every tally, posterior and decision can be appended to a
ledger for later inspection.

Example
-------
>>> import equidist
>>> assert hasattr(equidist, "core")
>>> assert hasattr(equidist, "stats")
"""

from equidist import core, stats  # noqa: F401
from equidist.__version__ import __version__  # noqa: F401
