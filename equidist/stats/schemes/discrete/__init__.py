"""
Discrete-outcome equivalence scheme.

**Module Organization:**

- `model`: `Confidence`, `DiscreteOutcomeSpace` and ledger payload schemas
- `tally`: Monte Carlo outcome counting (`SamplingTally`)
- `comparator`: Bayesian model comparison of two tallies (`BayesianComparator`)

Example Usage
-------------
>>> from equidist.stats.schemes.discrete.model import DiscreteOutcomeSpace
>>> from equidist.stats.schemes.discrete.comparator import BayesianComparator
>>> space = DiscreteOutcomeSpace.of(["H", "T"])
>>> BayesianComparator(threshold=0.9).compare((30, 30), (31, 29), space.prior).equal
True
"""
