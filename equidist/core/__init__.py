"""
equidist.core
=============

Kernel of the package: generator states, the extensible context, effect
contexts, the `RandomVariable` computation type, and ledger contracts.

Examples
--------
>>> from equidist.core.random_variable import RandomVariable
>>> from equidist.core.rng import SplitMix
>>> RandomVariable.pure(1).map(lambda v: v + 1).simulate(SplitMix.from_seed(0))
2
"""
