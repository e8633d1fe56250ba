"""
Statistical methods behind the equivalence oracle.

1. **Common** (equidist.stats.common):
   Generic, reusable numerics: log-space arithmetic and Dirichlet-multinomial
   marginal likelihoods.

2. **Schemes** (equidist.stats.schemes):
   Problem-specific applications of the common methods. The `discrete`
   scheme tallies sampled outcomes and compares tallies.

Example:
--------
>>> from equidist.stats.common.dirichlet import posterior_difference_probability
>>> posterior_difference_probability([5, 5], [5, 5], [1.0, 1.0]) < 0.5
True
"""
