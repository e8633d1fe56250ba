"""
equidist.runtime
================

Execution layer: the equivalence decider and runners that repeat it.

Key Components
--------------
- `EquivalenceDecider`: statistical comparison with an exact fallback
- `ExactDecider`: value-by-value comparison at every state, no sampling
- `EquivalenceResult`: outcome of a single check
- `RepeatedTrialRunner`: acceptance rates over many independent checks
"""
