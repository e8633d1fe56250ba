"""
equidist.api - User-Friendly Facade
===================================

Ready-made entry points that hide the wiring of states, outcome spaces and
confidence settings.

Examples
--------
>>> from equidist.api.equivalence import equivalence_oracle
>>> oracle = equivalence_oracle([False, True], sensitivity="conservative")
>>> oracle.confidence.threshold
0.99
"""
