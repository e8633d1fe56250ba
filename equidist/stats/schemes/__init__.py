"""
equidist.stats.schemes
======================

Scheme-specific statistics built on `equidist.stats.common`.
"""
