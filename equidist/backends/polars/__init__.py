"""
equidist.backends.polars
========================

Polars-backed ledger and its file sinks/sources.
"""
