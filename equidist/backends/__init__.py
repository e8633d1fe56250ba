"""
equidist.backends
=================

Concrete ledger storage: `polars` (in-memory frame with file sinks) and
`ibis` (SQL table, DuckDB by default).
"""
