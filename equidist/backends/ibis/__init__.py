"""
equidist.backends.ibis
======================

SQL-backed ledger through ibis-framework (DuckDB by default).
"""
