"""
equidist.reporting
==================

Read-side summaries over ledgers.
"""
