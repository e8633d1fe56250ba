"""
equidist.stats.common
=====================

Common statistical methods and utilities, independent of any scheme.
"""
