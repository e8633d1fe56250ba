"""
equidist.kernel
===============

Distribution samplers expressed with `RandomVariable` primitives.
"""
