"""
equidist.core.errors
====================

Exception hierarchy. Every error is a subclass of a builtin so callers
can keep catching `ValueError` / `TypeError` where that is enough.
"""


class ConfigurationError(ValueError):
    """Invalid experiment configuration (confidence, outcome space, seeds)."""


class UnknownOutcomeError(ValueError):
    """A strict outcome space observed a value it does not declare."""


class ContextTypeError(TypeError):
    """A value stored under a context key does not match the key's type."""
