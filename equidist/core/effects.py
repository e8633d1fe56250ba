"""
equidist.core.effects
=====================

Effect contexts that random variables run inside.

A random variable maps `(state, context)` to `F[(state, context, value)]`
for some effect `F`. The core never inspects `F` directly; it goes through
an `Effect` instance:

- `pure`, `flat_map`, `map`: sequencing
- `tail_rec_m`: a stack-safe monadic loop (the interpreter is built on it)
- `collapse`: turn `F[bool]` into a concrete bool, or None when `F` cannot
  be run to a definite result
- `eqv`: equality of two effect-wrapped values

Two effects ship with the package:

- `Identity`: `F[A] = A`, evaluated eagerly. Collapses to the bool itself.
- `Deferred`: `F[A]` is a suspended `Thunk`. It has no concrete collapse, so
  the equivalence decider falls back to exact comparison for it.

Examples
--------
>>> from equidist.core.effects import IDENTITY, Deferred, Thunk, proceed, finish
>>> IDENTITY.tail_rec_m(0, lambda n: finish(n) if n == 3 else proceed(n + 1))
3
>>> t = Deferred().map(Thunk.now(20), lambda v: v + 1)
>>> t.force()
21
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, NamedTuple, Optional


class Step(NamedTuple):
    """One iteration of a `tail_rec_m` loop: keep going, or stop with a value."""

    done: bool
    value: Any


def proceed(value: Any) -> Step:
    return Step(False, value)


def finish(value: Any) -> Step:
    return Step(True, value)


class Effect(ABC):
    """Capability set the core needs from an effect context."""

    @abstractmethod
    def pure(self, value: Any) -> Any:
        """Wrap a plain value."""

    @abstractmethod
    def flat_map(self, fa: Any, f: Callable[[Any], Any]) -> Any:
        """Sequence `fa` with an effectful continuation."""

    @abstractmethod
    def tail_rec_m(self, initial: Any, f: Callable[[Any], Any]) -> Any:
        """Iterate `f` (returning `F[Step]`) until it finishes, without growing the stack."""

    def map(self, fa: Any, f: Callable[[Any], Any]) -> Any:
        return self.flat_map(fa, lambda a: self.pure(f(a)))

    def collapse(self, fb: Any) -> Optional[bool]:
        """Concrete bool for `fb`, or None when this effect cannot be run."""
        return None

    def eqv(self, fa: Any, fb: Any) -> bool:
        return bool(fa == fb)


class Identity(Effect):
    """The trivial effect: values are used as they are."""

    def pure(self, value: Any) -> Any:
        return value

    def flat_map(self, fa: Any, f: Callable[[Any], Any]) -> Any:
        return f(fa)

    def map(self, fa: Any, f: Callable[[Any], Any]) -> Any:
        return f(fa)

    def tail_rec_m(self, initial: Any, f: Callable[[Any], Any]) -> Any:
        step = f(initial)
        while not step.done:
            step = f(step.value)
        return step.value

    def collapse(self, fb: Any) -> Optional[bool]:
        return bool(fb)

    def __repr__(self) -> str:
        return "Identity()"


IDENTITY = Identity()


class Thunk:
    """A suspended computation, evaluated on `force()`.

    Chains of `flat_map` are run by an explicit loop, so forcing a thunk
    built from many binds does not recurse.
    """

    __slots__ = ("_kind", "_a", "_b")

    _NOW, _LATER, _BIND = 0, 1, 2

    def __init__(self, kind: int, a: Any, b: Any = None) -> None:
        self._kind = kind
        self._a = a
        self._b = b

    @classmethod
    def now(cls, value: Any) -> "Thunk":
        return cls(cls._NOW, value)

    @classmethod
    def later(cls, compute: Callable[[], Any]) -> "Thunk":
        return cls(cls._LATER, compute)

    def flat_map(self, f: Callable[[Any], "Thunk"]) -> "Thunk":
        return Thunk(Thunk._BIND, self, f)

    def map(self, f: Callable[[Any], Any]) -> "Thunk":
        return self.flat_map(lambda a: Thunk.now(f(a)))

    def force(self) -> Any:
        current: Thunk = self
        stack: list = []
        while True:
            if current._kind == Thunk._BIND:
                stack.append(current._b)
                current = current._a
                continue
            if current._kind == Thunk._NOW:
                value = current._a
            else:
                value = current._a()
            if not stack:
                return value
            current = stack.pop()(value)

    def __repr__(self) -> str:
        return "Thunk(...)"


class Deferred(Effect):
    """Lazy effect: every value is a `Thunk` that nothing forces implicitly."""

    def pure(self, value: Any) -> Thunk:
        return Thunk.now(value)

    def flat_map(self, fa: Thunk, f: Callable[[Any], Thunk]) -> Thunk:
        return fa.flat_map(f)

    def map(self, fa: Thunk, f: Callable[[Any], Any]) -> Thunk:
        return fa.map(f)

    def tail_rec_m(self, initial: Any, f: Callable[[Any], Thunk]) -> Thunk:
        def run() -> Any:
            step = f(initial).force()
            while not step.done:
                step = f(step.value).force()
            return step.value

        return Thunk.later(run)

    def eqv(self, fa: Thunk, fb: Thunk) -> bool:
        return bool(fa.force() == fb.force())

    def __repr__(self) -> str:
        return "Deferred()"
