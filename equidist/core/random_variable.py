"""
equidist.core.random_variable
=============================

Seed-driven, state-threading random computations.

A `RandomVariable` describes how to compute a value from a generator state
and an `ExtensibleContext`, inside some effect context `F`:

    (state, context) -> F[(state, context, value)]

Values are built from a handful of primitives (`pure`, `next_long`,
`split_state`, `get_extra`, `set_extra`, `lift`, `primitive`) and composed
with `flat_map`. Nothing runs until `simulate` (or `run`) is called, and the
same seed always gives the same value for a deterministic effect.

The interpreter is a loop over an explicit continuation stack, driven by the
effect's own `tail_rec_m`. Bind chains of any length, nested to the left or
to the right, run without growing the Python call stack.

Examples
--------
>>> from equidist.core.random_variable import RandomVariable, next_long
>>> from equidist.core.rng import SplitMix
>>> rv = next_long().map(lambda bits: bits % 6 + 1)
>>> rv.simulate(SplitMix.from_seed(7)) == rv.simulate(SplitMix.from_seed(7))
True
>>> RandomVariable.pure("fixed").simulate(SplitMix.from_seed(0))
'fixed'
"""

from __future__ import annotations
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

from equidist.core.context import ExtensibleContext, Key
from equidist.core.effects import IDENTITY, Effect, Step, finish, proceed

A = TypeVar("A")
B = TypeVar("B")
V = TypeVar("V")

# (state, context) -> (state, context, value), no effect involved
StateFn = Callable[[Any, ExtensibleContext], Tuple[Any, ExtensibleContext, Any]]


class RandomVariable(Generic[A]):
    """A random computation producing an `A`.

    Instances are immutable trees of nodes; use the constructors and
    combinators below rather than subclassing.
    """

    __slots__ = ()

    # ---- constructors ----

    @staticmethod
    def pure(value: B) -> "RandomVariable[B]":
        """A computation that ignores state and context and yields `value`."""
        return _Pure(value)

    @staticmethod
    def state(fn: StateFn) -> "RandomVariable[Any]":
        """Lift a plain state transition `(state, ctx) -> (state, ctx, value)`."""
        return _State(fn)

    @staticmethod
    def primitive(fn: Callable[[Any, ExtensibleContext], Any]) -> "RandomVariable[Any]":
        """Lift an effectful step `(state, ctx) -> F[(state, ctx, value)]`."""
        return _Primitive(fn)

    @staticmethod
    def lift(fa: Any) -> "RandomVariable[Any]":
        """Embed an effect-wrapped value `F[A]`, leaving state and context alone."""
        return _Lift(fa)

    @staticmethod
    def tail_rec(initial: Any, f: Callable[[Any], "RandomVariable[Step]"]) -> "RandomVariable[Any]":
        """Monadic loop: run `f` until it yields a finished `Step`."""

        def again(step: Step) -> RandomVariable[Any]:
            if step.done:
                return _Pure(step.value)
            return f(step.value).flat_map(again)

        return f(initial).flat_map(again)

    # ---- combinators ----

    def flat_map(self, f: Callable[[A], "RandomVariable[B]"]) -> "RandomVariable[B]":
        return _FlatMap(self, f)

    def map(self, f: Callable[[A], B]) -> "RandomVariable[B]":
        return _FlatMap(self, lambda a: _Pure(f(a)))

    def then(self, other: "RandomVariable[B]") -> "RandomVariable[B]":
        """Run `self`, discard its value, then run `other`."""
        return _FlatMap(self, lambda _: other)

    def product(self, other: "RandomVariable[B]") -> "RandomVariable[Tuple[A, B]]":
        return self.flat_map(lambda a: other.map(lambda b: (a, b)))

    def fork(self) -> "RandomVariable[A]":
        """Run on a freshly split child state; the caller continues on the other half."""

        def enter(state: Any, ctx: ExtensibleContext) -> Tuple[Any, ExtensibleContext, Any]:
            child, parent = state.split()
            return child, ctx, parent

        def body(parent: Any) -> RandomVariable[A]:
            return self.flat_map(
                lambda a: _State(lambda _child, ctx: (parent, ctx, a))
            )

        return _State(enter).flat_map(body)

    def replicate(self, n: int) -> "RandomVariable[Tuple[A, ...]]":
        """Run `self` `n` times in sequence and collect the values."""
        if n < 0:
            raise ValueError(f"replicate count must be non-negative, got {n}")

        # accumulator is a cons list (value, rest) so no step mutates shared data
        def body(acc: Tuple[Any, int]) -> RandomVariable[Step]:
            items, remaining = acc
            if remaining == 0:
                return _Pure(finish(_unroll(items)))
            return self.map(lambda a: proceed(((a, items), remaining - 1)))

        return RandomVariable.tail_rec((None, n), body)

    # ---- interpretation ----

    def run(
        self,
        seed: Any,
        effect: Effect = IDENTITY,
        ctx: Optional[ExtensibleContext] = None,
    ) -> Any:
        """Run from `seed` and return `F[(final_state, final_context, value)]`."""
        start = (self, seed, ExtensibleContext.empty() if ctx is None else ctx, None)
        return effect.tail_rec_m(start, lambda machine: _advance(machine, effect))

    def simulate(self, seed: Any, effect: Effect = IDENTITY) -> Any:
        """Run from `seed` with an empty context and return `F[value]`.

        The final state and context are discarded.
        """
        return effect.map(self.run(seed, effect), lambda result: result[2])


class _Pure(RandomVariable[A]):
    __slots__ = ("value",)

    def __init__(self, value: A) -> None:
        self.value = value


class _State(RandomVariable[A]):
    __slots__ = ("fn",)

    def __init__(self, fn: StateFn) -> None:
        self.fn = fn


class _Primitive(RandomVariable[A]):
    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[Any, ExtensibleContext], Any]) -> None:
        self.fn = fn


class _Lift(RandomVariable[A]):
    __slots__ = ("fa",)

    def __init__(self, fa: Any) -> None:
        self.fa = fa


class _FlatMap(RandomVariable[B]):
    __slots__ = ("source", "f")

    def __init__(self, source: RandomVariable[Any], f: Callable[[Any], RandomVariable[B]]) -> None:
        self.source = source
        self.f = f


def _advance(machine: Tuple[Any, Any, ExtensibleContext, Any], effect: Effect) -> Any:
    """Run pure steps inline until an effectful node or the end is reached.

    `machine` is (node, state, context, continuations) where continuations is
    a cons list (f, rest). Returns `F[Step]` for the effect's loop.
    """
    node, state, ctx, stack = machine
    while True:
        if isinstance(node, _FlatMap):
            stack = (node.f, stack)
            node = node.source
            continue
        if isinstance(node, _Pure):
            value = node.value
        elif isinstance(node, _State):
            state, ctx, value = node.fn(state, ctx)
        elif isinstance(node, _Primitive):
            fa = node.fn(state, ctx)
            return effect.map(fa, lambda r, k=stack: proceed((_Pure(r[2]), r[0], r[1], k)))
        elif isinstance(node, _Lift):
            return effect.map(
                node.fa, lambda a, s=state, c=ctx, k=stack: proceed((_Pure(a), s, c, k))
            )
        else:
            raise TypeError(f"not a RandomVariable: {node!r}")

        if stack is None:
            return effect.pure(finish((state, ctx, value)))
        f, stack = stack
        node = f(value)


def _unroll(items: Any) -> Tuple[Any, ...]:
    out = []
    while items is not None:
        value, items = items
        out.append(value)
    out.reverse()
    return tuple(out)


# ---- primitives ----


def pure(value: A) -> RandomVariable[A]:
    return RandomVariable.pure(value)


def bind(rv: RandomVariable[A], f: Callable[[A], RandomVariable[B]]) -> RandomVariable[B]:
    return rv.flat_map(f)


def next_long() -> RandomVariable[int]:
    """Draw the next 64-bit output from the generator state."""

    def draw(state: Any, ctx: ExtensibleContext) -> Tuple[Any, ExtensibleContext, int]:
        state, bits = state.next_long()
        return state, ctx, bits

    return RandomVariable.state(draw)


def split_state() -> RandomVariable[Any]:
    """Split the current state: continue with one half, yield the other."""

    def split(state: Any, ctx: ExtensibleContext) -> Tuple[Any, ExtensibleContext, Any]:
        yielded, kept = state.split()
        return kept, ctx, yielded

    return RandomVariable.state(split)


def get_extra(key: Key[V]) -> RandomVariable[Optional[V]]:
    """Read `key` from the context threaded through the current `simulate`."""
    return RandomVariable.state(lambda s, ctx: (s, ctx, ctx.lookup(key)))


def set_extra(key: Key[V], value: V) -> RandomVariable[None]:
    """Bind `key` to `value` for the rest of the current `simulate`."""
    return RandomVariable.state(lambda s, ctx: (s, ctx.insert(key, value), None))
