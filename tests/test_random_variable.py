"""
Tests for the random variable interpreter.
"""

import pytest

from equidist.core.effects import Deferred, Thunk, finish, proceed
from equidist.core.random_variable import (
    RandomVariable,
    bind,
    next_long,
    pure,
    split_state,
)
from equidist.core.rng import SplitMix


class TestConstruction:
    def test_pure_ignores_state(self, seed):
        final, _, value = pure("v").run(seed)
        assert value == "v"
        assert final == seed

    def test_next_long_advances_state(self, seed):
        final, _, value = next_long().run(seed)
        expected_state, expected_bits = seed.next_long()
        assert value == expected_bits
        assert final == expected_state

    def test_nothing_runs_before_simulate(self):
        calls = []
        pure(1).map(lambda v: calls.append(v))
        assert calls == []

    def test_same_seed_same_value(self):
        rv = next_long().product(next_long()).map(lambda ab: ab[0] ^ ab[1])
        assert rv.simulate(SplitMix.from_seed(3)) == rv.simulate(SplitMix.from_seed(3))
        assert rv.simulate(SplitMix.from_seed(3)) != rv.simulate(SplitMix.from_seed(4))

    def test_bind_function(self, seed):
        assert bind(pure(2), lambda v: pure(v * 3)).simulate(seed) == 6

    def test_then_keeps_draw_order(self, seed):
        _, first = seed.next_long()
        second_state, _ = seed.next_long()
        _, second = second_state.next_long()
        assert next_long().product(next_long()).simulate(seed) == (first, second)
        assert next_long().then(next_long()).simulate(seed) == second


class TestMonadLaws:
    def test_left_identity(self, seed):
        f = lambda v: next_long().map(lambda b: b + v)  # noqa: E731
        assert pure(5).flat_map(f).simulate(seed) == f(5).simulate(seed)

    def test_right_identity(self, seed):
        assert next_long().flat_map(pure).simulate(seed) == next_long().simulate(seed)

    def test_associativity(self, seed):
        f = lambda v: next_long().map(lambda b: (v, b))  # noqa: E731
        g = lambda p: pure(p[0] ^ p[1])  # noqa: E731
        left = next_long().flat_map(f).flat_map(g)
        right = next_long().flat_map(lambda v: f(v).flat_map(g))
        assert left.simulate(seed) == right.simulate(seed)


class TestStackSafety:
    def test_left_nested_binds(self, seed):
        rv = pure(0)
        for _ in range(100_000):
            rv = rv.flat_map(lambda v: pure(v + 1))
        assert rv.simulate(seed) == 100_000

    def test_right_nested_binds(self, seed):
        def count_down(n):
            if n == 0:
                return pure("bottom")
            return pure(n).flat_map(lambda k: count_down(k - 1))

        assert count_down(100_000).simulate(seed) == "bottom"

    def test_long_draw_chain(self, seed):
        rv = pure(0)
        for _ in range(20_000):
            rv = rv.flat_map(lambda v: next_long().map(lambda b: v + (b & 1)))
        total = rv.simulate(seed)
        assert 0 <= total <= 20_000

    def test_deep_chain_under_deferred(self, seed):
        rv = pure(0)
        for _ in range(100_000):
            rv = rv.map(lambda v: v + 1)
        assert rv.simulate(seed, Deferred()).force() == 100_000

    def test_tail_rec(self, seed):
        rv = RandomVariable.tail_rec(
            0, lambda n: pure(finish(n) if n == 50_000 else proceed(n + 1))
        )
        assert rv.simulate(seed) == 50_000


class TestSplitting:
    def test_split_state_yields_one_half(self, seed):
        yielded, kept = seed.split()
        final, _, value = split_state().run(seed)
        assert value == yielded
        assert final == kept

    def test_fork_runs_on_child_and_resumes_parent(self, seed):
        child, parent = seed.split()
        rv = next_long().fork().product(next_long())
        assert rv.simulate(seed) == (child.next_long()[1], parent.next_long()[1])

    def test_replicate_draws_independent_values(self, seed):
        values = next_long().fork().replicate(50).simulate(seed)
        assert len(values) == 50
        assert len(set(values)) == 50

    def test_replicate_preserves_order(self, seed):
        values = next_long().replicate(3).simulate(seed)
        assert values == next_long().product(next_long()).product(next_long()).map(
            lambda t: (t[0][0], t[0][1], t[1])
        ).simulate(seed)

    def test_replicate_zero(self, seed):
        assert next_long().replicate(0).simulate(seed) == ()

    def test_replicate_negative(self):
        with pytest.raises(ValueError):
            next_long().replicate(-1)


class TestEffects:
    def test_primitive_under_identity(self, seed):
        rv = RandomVariable.primitive(lambda s, ctx: (s, ctx, "raw"))
        assert rv.simulate(seed) == "raw"

    def test_primitive_under_deferred(self, seed):
        rv = RandomVariable.primitive(lambda s, ctx: Thunk.now((s, ctx, 5))).map(lambda v: v + 1)
        result = rv.simulate(seed, Deferred())
        assert isinstance(result, Thunk)
        assert result.force() == 6

    def test_lift_embeds_effect_value(self, seed):
        calls = []
        rv = RandomVariable.lift(Thunk.later(lambda: calls.append(1) or 7))
        result = rv.simulate(seed, Deferred())
        assert calls == []
        assert result.force() == 7

    def test_draws_agree_across_effects(self, seed):
        rv = next_long().product(next_long())
        assert rv.simulate(seed, Deferred()).force() == rv.simulate(seed)

    def test_exceptions_propagate(self, seed):
        rv = next_long().map(lambda _: 1 // 0)
        with pytest.raises(ZeroDivisionError):
            rv.simulate(seed)
        with pytest.raises(ZeroDivisionError):
            rv.simulate(seed, Deferred()).force()

    def test_non_random_variable_rejected(self, seed):
        rv = pure(1).flat_map(lambda _: "not a random variable")
        with pytest.raises(TypeError):
            rv.simulate(seed)
