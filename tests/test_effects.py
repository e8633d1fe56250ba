"""
Tests for effect contexts.
"""

from equidist.core.effects import IDENTITY, Deferred, Thunk, finish, proceed


class TestIdentity:
    def test_tail_rec_m_runs_long_loops(self):
        assert IDENTITY.tail_rec_m(0, lambda n: finish(n) if n == 200_000 else proceed(n + 1)) == 200_000

    def test_collapse_is_the_value(self):
        assert IDENTITY.collapse(True) is True
        assert IDENTITY.collapse(False) is False

    def test_eqv(self):
        assert IDENTITY.eqv((1, 2), (1, 2))
        assert not IDENTITY.eqv(1, 2)


class TestThunk:
    def test_later_is_not_evaluated_until_forced(self):
        calls = []
        t = Thunk.later(lambda: calls.append(1) or 7).map(lambda v: v * 2)
        assert calls == []
        assert t.force() == 14
        assert calls == [1]

    def test_deep_bind_chain_forces_without_recursion(self):
        t = Thunk.now(0)
        for _ in range(100_000):
            t = t.flat_map(lambda v: Thunk.now(v + 1))
        assert t.force() == 100_000

    def test_deep_right_nested_chain(self):
        def count(n):
            if n == 0:
                return Thunk.now("done")
            return Thunk.now(n).flat_map(lambda k: count(k - 1))

        assert count(50_000).force() == "done"


class TestDeferred:
    def test_has_no_collapse(self):
        assert Deferred().collapse(Thunk.now(True)) is None

    def test_tail_rec_m_is_lazy(self):
        calls = []

        def step(n):
            calls.append(n)
            return Thunk.now(finish(n) if n == 3 else proceed(n + 1))

        loop = Deferred().tail_rec_m(0, step)
        assert calls == []
        assert loop.force() == 3
        assert calls == [0, 1, 2, 3]

    def test_eqv_forces_both_sides(self):
        effect = Deferred()
        assert effect.eqv(Thunk.later(lambda: "a"), Thunk.now("a"))
        assert not effect.eqv(Thunk.now(1), Thunk.now(2))
