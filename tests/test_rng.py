"""
Tests for SplitMix64 states and state spaces.
"""

import pytest

from equidist.core.errors import ConfigurationError
from equidist.core.rng import GOLDEN_GAMMA, MASK64, RandomGeneratorState, SplitMix, StateSpace


class TestSplitMix:
    def test_reference_output_for_seed_zero(self):
        _, bits = SplitMix.from_seed(0).next_long()
        assert bits == 0xE220A8397B1DCDAF

    def test_matches_the_published_splitmix64_stream(self):
        state = SplitMix.from_seed(0)
        outputs = []
        for _ in range(4):
            state, bits = state.next_long()
            outputs.append(bits)
        assert outputs == [
            0xE220A8397B1DCDAF,
            0x6E789E6AA1B965F4,
            0x06C45D188009454F,
            0xF88BB8A8724C81EC,
        ]

    def test_next_long_is_deterministic(self):
        s = SplitMix.from_seed(123)
        assert s.next_long() == s.next_long()

    def test_successive_outputs_differ(self):
        s = SplitMix.from_seed(123)
        s1, a = s.next_long()
        _, b = s1.next_long()
        assert a != b
        assert 0 <= a <= MASK64 and 0 <= b <= MASK64

    def test_split_is_deterministic_and_distinct(self):
        s = SplitMix.from_seed(9)
        assert s.split() == s.split()
        child, parent = s.split()
        assert child != parent
        assert child.next_long()[1] != parent.next_long()[1]

    def test_split_gamma_is_odd(self):
        child, parent = SplitMix.from_seed(5).split()
        assert child.gamma % 2 == 1
        assert parent.gamma == GOLDEN_GAMMA

    def test_from_seed_reduces_modulo(self):
        assert SplitMix.from_seed(-1).seed == MASK64
        assert SplitMix.from_seed(1 << 64) == SplitMix.from_seed(0)

    @pytest.mark.parametrize("seed,gamma", [(-1, GOLDEN_GAMMA), (1 << 64, GOLDEN_GAMMA), (0, 2), (0, 0)])
    def test_invalid_state_rejected(self, seed, gamma):
        with pytest.raises(ConfigurationError):
            SplitMix(seed, gamma)

    def test_satisfies_protocol(self):
        assert isinstance(SplitMix.from_seed(0), RandomGeneratorState)


class TestStateSpace:
    def test_splitmix_enumeration(self):
        space = StateSpace.splitmix(3, base_seed=10)
        assert len(space) == 3
        assert list(space) == [SplitMix.from_seed(s) for s in (10, 11, 12)]
        assert space[1] == SplitMix.from_seed(11)

    def test_order_is_stable(self):
        assert list(StateSpace.splitmix(5)) == list(StateSpace.splitmix(5))

    def test_empty_rejected(self):
        with pytest.raises(ConfigurationError):
            StateSpace.of([])
        with pytest.raises(ConfigurationError):
            StateSpace.splitmix(0)

    def test_duplicates_rejected(self):
        with pytest.raises(ConfigurationError):
            StateSpace.from_seeds([1, 2, 1])

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            StateSpace.of([])
