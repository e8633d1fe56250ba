"""
Tests for Monte Carlo outcome counting.
"""

import logging

import pytest

from equidist.core.errors import ConfigurationError, UnknownOutcomeError
from equidist.core.random_variable import pure
from equidist.kernel.distributions import bernoulli, categorical
from equidist.stats.schemes.discrete.model import DiscreteOutcomeSpace
from equidist.stats.schemes.discrete.tally import SamplingTally


class TestCount:
    def test_aligned_to_declared_order(self):
        counter = SamplingTally(DiscreteOutcomeSpace.of(["c", "a", "b"]), replicates=4)
        assert counter.count(["a", "b", "a", "a"]) == (0, 3, 1)

    def test_undeclared_values_dropped(self, caplog):
        counter = SamplingTally(DiscreteOutcomeSpace.boolean(), replicates=4)
        with caplog.at_level(logging.DEBUG, logger="equidist.stats.schemes.discrete.tally"):
            assert counter.count([True, None, "x", False]) == (1, 1)
        assert "Dropped 2 of 4" in caplog.text

    def test_strict_space_raises(self):
        counter = SamplingTally(DiscreteOutcomeSpace.of([0, 1], strict=True), replicates=3)
        with pytest.raises(UnknownOutcomeError):
            counter.count([0, 1, 2])

    def test_unknown_outcome_error_is_value_error(self):
        counter = SamplingTally(DiscreteOutcomeSpace.of([0], strict=True), replicates=1)
        with pytest.raises(ValueError):
            counter.count([5])

    def test_invalid_replicates(self):
        with pytest.raises(ConfigurationError):
            SamplingTally(DiscreteOutcomeSpace.boolean(), replicates=0)


class TestTally:
    def test_sums_to_replicates(self, seed, boolean_space):
        tally = SamplingTally(boolean_space, 1000).tally(bernoulli(0.5)).simulate(seed)
        assert sum(tally) == 1000
        assert 400 < tally[1] < 600

    def test_deterministic_per_seed(self, seed):
        counter = SamplingTally(DiscreteOutcomeSpace.of([0, 1, 2]), 300)
        rv = counter.tally(categorical([1, 1, 1]))
        assert rv.simulate(seed) == rv.simulate(seed)

    def test_constant_variable(self, seed, boolean_space):
        assert SamplingTally(boolean_space, 25).tally(pure(True)).simulate(seed) == (0, 25)

    def test_undeclared_samples_shrink_the_tally(self, seed, boolean_space):
        assert SamplingTally(boolean_space, 10).tally(pure(None)).simulate(seed) == (0, 0)

    def test_unit_space(self, seed):
        assert SamplingTally(DiscreteOutcomeSpace.unit(), 7).tally(pure(None)).simulate(seed) == (7,)
