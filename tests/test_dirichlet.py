"""
Tests for Dirichlet-multinomial marginal likelihoods.
"""

import math

import pytest
from scipy.stats import betabinom

from equidist.stats.common.dirichlet import (
    dirichlet_multinomial_log_pmf,
    joint_dirichlet_multinomial_log_pmf,
    log_marginals,
    posterior_difference_probability,
)


class TestSingleTally:
    def test_beta_binomial_closed_form(self):
        # outcomes [H, T], prior [1, 1], counts [3, 2]
        expected = math.log(math.comb(5, 3)) + (
            math.lgamma(4) + math.lgamma(3) - math.lgamma(7)
        ) - (math.lgamma(1) + math.lgamma(1) - math.lgamma(2))
        assert dirichlet_multinomial_log_pmf([3, 2], [1.0, 1.0]) == pytest.approx(expected)
        assert dirichlet_multinomial_log_pmf([3, 2], [1.0, 1.0]) == pytest.approx(math.log(1 / 6))

    @pytest.mark.parametrize("k,n,a,b", [(3, 5, 1.0, 1.0), (0, 7, 0.5, 2.0), (12, 20, 3.0, 1.5)])
    def test_matches_scipy_beta_binomial(self, k, n, a, b):
        assert dirichlet_multinomial_log_pmf([k, n - k], [a, b]) == pytest.approx(
            betabinom.logpmf(k, n, a, b)
        )

    def test_empty_tally_has_probability_one(self):
        assert dirichlet_multinomial_log_pmf([0, 0, 0], [1.0, 2.0, 3.0]) == pytest.approx(0.0)

    def test_pmf_sums_to_one_over_three_categories(self):
        n = 4
        total = sum(
            math.exp(dirichlet_multinomial_log_pmf([i, j, n - i - j], [0.7, 1.0, 2.5]))
            for i in range(n + 1)
            for j in range(n + 1 - i)
        )
        assert total == pytest.approx(1.0)

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            dirichlet_multinomial_log_pmf([1, 2], [1.0, 1.0, 1.0])

    def test_non_positive_prior(self):
        with pytest.raises(ValueError):
            dirichlet_multinomial_log_pmf([1, 2], [1.0, 0.0])


class TestJointTallies:
    def test_joint_with_empty_second_tally_reduces_to_single(self):
        assert joint_dirichlet_multinomial_log_pmf([4, 1], [0, 0], [1.0, 1.0]) == pytest.approx(
            dirichlet_multinomial_log_pmf([4, 1], [1.0, 1.0])
        )

    def test_joint_closed_form(self):
        # C(n1,x1) C(n2,x2) / ((N+1) C(N,X)) under a uniform prior
        expected = math.comb(5, 3) * math.comb(4, 1) / (10 * math.comb(9, 4))
        assert math.exp(
            joint_dirichlet_multinomial_log_pmf([3, 2], [1, 3], [1.0, 1.0])
        ) == pytest.approx(expected)

    def test_joint_is_symmetric(self):
        a = joint_dirichlet_multinomial_log_pmf([7, 2, 1], [3, 3, 4], [1.0, 0.5, 2.0])
        b = joint_dirichlet_multinomial_log_pmf([3, 3, 4], [7, 2, 1], [1.0, 0.5, 2.0])
        assert a == pytest.approx(b)


class TestPosterior:
    def test_swapping_tallies_is_bit_identical(self):
        assert log_marginals([10, 3], [6, 7], [1.0, 1.0]) == log_marginals([6, 7], [10, 3], [1.0, 1.0])
        assert posterior_difference_probability(
            [10, 3], [6, 7], [1.0, 1.0]
        ) == posterior_difference_probability([6, 7], [10, 3], [1.0, 1.0])

    def test_posterior_in_unit_interval(self):
        for c1, c2 in [([0, 10], [10, 0]), ([5, 5], [5, 5]), ([1, 0], [0, 0])]:
            p = posterior_difference_probability(c1, c2, [1.0, 1.0])
            assert 0.0 <= p <= 1.0

    def test_opposite_tallies_are_different(self):
        assert posterior_difference_probability([200, 1800], [1800, 200], [1.0, 1.0]) > 0.999

    def test_matches_direct_formula(self):
        same, different = log_marginals([12, 8], [9, 11], [1.0, 1.0])
        expected = 1 - math.exp(same) / (math.exp(same) + math.exp(different))
        assert posterior_difference_probability([12, 8], [9, 11], [1.0, 1.0]) == pytest.approx(expected)
