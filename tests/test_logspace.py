"""
Tests for log-space arithmetic.
"""

import math

import pytest

from equidist.stats.common.logspace import log1m_exp, log_sum_exp


class TestLogSumExp:
    def test_equal_inputs(self):
        assert log_sum_exp(1.5, 1.5) == 1.5 + math.log(2.0)

    @pytest.mark.parametrize("a,b", [(0.0, -1.0), (-3.0, 2.0), (10.0, 9.5)])
    def test_matches_naive_formula(self, a, b):
        assert log_sum_exp(a, b) == pytest.approx(math.log(math.exp(a) + math.exp(b)))

    def test_dominant_argument(self):
        assert log_sum_exp(0.0, -800.0) == 0.0
        assert log_sum_exp(-800.0, 0.0) == 0.0

    def test_very_negative_inputs_do_not_underflow(self):
        # naive log(exp(a) + exp(b)) would be log(0) here
        result = log_sum_exp(-1000.0, -1001.0)
        assert math.isfinite(result)
        assert result == pytest.approx(-1000.0 + math.log1p(math.exp(-1.0)))

    def test_both_very_negative_and_equal(self):
        assert log_sum_exp(-1e6, -1e6) == pytest.approx(-1e6 + math.log(2.0))

    def test_negative_infinity(self):
        assert log_sum_exp(-math.inf, 0.0) == 0.0
        assert log_sum_exp(-math.inf, -math.inf) == -math.inf

    def test_symmetric(self):
        assert log_sum_exp(-2.0, -7.0) == log_sum_exp(-7.0, -2.0)


class TestLog1mExp:
    @pytest.mark.parametrize("x", [-1e-10, -0.1, -0.69, -0.7, -5.0, -50.0])
    def test_matches_naive_formula(self, x):
        assert log1m_exp(x) == pytest.approx(math.log(1.0 - math.exp(x)), rel=1e-6)

    def test_zero(self):
        assert log1m_exp(0.0) == -math.inf

    def test_positive_rejected(self):
        with pytest.raises(ValueError):
            log1m_exp(0.5)
