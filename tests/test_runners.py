"""
Tests for repeated-trial runners.
"""

import pytest

from equidist.api.equivalence import equivalence_oracle
from equidist.core.errors import ConfigurationError
from equidist.kernel.distributions import bernoulli
from equidist.runtime.runners import RepeatedTrialRunner


def factory(trial):
    return equivalence_oracle([False, True], replicates=200, threshold=0.9, seeds=1, base_seed=trial)


class TestRepeatedTrialRunner:
    def test_run_and_history(self):
        runner = RepeatedTrialRunner(factory, trials=3)
        results = runner.run(bernoulli(0.5), bernoulli(0.5))
        assert len(results) == 3
        assert all(r.equivalent for r in results)
        assert len(runner.get_results_history()) == 3

    def test_summary(self):
        runner = RepeatedTrialRunner(factory, trials=2)
        runner.run(bernoulli(0.02), bernoulli(0.98))
        summary = runner.get_summary()
        assert summary["total_checks"] == 2
        assert summary["equivalent_count"] == 0
        assert summary["paths"] == ["statistical"]

    def test_reset(self):
        runner = RepeatedTrialRunner(factory, trials=2)
        runner.run(bernoulli(0.5), bernoulli(0.5))
        runner.reset()
        assert runner.get_results_history() == []

    def test_factory_receives_trial_number(self):
        seen = []

        def recording_factory(trial):
            seen.append(trial)
            return factory(trial)

        RepeatedTrialRunner(recording_factory, trials=3).run(bernoulli(0.5), bernoulli(0.5))
        assert seen == [0, 1, 2]

    def test_invalid_trials(self):
        with pytest.raises(ConfigurationError):
            RepeatedTrialRunner(factory, trials=0)
