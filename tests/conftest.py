from dataclasses import dataclass, field
from typing import List

import pytest

from equidist.core.rng import SplitMix, StateSpace
from equidist.stats.schemes.discrete.model import Confidence, DiscreteOutcomeSpace


@dataclass(frozen=True)
class RecordingState:
    """Generator state with a fixed output that logs every split."""

    label: str
    output: int
    log: List[str] = field(default_factory=list, compare=False)

    def split(self):
        self.log.append(self.label)
        return self, self

    def next_long(self):
        return self, self.output


@pytest.fixture
def seed():
    return SplitMix.from_seed(20211)


@pytest.fixture
def boolean_space():
    return DiscreteOutcomeSpace.boolean()


@pytest.fixture
def confidence():
    return Confidence(replicates=2000, threshold=0.9)


@pytest.fixture
def states():
    return StateSpace.splitmix(2)
