import pytest

from linus_law_ca.config import (
    GridConfig, QualityConfig, SelectionConfig, SimulationConfig,
    casual_behavior, senior_behavior,
)
from linus_law_ca.model.agent import BehaviorProfile

CASUAL = BehaviorProfile.from_config(casual_behavior())
SENIOR = BehaviorProfile.from_config(senior_behavior())


class ScriptedRandom:
    """Stand-in random source replaying fixed draws in order."""

    def __init__(self, integers=(), gammas=()):
        self.integers = list(integers)
        self.gammas = list(gammas)

    def integer(self, high):
        value = self.integers.pop(0)
        assert 0 <= value < high
        return value

    def gamma(self, shape, rate):
        return self.gammas.pop(0)


def make_config(width=10, height=10, existence_ratio=1.0, radius=1,
                prioritized=True, creation_priority=0.5, casual=5,
                casual_frequency=1, senior=0, senior_frequency=1,
                horizon=10, seed=1234, rng_streams="shared", torus=False):
    behaviors = [
        casual_behavior(casual, casual_frequency),
        senior_behavior(senior, senior_frequency),
    ]
    return SimulationConfig(
        grid=GridConfig(width, height, existence_ratio, torus),
        selection=SelectionConfig(radius, prioritized, creation_priority),
        quality=QualityConfig(),
        behaviors=behaviors,
        horizon=horizon,
        seed=seed,
        rng_streams=rng_streams,
        csv_enabled=False,
        snapshot_enabled=False,
    )


@pytest.fixture
def scripted():
    return ScriptedRandom
