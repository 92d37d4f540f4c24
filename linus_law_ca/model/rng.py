"""Seedable random source shared by setup and agent actions."""

import numpy as np
from typing import List, Optional


class RandomSource:
    """
    Thin wrapper over a numpy Generator exposing the draws the model needs.

    Every draw goes through this object so that a run is fully determined
    by the seed and the order in which draws are consumed.
    """

    def __init__(self, seed: Optional[int] = None,
                 seed_sequence: Optional[np.random.SeedSequence] = None):
        if seed_sequence is None:
            seed_sequence = np.random.SeedSequence(seed)
        self.seed_sequence = seed_sequence
        self.generator = np.random.default_rng(seed_sequence)

    def integer(self, high: int) -> int:
        """Uniform integer in [0, high)."""
        return int(self.generator.integers(0, high))

    def gamma(self, shape: float, rate: float) -> float:
        """Gamma sample parameterised by shape and rate (1 / scale)."""
        return float(self.generator.gamma(shape, 1.0 / rate))

    def sample_without_replacement(self, population: int, k: int) -> np.ndarray:
        return self.generator.choice(population, size=k, replace=False)

    def spawn(self, n: int) -> List["RandomSource"]:
        """Independent child streams derived from this source's seed."""
        return [RandomSource(seed_sequence=child)
                for child in self.seed_sequence.spawn(n)]
