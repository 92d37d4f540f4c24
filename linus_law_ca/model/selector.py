"""Neighborhood-weighted target selection."""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING

from .grid import GridMap
from .rng import RandomSource

if TYPE_CHECKING:
    from .agent import Agent


WEIGHT_TOTAL = 100.0
DRAW_RANGE = 100


@dataclass(frozen=True)
class Selection:
    position: Tuple[int, int]
    weight: Optional[float]  # None in uniform mode


def attractiveness(grid: GridMap, candidates: List[Tuple[int, int]],
                   creation_priority: float) -> np.ndarray:
    """
    Weight of each candidate as a target.

    Unmapped cells weigh creation_priority; mapped cells follow
    0.01 ** (1 - quality / ceiling), from 0.01 for a perfect cell up to 1
    for a cell still at the ceiling.
    """
    if not candidates:
        return np.zeros(0)
    xs = np.array([p[0] for p in candidates])
    ys = np.array([p[1] for p in candidates])
    quality = grid.quality[ys, xs]
    version = grid.version[ys, xs]
    mapped = 0.01 ** (1.0 - quality / grid.error_ceiling)
    return np.where(version == 0, creation_priority, mapped)


def normalize(weights: np.ndarray) -> np.ndarray:
    """Scale weights to sum to 100; an all-zero vector is returned as is."""
    total = weights.sum()
    if total > 0:
        return weights * (WEIGHT_TOTAL / total)
    return weights


def draw_threshold(rng: RandomSource) -> int:
    """Uniform integer in [0, 100), redrawn once if it comes up 0."""
    k = rng.integer(DRAW_RANGE)
    if k == 0:
        k = rng.integer(DRAW_RANGE)
    return k


def select_weighted(weights: np.ndarray, rng: RandomSource) -> int:
    """
    Index of the candidate picked by a cumulative walk over sorted weights.

    Candidates are sorted ascending by weight (ties keep their original
    order) and the first one whose running total reaches the threshold is
    chosen; the heaviest candidate is chosen if the total never does.
    """
    k = draw_threshold(rng)
    order = np.argsort(weights, kind='stable')
    cumulative = np.cumsum(weights[order])
    i = int(np.searchsorted(cumulative, k, side='left'))
    if i >= len(order):
        i = len(order) - 1
    return int(order[i])


def select_uniform(n: int, rng: RandomSource) -> int:
    return rng.integer(n)


class NeighborhoodSelector:
    """Picks the next target of an agent among its neighborhood."""

    def __init__(self, radius: int, prioritized: bool,
                 creation_priority: float):
        self.radius = radius
        self.prioritized = prioritized
        self.creation_priority = creation_priority

    def select(self, agent: "Agent", grid: GridMap,
               rng: RandomSource) -> Optional[Selection]:
        """Return the chosen target, or None if no candidate exists."""
        candidates = grid.neighborhood(*agent.position, self.radius)
        if not candidates:
            return None

        if not self.prioritized:
            return Selection(candidates[select_uniform(len(candidates), rng)],
                             None)

        weights = normalize(attractiveness(grid, candidates,
                                           self.creation_priority))
        i = select_weighted(weights, rng)
        return Selection(candidates[i], float(weights[i]))

    @staticmethod
    def should_move(agent: "Agent", selection: Selection) -> bool:
        """Holding classes stay put when they land on a zero weight."""
        if selection.weight == 0 and agent.behavior.hold_on_zero_weight:
            return False
        return True
