"""Edit model: distribution-based quality proposals, improvement-only."""

from dataclasses import dataclass
from typing import Tuple
from scipy import stats

from .agent import BehaviorProfile
from .grid import GridMap
from .rng import RandomSource


@dataclass(frozen=True)
class EditOutcome:
    accepted: bool
    proposed: float
    previous: float


def gamma_parameters(mean: float, variance: float) -> Tuple[float, float]:
    """Shape and rate of the gamma distribution with given mean/variance."""
    if variance <= 0:
        raise ValueError(f"variance must be positive, got {variance}")
    return mean * mean / variance, mean / variance


class EditModel:
    """
    Proposes a new positional error and keeps it only if it is better.

    A proposal above the cap is redrawn exactly once; the second draw is
    used as is.
    """

    def __init__(self, error_cap: float = 45.0):
        self.error_cap = error_cap

    def propose(self, behavior: BehaviorProfile, rng: RandomSource) -> float:
        shape, rate = gamma_parameters(behavior.mean_error, behavior.var_error)
        if shape == 0:
            return 0.0  # Gamma(0, .) is a point mass at 0
        value = rng.gamma(shape, rate)
        if value > self.error_cap:
            value = rng.gamma(shape, rate)
        return value

    def attempt(self, grid: GridMap, position: Tuple[int, int],
                behavior: BehaviorProfile, rng: RandomSource) -> EditOutcome:
        x, y = position
        previous = float(grid.quality[y, x])
        proposed = self.propose(behavior, rng)
        accepted = proposed < previous
        if accepted:
            grid.apply_edit(x, y, proposed)
        return EditOutcome(accepted, proposed, previous)

    def expected_proposal_mean(self, behavior: BehaviorProfile) -> float:
        """
        Mean of propose() under the single-redraw rule.

        With X1, X2 i.i.d. gamma and p = P(X > cap), the proposal is X1
        when X1 <= cap and X2 otherwise, so its mean is
        E[X; X <= cap] + p * E[X].
        """
        shape, rate = gamma_parameters(behavior.mean_error, behavior.var_error)
        if shape == 0:
            return 0.0
        dist = stats.gamma(a=shape, scale=1.0 / rate)
        p_over = dist.sf(self.error_cap)
        below = dist.expect(lambda v: v, lb=0.0, ub=self.error_cap)
        return float(below + p_over * dist.mean())
