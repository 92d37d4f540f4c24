"""Contributor agents and their behavior classes."""

from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING

from .rng import RandomSource

if TYPE_CHECKING:
    from ..config import BehaviorConfig


@dataclass(frozen=True)
class BehaviorProfile:
    """
    Parameter record of one contributor class.

    mean_error / var_error describe the gamma distribution of the
    positional error a contributor of this class measures. When
    hold_on_zero_weight is set, an agent whose weighted draw lands on a
    zero-attractiveness cell stays where it is for that action.
    """
    name: str
    mean_error: float
    var_error: float
    hold_on_zero_weight: bool = False

    @classmethod
    def from_config(cls, spec: "BehaviorConfig") -> "BehaviorProfile":
        return cls(name=spec.name,
                   mean_error=spec.mean_error,
                   var_error=spec.var_error,
                   hold_on_zero_weight=spec.hold_on_zero_weight)


class Agent:
    """Mobile contributor that edits the map cell it stands on."""

    def __init__(self, agent_id: int,
                 position: Tuple[int, int],
                 behavior: BehaviorProfile,
                 frequency: int,
                 rng: RandomSource):
        self.id = agent_id
        self.position = position
        self.behavior = behavior
        self.frequency = frequency  # action pairs per tick
        self.rng = rng

        self.moves = 0
        self.edits_attempted = 0
        self.edits_accepted = 0

    def move_to(self, position: Tuple[int, int]) -> None:
        if position != self.position:
            self.moves += 1
        self.position = position

    def record_edit(self, accepted: bool) -> None:
        self.edits_attempted += 1
        if accepted:
            self.edits_accepted += 1

    def __repr__(self) -> str:
        return (f"Agent(id={self.id}, pos={self.position}, "
                f"class={self.behavior.name})")
