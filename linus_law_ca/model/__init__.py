"""Model package for the Linus's Law CA simulation."""

from .rng import RandomSource
from .grid import GridMap
from .agent import Agent, BehaviorProfile
from .selector import NeighborhoodSelector, Selection
from .edit import EditModel, EditOutcome
from .metrics import MetricsSnapshot, compute_metrics
from .state import AgentSnapshot, SimulationState, SimulationSummary
from .engine import SimulationEngine, SimulationPhase, SimulationStateError

__all__ = [
    'RandomSource',
    'GridMap',
    'Agent',
    'BehaviorProfile',
    'NeighborhoodSelector',
    'Selection',
    'EditModel',
    'EditOutcome',
    'MetricsSnapshot',
    'compute_metrics',
    'AgentSnapshot',
    'SimulationState',
    'SimulationSummary',
    'SimulationEngine',
    'SimulationPhase',
    'SimulationStateError',
]
