"""State snapshot dataclasses for the Linus's Law CA simulation."""

from dataclasses import dataclass
from typing import List, Dict
import numpy as np

from .metrics import MetricsSnapshot


@dataclass(frozen=True)
class AgentSnapshot:
    """Immutable snapshot of an agent's state at a given tick."""
    agent_id: int
    x: int
    y: int
    behavior: str
    edits_accepted: int
    moves: int


@dataclass(frozen=True)
class SimulationSummary:
    """Final figures reported when the horizon is passed."""
    ticks: int
    mapped_count: int
    mean_quality: float   # over mapped objects
    mean_version: float   # over all trackable objects


@dataclass
class SimulationState:
    """Complete snapshot of simulation state at a given tick."""
    tick: int
    agents: List[AgentSnapshot]
    quality: np.ndarray   # copy of the quality layer
    version: np.ndarray   # copy of the version layer
    display: np.ndarray   # copy of the display bands
    metrics: MetricsSnapshot

    def to_csv_rows(self) -> List[Dict]:
        """Convert to CSV-compatible format (one row per tick)."""
        return [self.metrics.as_row()]
