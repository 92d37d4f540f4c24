"""Simulation engine for the Linus's Law CA."""

from enum import Enum
from typing import List, Dict, Optional, TYPE_CHECKING, Any

from .grid import GridMap
from .agent import Agent, BehaviorProfile
from .rng import RandomSource
from .selector import NeighborhoodSelector
from .edit import EditModel
from .metrics import MetricsSnapshot, compute_metrics
from .state import SimulationState, AgentSnapshot, SimulationSummary
from ..config import validate_config

if TYPE_CHECKING:
    from ..config import SimulationConfig


class SimulationPhase(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    TERMINATED = "terminated"


class SimulationStateError(RuntimeError):
    """Raised when the engine is driven from the wrong phase."""


class SimulationEngine:
    """
    Orchestrates the discrete-time simulation loop.

    Owns the whole world: grid, agents, random streams and clock.
    Lifecycle: construct (validates the configuration), setup() to build
    the world, step() until is_finished(). Stepping a terminated world
    raises SimulationStateError.
    """

    def __init__(self, config: "SimulationConfig"):
        validate_config(config)
        self.config = config
        self.phase = SimulationPhase.UNINITIALIZED
        self.tick = 0

        self.selector = NeighborhoodSelector(
            config.selection.radius,
            config.selection.prioritized,
            config.selection.creation_priority
        )
        self.edit_model = EditModel(config.quality.error_cap)

        self.rng: Optional[RandomSource] = None
        self.grid: Optional[GridMap] = None
        self.agents: List[Agent] = []
        self.metrics: Optional[MetricsSnapshot] = None
        self.summary: Optional[SimulationSummary] = None

    def setup(self) -> None:
        """Build grid and population and reset the clock."""
        cfg = self.config
        self.rng = RandomSource(cfg.seed)
        self.tick = 0
        self.summary = None

        self.grid = GridMap(cfg.grid.width, cfg.grid.height,
                            cfg.quality.error_ceiling, cfg.grid.torus)
        self.grid.exclude_random(cfg.grid.existence_ratio, self.rng)

        self.agents = []
        self._spawn_agents()

        self.metrics = compute_metrics(self.grid, self.tick)
        self.phase = SimulationPhase.RUNNING

    def _spawn_agents(self) -> None:
        """Create every class's agents on random existing cells."""
        existing = self.grid.existing_positions()
        total = sum(b.count for b in self.config.behaviors)

        if self.config.rng_streams == "per_agent":
            streams = self.rng.spawn(total)
        else:
            streams = [self.rng] * total

        agent_id = 1
        for spec in self.config.behaviors:
            behavior = BehaviorProfile.from_config(spec)
            for _ in range(spec.count):
                if existing:
                    position = existing[self.rng.integer(len(existing))]
                else:
                    position = (self.rng.integer(self.grid.width),
                                self.rng.integer(self.grid.height))
                self.agents.append(Agent(
                    agent_id=agent_id,
                    position=position,
                    behavior=behavior,
                    frequency=spec.frequency,
                    rng=streams[agent_id - 1]
                ))
                agent_id += 1

    def step(self) -> SimulationState:
        """
        Execute one tick.

        1. Every agent performs `frequency` select+move / edit pairs
        2. Refresh display bands
        3. Recompute metrics
        4. Advance the clock; terminate once it passes the horizon
        """
        if self.phase is SimulationPhase.UNINITIALIZED:
            raise SimulationStateError("setup() must be called before step()")
        if self.phase is SimulationPhase.TERMINATED:
            raise SimulationStateError(
                f"simulation terminated at tick {self.tick}")

        for agent in self.agents:
            for _ in range(agent.frequency):
                self._act(agent)

        self.grid.refresh_display()
        self.metrics = compute_metrics(self.grid, self.tick)
        state = self._create_state_snapshot()

        self.tick += 1
        if self.tick > self.config.horizon:
            self.summary = self._summarize()
            self.phase = SimulationPhase.TERMINATED
        return state

    def _act(self, agent: Agent) -> None:
        """One select+move followed by one edit attempt."""
        selection = self.selector.select(agent, self.grid, agent.rng)
        if selection is None:
            return
        if self.selector.should_move(agent, selection):
            agent.move_to(selection.position)
        if not self.grid.exists_at(*agent.position):
            return
        outcome = self.edit_model.attempt(self.grid, agent.position,
                                          agent.behavior, agent.rng)
        agent.record_edit(outcome.accepted)

    def run(self) -> SimulationSummary:
        """Step until the horizon is passed and return the final summary."""
        if self.phase is SimulationPhase.UNINITIALIZED:
            self.setup()
        while not self.is_finished():
            self.step()
        return self.summary

    def _create_state_snapshot(self) -> SimulationState:
        """Create snapshot of current simulation state."""
        agent_snapshots = [
            AgentSnapshot(
                agent_id=a.id,
                x=a.position[0],
                y=a.position[1],
                behavior=a.behavior.name,
                edits_accepted=a.edits_accepted,
                moves=a.moves
            )
            for a in self.agents
        ]
        return SimulationState(
            tick=self.tick,
            agents=agent_snapshots,
            quality=self.grid.quality.copy(),
            version=self.grid.version.copy(),
            display=self.grid.display.copy(),
            metrics=self.metrics
        )

    def _summarize(self) -> SimulationSummary:
        metrics = compute_metrics(self.grid, self.tick)
        return SimulationSummary(
            ticks=self.tick,
            mapped_count=metrics.mapped_count,
            mean_quality=metrics.mean_quality,
            mean_version=metrics.mean_version
        )

    def is_finished(self) -> bool:
        """Check if simulation has terminated."""
        return self.phase is SimulationPhase.TERMINATED

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the simulation."""
        attempted = sum(a.edits_attempted for a in self.agents)
        accepted = sum(a.edits_accepted for a in self.agents)
        moves = sum(a.moves for a in self.agents)
        return {
            'total_ticks': self.tick,
            'agents_total': len(self.agents),
            'edits_attempted': attempted,
            'edits_accepted': accepted,
            'acceptance_rate': accepted / attempted if attempted > 0 else 0,
            'moves': moves,
            'mapped': self.metrics.mapped_count if self.metrics else 0,
            'mean_quality': self.metrics.mean_quality if self.metrics else 0,
            'mean_version': self.metrics.mean_version if self.metrics else 0,
        }
