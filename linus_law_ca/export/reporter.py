"""Summary report generation for the Linus's Law CA simulation."""

from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import SimulationState, SimulationSummary


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: str, seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.step_metrics: List[Dict] = []
        self.half_mapped_tick: Optional[int] = None
        self.best_mean_quality: Optional[float] = None

    def update(self, state: "SimulationState") -> None:
        """Accumulate metrics per tick."""
        metrics = state.metrics
        self.step_metrics.append(metrics.as_row())

        if (self.half_mapped_tick is None and metrics.existing_count > 0
                and metrics.unmapped_percent < 50.0):
            self.half_mapped_tick = metrics.tick

        if metrics.mapped_count > 0:
            if (self.best_mean_quality is None
                    or metrics.mean_quality < self.best_mean_quality):
                self.best_mean_quality = metrics.mean_quality

    def generate_summary(self, summary: "SimulationSummary",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        existing = self.step_metrics[-1]['existing'] if self.step_metrics else 0
        mapped_pct = (summary.mapped_count / existing * 100) if existing > 0 else 0
        half_mapped = (str(self.half_mapped_tick)
                       if self.half_mapped_tick is not None else 'never')
        best = (f"{self.best_mean_quality:.2f} m"
                if self.best_mean_quality is not None else 'n/a')

        lines = [
            "",
            "=" * 80,
            "                    LINUS'S LAW CA SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "FINAL FIGURES",
            "-" * 40,
            f"Total Ticks:           {summary.ticks}",
            f"Mapped Objects:        {summary.mapped_count} / {existing} ({mapped_pct:.1f}%)",
            f"Mean Quality:          {summary.mean_quality:.2f} m (mapped objects)",
            f"Mean Version:          {summary.mean_version:.3f} (all objects)",
            "",
            "MILESTONES",
            "-" * 40,
            f"Half Mapped At Tick:   {half_mapped}",
            f"Best Mean Quality:     {best}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'metrics_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
