"""Visualization and export for the Linus's Law CA simulation."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap, BoundaryNorm
from pathlib import Path
from typing import List, TYPE_CHECKING
from PIL import Image
import io

from ..model.metrics import VERSION_BUCKET_LABELS, QUALITY_BAND_LABELS

if TYPE_CHECKING:
    from ..model.state import SimulationState


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots (quality map + distribution bars)
    - Animated GIF compilation
    """

    # Color scheme, indexed by display band + 1
    BAND_COLORS = [
        '#2C3E50',  # no object
        '#ECF0F1',  # not yet mapped
        '#1A9850',  # [0, 5)
        '#91CF60',  # [5, 10)
        '#FEE08B',  # [10, 15)
        '#FC8D59',  # [15, 20)
        '#D73027',  # >= 20
    ]
    AGENT_COLORS = {
        'casual': '#3498DB',
        'senior': '#8E44AD',
    }

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.frames: List[Image.Image] = []
        self.cmap = ListedColormap(self.BAND_COLORS)
        self.norm = BoundaryNorm(np.arange(-1.5, 6.5), self.cmap.N)

    def _create_figure(self, state: "SimulationState") -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        fig, (ax_map, ax_bars) = plt.subplots(
            1, 2, figsize=(12, 6), gridspec_kw={'width_ratios': [3, 2]})

        ax_map.imshow(state.display, cmap=self.cmap, norm=self.norm,
                      origin='lower', aspect='equal',
                      extent=[-0.5, self.width - 0.5, -0.5, self.height - 0.5])

        for agent in state.agents:
            color = self.AGENT_COLORS.get(agent.behavior, '#95A5A6')
            ax_map.plot(agent.x, agent.y, 'o', color=color,
                        markersize=4, markeredgecolor='white',
                        markeredgewidth=0.3)

        metrics = state.metrics
        ax_map.set_title(f'Tick {state.tick} | Mapped: {metrics.mapped_count}'
                         f'/{metrics.existing_count} | '
                         f'Mean error: {metrics.mean_quality:.2f} m')
        ax_map.set_xlim(-0.5, self.width - 0.5)
        ax_map.set_ylim(-0.5, self.height - 0.5)

        idx = np.arange(6)
        ax_bars.bar(idx - 0.2, metrics.version_buckets, width=0.4,
                    label='version', color='#34495E')
        ax_bars.bar(idx + 0.2, metrics.quality_bands, width=0.4,
                    label='quality band', color=self.BAND_COLORS[1:],
                    edgecolor='#7F8C8D')
        ax_bars.set_xticks(idx)
        ax_bars.set_xticklabels(
            [f'{v}\n{q}' for v, q in zip(VERSION_BUCKET_LABELS,
                                          QUALITY_BAND_LABELS)],
            fontsize=7)
        ax_bars.set_ylim(0, 100)
        ax_bars.set_ylabel('% of objects')
        ax_bars.legend(loc='upper right', fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "SimulationState") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "SimulationState", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )
