"""Per-tick aggregation of grid state."""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Tuple

from .grid import GridMap, QUALITY_BAND_EDGES


VERSION_BUCKET_LABELS = ("v0", "v1", "v2", "v3", "v4", "v5plus")
QUALITY_BAND_LABELS = ("unmapped", "q0_5", "q5_10", "q10_15", "q15_20",
                       "q20plus")


@dataclass(frozen=True)
class MetricsSnapshot:
    """Aggregates over existing cells at the end of one tick."""
    tick: int
    existing_count: int
    mapped_count: int
    mean_quality: float   # over mapped cells, 0 if none
    mean_version: float   # over existing cells, 0 if none
    version_buckets: Tuple[float, ...]  # percent with version 0,1,2,3,4,>=5
    quality_bands: Tuple[float, ...]    # percent per QUALITY_BAND_LABELS
    quality_histogram: np.ndarray       # mapped-cell counts per 1 m bin
    quality_bin_edges: np.ndarray

    @property
    def unmapped_percent(self) -> float:
        return self.version_buckets[0]

    def as_row(self) -> Dict[str, float]:
        """Flat scalar view for CSV export and reporting."""
        row = {
            'tick': self.tick,
            'existing': self.existing_count,
            'mapped': self.mapped_count,
            'mean_quality': self.mean_quality,
            'mean_version': self.mean_version,
        }
        for label, value in zip(VERSION_BUCKET_LABELS, self.version_buckets):
            row[f'pct_{label}'] = value
        for label, value in zip(QUALITY_BAND_LABELS, self.quality_bands):
            row[f'pct_{label}'] = value
        return row


def _percentages(counts: np.ndarray, total: int) -> Tuple[float, ...]:
    if total == 0:
        return tuple(0.0 for _ in counts)
    return tuple(float(c) * 100.0 / total for c in counts)


def compute_metrics(grid: GridMap, tick: int) -> MetricsSnapshot:
    """Build a fresh snapshot; reads the grid and never modifies it."""
    version = grid.version[grid.exists]
    quality = grid.quality[grid.exists]
    existing = int(version.size)

    mapped_mask = version > 0
    mapped_quality = quality[mapped_mask]
    mapped = int(mapped_quality.size)

    mean_quality = float(mapped_quality.mean()) if mapped else 0.0
    mean_version = float(version.mean()) if existing else 0.0

    version_counts = np.bincount(np.minimum(version, 5), minlength=6)

    bands = np.digitize(mapped_quality, QUALITY_BAND_EDGES) + 1
    band_counts = np.bincount(bands, minlength=6)
    band_counts[0] = existing - mapped

    n_bins = max(1, int(np.ceil(grid.error_ceiling)))
    histogram, edges = np.histogram(mapped_quality, bins=n_bins,
                                    range=(0.0, float(n_bins)))

    return MetricsSnapshot(
        tick=tick,
        existing_count=existing,
        mapped_count=mapped,
        mean_quality=mean_quality,
        mean_version=mean_version,
        version_buckets=_percentages(version_counts, existing),
        quality_bands=_percentages(band_counts, existing),
        quality_histogram=histogram,
        quality_bin_edges=edges,
    )
