"""CSV export functionality for the Linus's Law CA simulation."""

import csv
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from ..model.metrics import VERSION_BUCKET_LABELS, QUALITY_BAND_LABELS

if TYPE_CHECKING:
    from ..model.state import SimulationState


FIELDNAMES = (
    ['tick', 'existing', 'mapped', 'mean_quality', 'mean_version']
    + [f'pct_{label}' for label in VERSION_BUCKET_LABELS]
    + [f'pct_{label}' for label in QUALITY_BAND_LABELS]
)


class CSVWriter:
    """
    Exports per-tick metrics to CSV format incrementally.

    Output format:
        tick,existing,mapped,mean_quality,mean_version,pct_v0,...
        0,810,37,21.4,0.05,95.4,...
        ...
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=FIELDNAMES)
        self.writer.writeheader()
        self._is_open = True

    def append(self, state: "SimulationState") -> None:
        """Write metrics row for current tick."""
        if not self._is_open:
            self.open()
        for row in state.to_csv_rows():
            self.writer.writerow(row)
        self.file.flush()

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
