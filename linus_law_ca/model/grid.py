"""Grid map management for the Linus's Law CA simulation."""

import numpy as np
from typing import Tuple, List
from scipy.ndimage import convolve

from .rng import RandomSource


# Quality band edges (m); band 0 is reserved for not-yet-mapped cells
QUALITY_BAND_EDGES = (5.0, 10.0, 15.0, 20.0)

NOT_EXISTING = -1
UNMAPPED = 0


class GridMap:
    """
    Manages the 2D map with one layer per cell attribute.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    """

    def __init__(self, width: int, height: int, error_ceiling: float,
                 torus: bool = False):
        self.width = width
        self.height = height
        self.error_ceiling = error_ceiling
        self.torus = torus

        # Positional error (m); lower is better
        self.quality = np.full((height, width), float(error_ceiling))

        # Accepted edits; 0 = object not yet mapped
        self.version = np.zeros((height, width), dtype=np.int64)

        # False = no trackable object at this position (permanently inert)
        self.exists = np.ones((height, width), dtype=bool)

        # Derived band for rendering, see refresh_display()
        self.display = np.zeros((height, width), dtype=np.int8)
        self.refresh_display()

    @property
    def size(self) -> int:
        return self.width * self.height

    def exclude_random(self, existence_ratio: float, rng: RandomSource) -> int:
        """
        Mark floor((1 - ratio) * size) random positions as non-existing.

        Positions are drawn uniformly without replacement. Returns the
        number of excluded positions.
        """
        # round() first so that e.g. 0.1 * 100 floors to 10, not 9
        n_excluded = int(np.floor(round((1.0 - existence_ratio) * self.size, 9)))
        if n_excluded <= 0:
            return 0
        flat = rng.sample_without_replacement(self.size, n_excluded)
        ys, xs = np.unravel_index(flat, (self.height, self.width))
        self.exists[ys, xs] = False
        self.refresh_display()
        return n_excluded

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def exists_at(self, x: int, y: int) -> bool:
        """Check if position is within bounds and hosts an object."""
        if not self.is_inside(x, y):
            return False
        return bool(self.exists[y, x])

    def neighborhood(self, x: int, y: int, radius: int) -> List[Tuple[int, int]]:
        """
        Existing positions within Chebyshev distance `radius` of (x, y).

        Includes (x, y) itself. Positions are listed in row-major order
        (y outer, x inner); on a torus coordinates wrap and each position
        appears once even when the window is wider than the grid.
        """
        positions = []
        if self.torus:
            seen = set()
            for dy in range(-radius, radius + 1):
                ny = (y + dy) % self.height
                for dx in range(-radius, radius + 1):
                    nx = (x + dx) % self.width
                    if (nx, ny) in seen:
                        continue
                    seen.add((nx, ny))
                    if self.exists[ny, nx]:
                        positions.append((nx, ny))
            positions.sort(key=lambda p: (p[1], p[0]))
            return positions

        for ny in range(max(0, y - radius), min(self.height, y + radius + 1)):
            for nx in range(max(0, x - radius), min(self.width, x + radius + 1)):
                if self.exists[ny, nx]:
                    positions.append((nx, ny))
        return positions

    def candidate_counts(self, radius: int) -> np.ndarray:
        """Number of neighborhood candidates for every position at once."""
        kernel = np.ones((2 * radius + 1, 2 * radius + 1), dtype=np.int64)
        mode = 'wrap' if self.torus else 'constant'
        if self.torus and (2 * radius + 1 > self.width
                           or 2 * radius + 1 > self.height):
            # Wrapped windows overlap themselves; count positions directly
            counts = np.zeros((self.height, self.width), dtype=np.int64)
            for y in range(self.height):
                for x in range(self.width):
                    counts[y, x] = len(self.neighborhood(x, y, radius))
            return counts
        return convolve(self.exists.astype(np.int64), kernel,
                        mode=mode, cval=0)

    def existing_positions(self) -> List[Tuple[int, int]]:
        ys, xs = np.where(self.exists)
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    def apply_edit(self, x: int, y: int, quality: float) -> None:
        """Record an accepted edit: new quality and one more version."""
        self.quality[y, x] = quality
        self.version[y, x] += 1

    def refresh_display(self) -> None:
        """
        Recompute the display band of every cell.

        -1 = no object, 0 = not yet mapped, 1..5 = quality bands
        [0,5), [5,10), [10,15), [15,20), >=20.
        """
        bands = np.digitize(self.quality, QUALITY_BAND_EDGES) + 1
        display = np.where(self.version > 0, bands, UNMAPPED)
        self.display = np.where(self.exists, display,
                                NOT_EXISTING).astype(np.int8)
