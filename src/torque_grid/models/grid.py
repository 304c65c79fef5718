"""
Grid Models
===========

The three shapes a grid takes during one run.

    PartialGrid    (sum, count) per cell, owned by one worker
    FinalizedGrid  (average, count) per cell, produced by the merge
    IntensityGrid  integer display value per cell, produced by normalization

All three are flat arrays of resolution² cells in row-major order,
index = cell_x * resolution + cell_y.

Averages are NOT stored in partial grids. Only sums and counts are
additive across partitions; averaging averages is wrong whenever
partitions hold unequal sample counts.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np


def scale_exponent(values: np.ndarray) -> int:
    """Smallest e with every |value| < 2 ** e, or 0 for all-zero input."""
    if values.size == 0:
        return 0
    peak = float(np.abs(values).max())
    if peak == 0.0:
        return 0
    return int(np.frexp(peak)[1])


@dataclass(frozen=True, slots=True)
class PartialGrid:
    """
    Per-partition accumulator grid.

    Sums that would overflow float64 are stored scaled down by a power
    of two: the true total of a cell is sums[i] * 2 ** exponent.

    Attributes:
        resolution: Side length in cells
        sums: float64 array of per-cell amount totals (scaled)
        counts: uint64 array of per-cell sample counts
        exponent: Power-of-two scale of sums, 0 when unscaled
    """

    resolution: int
    sums: np.ndarray
    counts: np.ndarray
    exponent: int = 0

    @classmethod
    def zeros(cls, resolution: int) -> "PartialGrid":
        """Fresh all-zero grid."""
        size = resolution * resolution
        return cls(
            resolution=resolution,
            sums=np.zeros(size, dtype=np.float64),
            counts=np.zeros(size, dtype=np.uint64),
        )

    @property
    def total_count(self) -> int:
        return int(self.counts.sum())

    @property
    def total_sum(self) -> float:
        # inf when the unscaled total exceeds float64
        with np.errstate(over="ignore"):
            return float(np.ldexp(self.sums.sum(), self.exponent))


@dataclass(frozen=True, slots=True)
class FinalizedGrid:
    """
    Global grid after merge.

    Invariant: counts[i] == 0 implies averages[i] == 0.

    Attributes:
        resolution: Side length in cells
        averages: float64 array of per-cell mean amount
        counts: uint64 array of per-cell sample counts
    """

    resolution: int
    averages: np.ndarray
    counts: np.ndarray

    @property
    def weights(self) -> np.ndarray:
        """Total mass per cell (average * count), inf past float64 range."""
        with np.errstate(over="ignore"):
            return self.averages * self.counts.astype(np.float64)

    @property
    def total_count(self) -> int:
        return int(self.counts.sum())

    @property
    def total_sum(self) -> float:
        with np.errstate(over="ignore"):
            return float(self.weights.sum())

    def cell(self, cell_x: int, cell_y: int) -> Tuple[float, int]:
        """(average, count) of one cell."""
        index = cell_x * self.resolution + cell_y
        return float(self.averages[index]), int(self.counts[index])

    def to_dict(self) -> dict:
        """Export summary for logging/serialization."""
        return {
            "resolution": self.resolution,
            "occupied_cells": int(np.count_nonzero(self.counts)),
            "total_count": self.total_count,
            "total_sum": round(self.total_sum, 6),
        }


@dataclass(frozen=True, slots=True)
class IntensityGrid:
    """
    Display intensities ready for an external raster writer.

    Attributes:
        resolution: Side length in cells
        values: int64 array of intensities in [base, base + range]
        empty: True when no cell carried positive weight
    """

    resolution: int
    values: np.ndarray
    empty: bool = False

    def as_matrix(self) -> np.ndarray:
        """Storage-order matrix indexed [cell_x, cell_y]."""
        return self.values.reshape(self.resolution, self.resolution)

    def rows(self) -> Iterator[np.ndarray]:
        """
        Yield rows in rendering order.

        The image's vertical axis is inverted relative to storage:
        rows run from cell_x = resolution - 1 down to 0, and within a
        row from cell_y = 0 upward.
        """
        matrix = self.as_matrix()
        for cell_x in range(self.resolution - 1, -1, -1):
            yield matrix[cell_x]

    def intensity(self, cell_x: int, cell_y: int) -> int:
        return int(self.values[cell_x * self.resolution + cell_y])
