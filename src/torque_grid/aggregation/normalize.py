"""
Normalizer
==========

Maps a finalized grid to integer display intensities.

Formula:
    weight    = average * count          (total mass per cell)
    ratio     = weight / max(weight)     clipped to [0, 1]
    intensity = floor(BASE + ratio ** GAMMA * RANGE)

Weights are compared after dividing by a common power of two, so
huge finite amounts cannot overflow the product or push intensities
outside [BASE, BASE + RANGE].

Brighter pixels mean more total mass, not a higher per-sample mean.
The gamma curve compresses dynamic range so sparse cells stay visible.

Empty Grid:
    When no cell has positive weight there is no peak to normalize by.
    Every cell renders at BASE, the result is flagged `empty`, and a
    warning is logged. With strict=True, EmptyInputError is raised.
"""

import logging
from dataclasses import dataclass

import numpy as np

from torque_grid.errors import EmptyInputError
from torque_grid.models.grid import FinalizedGrid, IntensityGrid, scale_exponent


logger = logging.getLogger(__name__)


# Default display mapping
BASE = 15
RANGE = 240
GAMMA = 0.4


@dataclass(frozen=True, slots=True)
class NormalizationParams:
    """
    Display mapping constants.

    Attributes:
        base: Intensity of an empty cell
        range: Span added on top of base for the peak cell
        gamma: Exponent applied to the normalized weight
    """

    base: int = BASE
    range: int = RANGE
    gamma: float = GAMMA

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.range < 0:
            raise ValueError("range must be non-negative")
        if not self.gamma > 0:
            raise ValueError("gamma must be positive")

    @property
    def peak(self) -> int:
        """Intensity of the heaviest cell."""
        return self.base + self.range


def normalize(
    grid: FinalizedGrid,
    params: NormalizationParams = NormalizationParams(),
    strict: bool = False,
) -> IntensityGrid:
    """
    Convert per-cell weights into display intensities.

    Args:
        grid: Merged grid
        params: Display mapping constants
        strict: Raise instead of returning an all-base grid when empty

    Returns:
        IntensityGrid with values in [base, base + range]

    Raises:
        EmptyInputError: If strict and no cell has positive weight
    """
    weights = _relative_weights(grid)
    max_weight = float(weights.max()) if weights.size else 0.0

    if not max_weight > 0:
        if strict:
            raise EmptyInputError(
                f"no cell has positive weight ({grid.total_count} samples binned)"
            )
        logger.warning(
            f"Empty grid ({grid.total_count} samples binned, "
            f"no positive weight); rendering all cells at {params.base}"
        )
        return IntensityGrid(
            resolution=grid.resolution,
            values=np.full(weights.size, params.base, dtype=np.int64),
            empty=True,
        )

    with np.errstate(invalid="ignore"):
        ratio = np.where(np.isposinf(weights), 1.0, weights / max_weight)
    ratio = np.clip(ratio, 0.0, 1.0)
    values = np.floor(params.base + np.power(ratio, params.gamma) * params.range)

    logger.debug(
        f"Normalized {weights.size} cells, "
        f"peak at index {int(np.argmax(weights))}"
    )

    return IntensityGrid(
        resolution=grid.resolution,
        values=values.astype(np.int64),
        empty=False,
    )


def _relative_weights(grid: FinalizedGrid) -> np.ndarray:
    """
    Per-cell weights divided by a common power of two.

    Ratios between cells are unchanged, but average * count can no longer
    overflow float64. NaN weights count as zero.
    """
    averages = grid.averages
    exponent = scale_exponent(averages[np.isfinite(averages)])
    with np.errstate(over="ignore", invalid="ignore"):
        weights = np.ldexp(averages, -exponent) * grid.counts.astype(np.float64)
    return np.nan_to_num(weights, nan=0.0, posinf=np.inf, neginf=-np.inf)
