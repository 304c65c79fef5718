"""
Grid Merger
===========

Fan-in of partial grids into one finalized grid.

Formula (per cell):
    total_sum   = Σ partial.sums
    total_count = Σ partial.counts
    average     = total_sum / total_count   if total_count > 0
                = 0                         otherwise

Only sums and counts are additive. Per-partition averages are never
combined directly.

The result is independent of partition order up to floating-point
summation order.

Overflow:
    Partials are brought to a common power-of-two scale before adding.
    When the sum of finite partial totals would exceed float64, every
    partial is scaled below 1 first, so averages of finite amounts stay
    finite however large the per-cell total grows.
"""

import logging
from typing import Sequence

import numpy as np

from torque_grid.errors import MisconfiguredGridError
from torque_grid.models.grid import FinalizedGrid, PartialGrid, scale_exponent


logger = logging.getLogger(__name__)


def merge(partials: Sequence[PartialGrid]) -> FinalizedGrid:
    """
    Combine partial grids and resolve per-cell averages.

    Args:
        partials: One grid per partition, all of the same resolution

    Returns:
        FinalizedGrid with averages and counts

    Raises:
        ValueError: If no partials are given
        MisconfiguredGridError: If resolutions differ
    """
    if not partials:
        raise ValueError("merge requires at least one partial grid")

    resolution = partials[0].resolution
    mismatched = [p.resolution for p in partials if p.resolution != resolution]
    if mismatched:
        raise MisconfiguredGridError(
            f"cannot merge grids of resolution {resolution} "
            f"with {sorted(set(mismatched))}"
        )

    size = resolution * resolution
    total_counts = np.zeros(size, dtype=np.uint64)
    for partial in partials:
        total_counts += partial.counts

    exponent = max(partial.exponent for partial in partials)
    with np.errstate(over="ignore"):
        total_sums = _add_sums(partials, exponent, size)
    if not np.isfinite(total_sums).all():
        # Rescale so every partial total lies below 1 before adding
        exponent += max(
            scale_exponent(np.ldexp(p.sums, p.exponent - exponent))
            for p in partials
        )
        total_sums = _add_sums(partials, exponent, size)
        logger.debug(f"Merged totals exceed float64, scaled by 2**{exponent}")

    averages = np.zeros(size, dtype=np.float64)
    occupied = total_counts > 0
    with np.errstate(over="ignore"):
        averages[occupied] = np.ldexp(
            total_sums[occupied] / total_counts[occupied],
            exponent,
        )

    logger.debug(
        f"Merged {len(partials)} partials: "
        f"{int(occupied.sum())} occupied cells, "
        f"{int(total_counts.sum())} samples"
    )

    return FinalizedGrid(
        resolution=resolution,
        averages=averages,
        counts=total_counts,
    )


def _add_sums(
    partials: Sequence[PartialGrid],
    exponent: int,
    size: int,
) -> np.ndarray:
    """Sum partial totals expressed in units of 2 ** exponent."""
    total = np.zeros(size, dtype=np.float64)
    for partial in partials:
        total += np.ldexp(partial.sums, partial.exponent - exponent)
    return total
