"""
Partition Accumulator
=====================

Builds one local (sum, count) grid from a contiguous slice of samples.

This is the unit of concurrent execution. It:
    - Allocates its own zeroed grid (resolution² cells)
    - Reads only its input slice
    - Returns the grid to the caller, which takes ownership

No shared mutable state, no locks. Samples mapped OUTSIDE are skipped,
as are samples whose amount is NaN or infinite.
An empty slice yields an all-zero grid.
"""

import logging

import numpy as np

from torque_grid.binning.mapper import OUTSIDE, map_cells
from torque_grid.models.geometry import BoundingBox, GridSpec
from torque_grid.models.grid import PartialGrid, scale_exponent
from torque_grid.models.samples import SampleBatch


logger = logging.getLogger(__name__)


def accumulate(
    samples: SampleBatch,
    bbox: BoundingBox,
    spec: GridSpec,
) -> PartialGrid:
    """
    Accumulate per-cell sums and counts for a slice of samples.

    Args:
        samples: Contiguous slice to process
        bbox: Valid extent (exclusive edges)
        spec: Grid layout

    Returns:
        PartialGrid owned by the caller
    """
    if len(samples) == 0:
        return PartialGrid.zeros(spec.resolution)

    cells = map_cells(samples.x, samples.y, bbox, spec)
    # NaN or infinite amounts are dropped like out-of-bounds samples
    binned = (cells != OUTSIDE) & np.isfinite(samples.amount)
    hits = cells[binned]
    amount = samples.amount[binned]

    counts = np.bincount(hits, minlength=spec.cell_count).astype(np.uint64)

    exponent = 0
    with np.errstate(over="ignore"):
        sums = np.bincount(hits, weights=amount, minlength=spec.cell_count)
    if not np.isfinite(sums).all():
        # Every scaled amount is below 1, so no cell total can overflow
        exponent = scale_exponent(amount)
        sums = np.bincount(
            hits,
            weights=np.ldexp(amount, -exponent),
            minlength=spec.cell_count,
        )
        logger.debug(f"Cell totals exceed float64, scaled by 2**{exponent}")

    logger.debug(
        f"Accumulated {len(hits)}/{len(samples)} samples "
        f"into {int(np.count_nonzero(counts))} cells"
    )

    return PartialGrid(
        resolution=spec.resolution,
        sums=sums,
        counts=counts,
        exponent=exponent,
    )
