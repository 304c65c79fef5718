"""
Geo Bin Mapper
==============

Maps sample coordinates to a grid cell index.

Rules:
    - Outside unless min < coord < max on BOTH axes (edges excluded)
    - cell_x = floor((x - min_x) / cell_size)
    - cell_y = floor((y - min_y) / cell_size)
    - index  = cell_x * resolution + cell_y

A cell coordinate that reaches resolution (only possible when
cell_size * resolution is smaller than the box extent) is outside
as well; it has no storage in the grid.

Two forms are provided:
    - map_sample: one Sample -> Optional[int]
    - map_cells: coordinate columns -> int64 array, OUTSIDE (-1) for misses

Both are pure and produce identical indices for identical inputs.
"""

import math
from typing import Optional

import numpy as np

from torque_grid.models.geometry import BoundingBox, GridSpec
from torque_grid.models.samples import Sample


OUTSIDE = -1


def map_sample(
    sample: Sample,
    bbox: BoundingBox,
    spec: GridSpec,
) -> Optional[int]:
    """
    Map one sample to its cell index.

    Args:
        sample: Sample to place
        bbox: Valid extent (exclusive edges)
        spec: Grid layout

    Returns:
        Flat cell index, or None if the sample is outside the grid
    """
    # NaN fails both comparisons and lands outside
    if not bbox.contains(sample.x, sample.y):
        return None

    cell_x = math.floor((sample.x - bbox.min_x) / spec.cell_size)
    cell_y = math.floor((sample.y - bbox.min_y) / spec.cell_size)

    if cell_x >= spec.resolution or cell_y >= spec.resolution:
        return None

    return cell_x * spec.resolution + cell_y


def map_cells(
    x: np.ndarray,
    y: np.ndarray,
    bbox: BoundingBox,
    spec: GridSpec,
) -> np.ndarray:
    """
    Vectorized cell mapping for coordinate columns.

    Args:
        x: float64 x coordinates
        y: float64 y coordinates
        bbox: Valid extent (exclusive edges)
        spec: Grid layout

    Returns:
        int64 array of flat cell indices, OUTSIDE where not binned
    """
    indices = np.full(len(x), OUTSIDE, dtype=np.int64)

    inside = (
        (x > bbox.min_x) & (x < bbox.max_x) &
        (y > bbox.min_y) & (y < bbox.max_y)
    )
    if not inside.any():
        return indices

    # Offsets are strictly positive here, so floor == truncation
    cell_x = np.floor((x[inside] - bbox.min_x) / spec.cell_size).astype(np.int64)
    cell_y = np.floor((y[inside] - bbox.min_y) / spec.cell_size).astype(np.int64)

    cells = cell_x * spec.resolution + cell_y
    overflow = (cell_x >= spec.resolution) | (cell_y >= spec.resolution)
    cells[overflow] = OUTSIDE

    indices[inside] = cells
    return indices
