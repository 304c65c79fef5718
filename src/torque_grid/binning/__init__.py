"""
Binning Module
==============

Spatial binning of samples into grid cells.

This module provides:
    - map_sample / map_cells: coordinate -> cell index
    - accumulate: slice of samples -> PartialGrid
"""

from torque_grid.binning.mapper import OUTSIDE, map_cells, map_sample
from torque_grid.binning.accumulator import accumulate

__all__ = ["OUTSIDE", "map_cells", "map_sample", "accumulate"]
