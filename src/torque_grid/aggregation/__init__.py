"""
Aggregation Module
==================

Fan-in and display mapping of accumulated grids.

This module provides:
    - merge: PartialGrid list -> FinalizedGrid
    - normalize: FinalizedGrid -> IntensityGrid
    - NormalizationParams: BASE / RANGE / GAMMA constants
"""

from torque_grid.aggregation.merge import merge
from torque_grid.aggregation.normalize import (
    BASE,
    GAMMA,
    RANGE,
    NormalizationParams,
    normalize,
)

__all__ = [
    "merge",
    "normalize",
    "NormalizationParams",
    "BASE",
    "RANGE",
    "GAMMA",
]
