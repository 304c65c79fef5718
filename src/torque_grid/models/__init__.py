"""
Data Models
===========

Typed data passed through the aggregation pipeline.

Models:
    Geometry:
        - BoundingBox: Valid spatial extent (exclusive edges)
        - GridSpec: Resolution and cell size

    Input:
        - Sample: One geotagged record
        - SampleBatch: Read-only columnar collection of samples

    Grids:
        - PartialGrid: (sum, count) per cell, one per worker
        - FinalizedGrid: (average, count) per cell after merge
        - IntensityGrid: Display intensities
"""

from torque_grid.models.geometry import BoundingBox, GridSpec
from torque_grid.models.samples import Sample, SampleBatch
from torque_grid.models.grid import FinalizedGrid, IntensityGrid, PartialGrid

__all__ = [
    # Geometry
    "BoundingBox",
    "GridSpec",
    # Input
    "Sample",
    "SampleBatch",
    # Grids
    "PartialGrid",
    "FinalizedGrid",
    "IntensityGrid",
]
