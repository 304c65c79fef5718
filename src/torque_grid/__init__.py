"""
torque-grid
===========

Parallel spatial binning of geotagged samples into greyscale raster tiles.

Samples are split into contiguous partitions, each partition is
accumulated into its own (sum, count) grid on an independent worker,
the partial grids are merged, and the merged grid is normalized with a
gamma curve into integer display intensities.

Components:
    - binning: coordinate -> cell mapping and per-partition accumulation
    - parallel: partitioning and fork-join scheduling
    - aggregation: merge and normalization
    - engine: one full run with statistics
    - io: record loader and PGM writer (outside the engine)

Example:
    from torque_grid import RasterEngine, BoundingBox, GridSpec
    from torque_grid.io import read_samples, save_pgm

    engine = RasterEngine(BoundingBox(0, 0, 10, 10), GridSpec(2, 5.0))
    save_pgm(engine.render(read_samples("tile.csv")), "tile.pgm")
"""

__version__ = "0.1.0"

from torque_grid.engine import RasterEngine, RunStats
from torque_grid.errors import (
    EmptyInputError,
    MisconfiguredGridError,
    TorqueGridError,
    WorkerFailureError,
)
from torque_grid.models import (
    BoundingBox,
    FinalizedGrid,
    GridSpec,
    IntensityGrid,
    PartialGrid,
    Sample,
    SampleBatch,
)

__all__ = [
    "__version__",
    "RasterEngine",
    "RunStats",
    "BoundingBox",
    "GridSpec",
    "Sample",
    "SampleBatch",
    "PartialGrid",
    "FinalizedGrid",
    "IntensityGrid",
    "TorqueGridError",
    "EmptyInputError",
    "MisconfiguredGridError",
    "WorkerFailureError",
]
