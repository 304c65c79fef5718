"""
Geometry Models
===============

Spatial extent and grid layout for one aggregation run.

Design Philosophy:
    The bounding box and grid spec are EXPLICITLY DECLARED, not derived
    from the data. They are fixed for the duration of a run.

    Cell size is supplied pre-computed. It is never re-derived per axis,
    so a bounding box whose aspect ratio does not match the grid still
    produces square cells.

Grid Layout:
    Row-major, index = cell_x * resolution + cell_y
"""

import math
from dataclasses import dataclass

from torque_grid.errors import MisconfiguredGridError


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """
    Valid spatial extent of a run (map units).

    Samples must lie STRICTLY inside the box on both axes to be binned.

    Attributes:
        min_x: Lower x bound (exclusive)
        min_y: Lower y bound (exclusive)
        max_x: Upper x bound (exclusive)
        max_y: Upper y bound (exclusive)
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        """Validate invariants."""
        values = (self.min_x, self.min_y, self.max_x, self.max_y)
        if not all(math.isfinite(v) for v in values):
            raise MisconfiguredGridError("bounding box must be finite")
        if self.max_x <= self.min_x or self.max_y <= self.min_y:
            raise MisconfiguredGridError(
                f"bounding box is empty: ({self.min_x}, {self.min_y}) - "
                f"({self.max_x}, {self.max_y})"
            )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, x: float, y: float) -> bool:
        """Strict containment test (edges are outside)."""
        return self.min_x < x < self.max_x and self.min_y < y < self.max_y


@dataclass(frozen=True, slots=True)
class GridSpec:
    """
    Square grid layout.

    Attributes:
        resolution: Side length of the grid in cells
        cell_size: Width and height of one cell in map units
    """

    resolution: int
    cell_size: float

    def __post_init__(self) -> None:
        """Fail fast: no cell index can be valid otherwise."""
        if self.resolution < 1:
            raise MisconfiguredGridError(
                f"resolution must be >= 1, got {self.resolution}"
            )
        if not (math.isfinite(self.cell_size) and self.cell_size > 0):
            raise MisconfiguredGridError(
                f"cell_size must be positive, got {self.cell_size}"
            )

    @property
    def cell_count(self) -> int:
        """Total number of cells (resolution²)."""
        return self.resolution * self.resolution

    @classmethod
    def from_bbox(cls, bbox: BoundingBox, resolution: int) -> "GridSpec":
        """Derive cell size from the x extent of the bounding box."""
        if resolution < 1:
            raise MisconfiguredGridError(
                f"resolution must be >= 1, got {resolution}"
            )
        return cls(resolution=resolution, cell_size=bbox.width / resolution)

    def __repr__(self) -> str:
        return (
            f"GridSpec({self.resolution}x{self.resolution}, "
            f"cell_size={self.cell_size:.6g})"
        )
