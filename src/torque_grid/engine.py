"""
Raster Engine
=============

One aggregation run from samples to display intensities.

Pipeline:
    SampleBatch
      -> run_partitions   (fan-out, parallel accumulate)
      -> merge            (fan-in, sums and counts)
      -> normalize        (peak weight, gamma, quantize)
      -> IntensityGrid

Grid configuration is validated on construction, before any sample is
touched. Each run records RunStats for observability.

Example:
    engine = RasterEngine(bbox, GridSpec(256, 152.87), workers=4)
    image = engine.render(samples)
    print(engine.last_stats.to_dict())
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from torque_grid.aggregation.merge import merge
from torque_grid.aggregation.normalize import NormalizationParams, normalize
from torque_grid.errors import MisconfiguredGridError
from torque_grid.models.geometry import BoundingBox, GridSpec
from torque_grid.models.grid import FinalizedGrid, IntensityGrid
from torque_grid.models.samples import SampleBatch
from torque_grid.parallel.scheduler import ExecutorKind, run_partitions


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunStats:
    """
    Summary of one aggregation run.

    Attributes:
        samples_total: Records in the input batch
        samples_binned: Records that landed in a cell
        samples_outside: Records skipped (out of bounds or non-finite amount)
        partitions: Number of partitions dispatched
        elapsed_ms: Wall time for partition + merge
    """

    samples_total: int
    samples_binned: int
    samples_outside: int
    partitions: int
    elapsed_ms: float

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "samples_total": self.samples_total,
            "samples_binned": self.samples_binned,
            "samples_outside": self.samples_outside,
            "partitions": self.partitions,
            "elapsed_ms": round(self.elapsed_ms, 3),
        }


class RasterEngine:
    """
    Fork-join binning engine.

    Attributes:
        bbox: Valid extent
        spec: Grid layout
        workers: Number of partitions
        executor: Unit of concurrency
        params: Display mapping constants
    """

    def __init__(
        self,
        bbox: BoundingBox,
        spec: GridSpec,
        workers: int = 4,
        executor: ExecutorKind = ExecutorKind.THREAD,
        params: Optional[NormalizationParams] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            bbox: Valid extent (exclusive edges)
            spec: Grid layout
            workers: Fixed partition count (0 or 1 = single pass)
            executor: 'thread' or 'process'
            params: Display mapping, defaults to BASE/RANGE/GAMMA

        Raises:
            MisconfiguredGridError: If workers is negative
        """
        if workers < 0:
            raise MisconfiguredGridError(f"workers must be >= 0, got {workers}")

        self.bbox = bbox
        self.spec = spec
        self.workers = workers
        self.executor = ExecutorKind(executor)
        self.params = params or NormalizationParams()

        self._last_stats: Optional[RunStats] = None
        self._run_count: int = 0

        logger.info(
            f"RasterEngine initialized: {spec!r}, "
            f"workers={workers} ({self.executor.value})"
        )

    @classmethod
    def from_settings(cls, settings) -> "RasterEngine":
        """Build an engine from a loaded Settings object."""
        return cls(
            bbox=settings.bbox.to_bbox(),
            spec=settings.grid.to_spec(),
            workers=settings.workers.count,
            executor=settings.workers.executor,
            params=settings.normalization.to_params(),
        )

    def aggregate(self, samples: SampleBatch) -> FinalizedGrid:
        """
        Partition, accumulate and merge.

        Args:
            samples: Full record set for this run

        Returns:
            FinalizedGrid with per-cell averages and counts

        Raises:
            WorkerFailureError: If any partition fails
        """
        start_time = time.perf_counter()

        partials = run_partitions(
            samples,
            self.bbox,
            self.spec,
            self.workers,
            self.executor,
        )
        grid = merge(partials)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        binned = grid.total_count

        self._run_count += 1
        self._last_stats = RunStats(
            samples_total=len(samples),
            samples_binned=binned,
            samples_outside=len(samples) - binned,
            partitions=len(partials),
            elapsed_ms=elapsed_ms,
        )

        logger.info(
            f"Run {self._run_count}: binned {binned}/{len(samples)} samples "
            f"across {len(partials)} partitions in {elapsed_ms:.1f}ms"
        )
        return grid

    def render(self, samples: SampleBatch, strict: bool = False) -> IntensityGrid:
        """
        Aggregate and normalize in one call.

        Args:
            samples: Full record set for this run
            strict: Raise EmptyInputError instead of an all-base grid

        Returns:
            IntensityGrid ready for an external writer
        """
        return normalize(self.aggregate(samples), self.params, strict=strict)

    @property
    def last_stats(self) -> Optional[RunStats]:
        """Stats of the most recent run, None before the first."""
        return self._last_stats

    @property
    def run_count(self) -> int:
        """Number of completed runs."""
        return self._run_count

    def get_metrics(self) -> dict:
        """Get engine metrics for observability."""
        return {
            "run_count": self._run_count,
            "resolution": self.spec.resolution,
            "cell_size": self.spec.cell_size,
            "workers": self.workers,
            "executor": self.executor.value,
            "last_run": self._last_stats.to_dict() if self._last_stats else None,
        }
