"""
Benchmark Harness
=================

Re-runs the full aggregation several times to get stable timings.

Kept outside the engine: the engine does one run per call and knows
nothing about repetition.
"""

import logging
import statistics
import time
from dataclasses import dataclass
from typing import List

from torque_grid.engine import RasterEngine
from torque_grid.models.samples import SampleBatch


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    """
    Timings of repeated aggregation runs.

    Attributes:
        samples: Records per run
        workers: Partitions per run
        timings_ms: Wall time of each run, in order
    """

    samples: int
    workers: int
    timings_ms: List[float]

    @property
    def min_ms(self) -> float:
        return min(self.timings_ms)

    @property
    def max_ms(self) -> float:
        return max(self.timings_ms)

    @property
    def mean_ms(self) -> float:
        return statistics.fmean(self.timings_ms)

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "samples": self.samples,
            "workers": self.workers,
            "repeats": len(self.timings_ms),
            "min_ms": round(self.min_ms, 3),
            "mean_ms": round(self.mean_ms, 3),
            "max_ms": round(self.max_ms, 3),
        }


def benchmark(
    engine: RasterEngine,
    samples: SampleBatch,
    repeats: int = 10,
) -> BenchmarkResult:
    """
    Time `repeats` full aggregation runs.

    Args:
        engine: Configured engine
        samples: Record set reused for every run
        repeats: Number of runs (>= 1)

    Returns:
        BenchmarkResult with per-run timings
    """
    if repeats < 1:
        raise ValueError("repeats must be >= 1")

    timings: List[float] = []
    for run in range(repeats):
        start = time.perf_counter()
        engine.aggregate(samples)
        timings.append((time.perf_counter() - start) * 1000)
        logger.debug(f"Benchmark run {run + 1}/{repeats}: {timings[-1]:.1f}ms")

    result = BenchmarkResult(
        samples=len(samples),
        workers=engine.workers,
        timings_ms=timings,
    )
    logger.info(
        f"Benchmark: {repeats} runs, min={result.min_ms:.1f}ms, "
        f"mean={result.mean_ms:.1f}ms, max={result.max_ms:.1f}ms"
    )
    return result
