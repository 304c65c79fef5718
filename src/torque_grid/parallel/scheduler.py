"""
Partition Scheduler
===================

Fork-join execution of one accumulator per partition.

Flow:
    1. Split the batch with partition_bounds
    2. Submit every partition before awaiting any result
    3. Join in worker-index order

Failure Policy:
    Any failed partition voids the whole run. Pending work is cancelled
    and a single WorkerFailureError is raised. There is no retry and no
    partial result.

Executors:
    - THREAD: partitions share the read-only sample arrays
    - PROCESS: each partition receives its slice by value
"""

import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from enum import Enum
from typing import List

from torque_grid.binning.accumulator import accumulate
from torque_grid.errors import WorkerFailureError
from torque_grid.models.geometry import BoundingBox, GridSpec
from torque_grid.models.grid import PartialGrid
from torque_grid.models.samples import SampleBatch
from torque_grid.parallel.partitioner import partition_bounds


logger = logging.getLogger(__name__)


class ExecutorKind(str, Enum):
    """
    Unit of concurrency used for partitions.

    Attributes:
        THREAD: One thread per partition
        PROCESS: One worker process per partition
    """

    THREAD = "thread"
    PROCESS = "process"


def _create_executor(kind: ExecutorKind, max_workers: int) -> Executor:
    if kind == ExecutorKind.PROCESS:
        return ProcessPoolExecutor(max_workers=max_workers)
    return ThreadPoolExecutor(
        max_workers=max_workers,
        thread_name_prefix="partition",
    )


def run_partitions(
    samples: SampleBatch,
    bbox: BoundingBox,
    spec: GridSpec,
    worker_count: int,
    executor: ExecutorKind = ExecutorKind.THREAD,
) -> List[PartialGrid]:
    """
    Accumulate every partition concurrently.

    Args:
        samples: Full record set for the run
        bbox: Valid extent
        spec: Grid layout
        worker_count: Fixed number of partitions (0 or 1 = single pass)
        executor: Unit of concurrency

    Returns:
        One PartialGrid per partition, in worker-index order

    Raises:
        WorkerFailureError: If any partition fails
    """
    bounds = partition_bounds(len(samples), worker_count)
    executor = ExecutorKind(executor)

    if len(bounds) == 1:
        # Degenerate case: no pool, one pass over everything
        try:
            return [accumulate(samples, bbox, spec)]
        except Exception as exc:
            logger.error(f"Single-pass accumulation failed: {exc!r}")
            raise WorkerFailureError(0, 1, exc) from exc

    logger.debug(
        f"Dispatching {len(bounds)} partitions on {executor.value} executor: "
        f"{[stop - start for start, stop in bounds]}"
    )

    partials: List[PartialGrid] = []
    with _create_executor(executor, len(bounds)) as pool:
        futures = [
            pool.submit(accumulate, samples.slice(start, stop), bbox, spec)
            for start, stop in bounds
        ]
        for index, future in enumerate(futures):
            try:
                partials.append(future.result())
            except Exception as exc:
                for pending in futures:
                    pending.cancel()
                logger.error(
                    f"Partition {index}/{len(futures)} failed, "
                    f"aborting run: {exc!r}"
                )
                raise WorkerFailureError(index, len(futures), exc) from exc

    return partials
