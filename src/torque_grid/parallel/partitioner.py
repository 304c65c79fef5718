"""
Partitioner
===========

Splits a record count into contiguous, non-overlapping slices.

Scheme:
    size = total // worker_count
    slice i = [i * size, (i + 1) * size)
    the LAST slice runs to total and absorbs the remainder

Truncating the last slice to `size` would silently drop up to
worker_count - 1 trailing records.

Worker count 0 and 1 both yield a single slice over everything.
"""

from typing import List, Tuple

from torque_grid.errors import MisconfiguredGridError


def partition_bounds(total: int, worker_count: int) -> List[Tuple[int, int]]:
    """
    Compute [start, stop) bounds for each worker.

    Args:
        total: Number of records
        worker_count: Fixed number of workers (>= 0)

    Returns:
        One (start, stop) pair per worker, in worker-index order.
        Slices may be empty when total < worker_count.
    """
    if worker_count < 0:
        raise MisconfiguredGridError(
            f"worker_count must be >= 0, got {worker_count}"
        )
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")

    workers = max(worker_count, 1)
    size = total // workers

    bounds = [(i * size, (i + 1) * size) for i in range(workers)]
    last_start, _ = bounds[-1]
    bounds[-1] = (last_start, total)
    return bounds
