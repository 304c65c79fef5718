"""
Parallel Module
===============

Partitioning and fork-join scheduling of accumulation work.
"""

from torque_grid.parallel.partitioner import partition_bounds
from torque_grid.parallel.scheduler import ExecutorKind, run_partitions

__all__ = ["ExecutorKind", "partition_bounds", "run_partitions"]
