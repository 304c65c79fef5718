"""
Error Taxonomy
==============

Exceptions raised by the aggregation engine.

Only three conditions are errors. Out-of-bounds samples and zero-count
cells are normal and never raise.

    - EmptyInputError: nothing landed in the grid (strict mode only)
    - MisconfiguredGridError: grid cannot hold any valid cell index
    - WorkerFailureError: a partition task failed, the run is void
"""

from typing import Optional


class TorqueGridError(Exception):
    """Base class for all engine errors."""


class EmptyInputError(TorqueGridError):
    """No in-bounds samples, or no cell with positive weight."""


class MisconfiguredGridError(TorqueGridError, ValueError):
    """Grid or partition configuration is unusable."""


class WorkerFailureError(TorqueGridError):
    """
    A concurrent accumulation task terminated abnormally.

    The whole aggregation is invalid: a missing partition would silently
    corrupt every cell count, so no partial result is ever returned.

    Attributes:
        partition: Index of the failed partition
        worker_count: Number of partitions in the run
    """

    def __init__(
        self,
        partition: int,
        worker_count: int,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.partition = partition
        self.worker_count = worker_count
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(
            f"Partition {partition}/{worker_count} failed{detail}"
        )
