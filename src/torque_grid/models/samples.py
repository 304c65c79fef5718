"""
Sample Models
=============

Input records for the aggregation engine.

A run owns one SampleBatch: a column-oriented, read-only view over all
records. Workers receive contiguous slices of it. Slicing never copies,
so every worker reads the same underlying arrays.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator

import numpy as np


@dataclass(frozen=True, slots=True)
class Sample:
    """
    One geotagged numeric record.

    Attributes:
        x: Horizontal coordinate (map units)
        y: Vertical coordinate (map units)
        amount: Value to aggregate
    """

    x: float
    y: float
    amount: float


class SampleBatch:
    """
    Immutable columnar collection of samples.

    Attributes:
        x: float64 array of x coordinates
        y: float64 array of y coordinates
        amount: float64 array of amounts

    Example:
        batch = SampleBatch.from_samples([Sample(1.0, 1.0, 2.0)])
        head = batch.slice(0, 1)
    """

    __slots__ = ("x", "y", "amount")

    def __init__(self, x, y, amount) -> None:
        # Read-only views; the batch is shared between workers
        x = np.asarray(x, dtype=np.float64).view()
        y = np.asarray(y, dtype=np.float64).view()
        amount = np.asarray(amount, dtype=np.float64).view()

        if x.ndim != 1 or y.ndim != 1 or amount.ndim != 1:
            raise ValueError("sample columns must be one-dimensional")
        if not (len(x) == len(y) == len(amount)):
            raise ValueError(
                f"sample columns differ in length: "
                f"x={len(x)}, y={len(y)}, amount={len(amount)}"
            )

        for column in (x, y, amount):
            column.flags.writeable = False

        self.x = x
        self.y = y
        self.amount = amount

    @classmethod
    def from_samples(cls, samples: Iterable[Sample]) -> "SampleBatch":
        """Build a batch from Sample records, preserving order."""
        rows = [(s.x, s.y, s.amount) for s in samples]
        if not rows:
            return cls.empty()
        data = np.asarray(rows, dtype=np.float64)
        return cls(data[:, 0].copy(), data[:, 1].copy(), data[:, 2].copy())

    @classmethod
    def empty(cls) -> "SampleBatch":
        return cls(np.empty(0), np.empty(0), np.empty(0))

    def slice(self, start: int, stop: int) -> "SampleBatch":
        """Contiguous view of records [start, stop)."""
        return SampleBatch(
            self.x[start:stop],
            self.y[start:stop],
            self.amount[start:stop],
        )

    def scaled(self, factor: float) -> "SampleBatch":
        """Copy with every amount multiplied by factor."""
        return SampleBatch(self.x, self.y, self.amount * factor)

    def __len__(self) -> int:
        return len(self.amount)

    def __iter__(self) -> Iterator[Sample]:
        for x, y, amount in zip(self.x, self.y, self.amount):
            yield Sample(float(x), float(y), float(amount))

    def __repr__(self) -> str:
        return f"SampleBatch(n={len(self)})"
