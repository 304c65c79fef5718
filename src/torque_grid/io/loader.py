"""
Record Loader
=============

Reads samples from a whitespace-separated text file.

Line format (column order matters):
    amount y x

Parsing stops at the first line that is not three numbers, so a
truncated or corrupt tail ends the data set rather than failing the
load. Extra trailing columns are ignored.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

import numpy as np

from torque_grid.models.samples import SampleBatch


logger = logging.getLogger(__name__)


def parse_lines(lines: Iterable[str]) -> SampleBatch:
    """
    Parse 'amount y x' lines into a SampleBatch.

    Args:
        lines: Text lines (trailing newlines allowed)

    Returns:
        SampleBatch in input order
    """
    amounts: List[float] = []
    ys: List[float] = []
    xs: List[float] = []

    for line_number, line in enumerate(lines, start=1):
        fields = line.split()
        try:
            amount, y, x = (float(v) for v in fields[:3])
        except ValueError:
            logger.warning(
                f"Stopping at line {line_number}: cannot parse {line.strip()!r}"
            )
            break
        amounts.append(amount)
        ys.append(y)
        xs.append(x)

    return SampleBatch(
        np.asarray(xs, dtype=np.float64),
        np.asarray(ys, dtype=np.float64),
        np.asarray(amounts, dtype=np.float64),
    )


def read_samples(path: Union[str, Path]) -> SampleBatch:
    """
    Load a record file.

    Args:
        path: Path to the text file

    Returns:
        SampleBatch in file order

    Raises:
        FileNotFoundError: If path does not exist
    """
    path = Path(path)
    with open(path, "r") as f:
        batch = parse_lines(f)

    logger.info(f"Loaded {len(batch)} rows from {path}")
    return batch
