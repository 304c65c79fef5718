"""
Greymap Writer
==============

Writes an IntensityGrid as a plain (ASCII) PGM image.

Layout:
    P2
    <resolution> <resolution>
    <maxval>
    one line per row, rendering order, each value followed by a space

The header max value defaults to 256 so output stays byte-compatible
with previously published tiles.
"""

import logging
from pathlib import Path
from typing import TextIO, Union

from torque_grid.models.grid import IntensityGrid


logger = logging.getLogger(__name__)


DEFAULT_MAXVAL = 256


def write_pgm(
    grid: IntensityGrid,
    stream: TextIO,
    maxval: int = DEFAULT_MAXVAL,
) -> None:
    """
    Write a greymap to an open text stream.

    Args:
        grid: Intensities to write
        stream: Writable text stream
        maxval: Value written in the header
    """
    stream.write("P2\n")
    stream.write(f"{grid.resolution} {grid.resolution}\n")
    stream.write(f"{maxval}\n")

    for row in grid.rows():
        stream.write("".join(f"{int(v)} " for v in row))
        stream.write("\n")


def save_pgm(
    grid: IntensityGrid,
    path: Union[str, Path],
    maxval: int = DEFAULT_MAXVAL,
) -> Path:
    """Write a greymap to a file and return its path."""
    path = Path(path)
    with open(path, "w") as f:
        write_pgm(grid, f, maxval=maxval)
    logger.info(f"Wrote {grid.resolution}x{grid.resolution} greymap to {path}")
    return path
