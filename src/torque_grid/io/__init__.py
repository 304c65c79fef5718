"""
I/O Module
==========

Text record input and greymap output. Neither is used by the engine
itself; they sit on either side of it.
"""

from torque_grid.io.loader import parse_lines, read_samples
from torque_grid.io.pgm import DEFAULT_MAXVAL, save_pgm, write_pgm

__all__ = [
    "parse_lines",
    "read_samples",
    "write_pgm",
    "save_pgm",
    "DEFAULT_MAXVAL",
]
