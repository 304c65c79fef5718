"""
I/O Tests
=========

Record loader and greymap writer.
"""

import io

import numpy as np
import pytest

from torque_grid.io import parse_lines, read_samples, save_pgm, write_pgm
from torque_grid.models import IntensityGrid


class TestLoader:
    """Tests for the 'amount y x' loader."""

    def test_column_order(self):
        """Verify columns are read as amount, y, x."""
        batch = parse_lines(["7.5 2.0 3.0\n"])

        sample = next(iter(batch))
        assert (sample.amount, sample.y, sample.x) == (7.5, 2.0, 3.0)

    def test_preserves_order(self):
        """Verify records keep file order."""
        batch = parse_lines(["1 0 0", "2 0 0", "3 0 0"])
        assert batch.amount.tolist() == [1.0, 2.0, 3.0]

    def test_stops_at_first_bad_line(self):
        """Verify a malformed line ends the data set."""
        batch = parse_lines(["1 2 3", "4 5 6", "oops", "7 8 9"])
        assert len(batch) == 2

    def test_stops_at_short_line(self):
        """Verify a line with fewer than three fields ends the data set."""
        batch = parse_lines(["1 2 3", "4 5", "7 8 9"])
        assert len(batch) == 1

    def test_extra_columns_ignored(self):
        """Verify trailing fields do not break parsing."""
        batch = parse_lines(["1 2 3 extra"])
        assert len(batch) == 1

    def test_scientific_notation_and_tabs(self):
        """Verify any whitespace and float syntax is accepted."""
        batch = parse_lines(["1e3\t-8.2e6\t4.98e6"])
        assert batch.amount[0] == 1000.0
        assert batch.y[0] == -8.2e6
        assert batch.x[0] == 4.98e6

    def test_read_file(self, scenario_records):
        """Verify read_samples loads a file from disk."""
        batch = read_samples(scenario_records)

        assert len(batch) == 3
        assert batch.x.tolist() == [1.0, 1.0, 9.0]
        assert batch.amount.tolist() == [2.0, 4.0, 10.0]

    def test_missing_file(self, tmp_path):
        """Verify a missing file raises."""
        with pytest.raises(FileNotFoundError):
            read_samples(tmp_path / "absent.csv")

    def test_empty_file(self, tmp_path):
        """Verify an empty file yields an empty batch."""
        path = tmp_path / "empty.csv"
        path.write_text("")
        assert len(read_samples(path)) == 0


class TestPgmWriter:
    """Tests for the P2 greymap writer."""

    @pytest.fixture
    def image(self):
        # Storage order [cell_x, cell_y]: [[210, 15], [15, 255]]
        return IntensityGrid(resolution=2, values=np.array([210, 15, 15, 255]))

    def test_format(self, image):
        """Verify header and row-inverted body."""
        out = io.StringIO()

        write_pgm(image, out)

        assert out.getvalue() == "P2\n2 2\n256\n15 255 \n210 15 \n"

    def test_custom_maxval(self, image):
        """Verify the header max value is configurable."""
        out = io.StringIO()

        write_pgm(image, out, maxval=255)

        assert out.getvalue().splitlines()[2] == "255"

    def test_save_to_file(self, image, tmp_path):
        """Verify save_pgm writes the same text to disk."""
        path = save_pgm(image, tmp_path / "tile.pgm")
        assert path.read_text() == "P2\n2 2\n256\n15 255 \n210 15 \n"
