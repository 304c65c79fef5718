"""
Test Configuration
==================

Pytest fixtures and test configuration for torque-grid.
"""

import numpy as np
import pytest

from torque_grid.models import BoundingBox, GridSpec, Sample, SampleBatch


@pytest.fixture
def small_bbox():
    """Provide the 10x10 box used by the reference scenario."""
    return BoundingBox(min_x=0.0, min_y=0.0, max_x=10.0, max_y=10.0)


@pytest.fixture
def small_spec():
    """Provide a 2x2 grid with 5-unit cells."""
    return GridSpec(resolution=2, cell_size=5.0)


@pytest.fixture
def scenario_samples():
    """Provide the three-sample reference scenario."""
    return SampleBatch.from_samples([
        Sample(x=1.0, y=1.0, amount=2.0),
        Sample(x=1.0, y=1.0, amount=4.0),
        Sample(x=9.0, y=9.0, amount=10.0),
    ])


@pytest.fixture
def random_samples():
    """
    Provide 10_007 deterministic samples over a 100x100 box.

    About a tenth fall outside the box, a handful sit exactly on its
    edges, and the count is prime so no worker count divides it evenly.
    """
    rng = np.random.default_rng(42)
    n = 10_007
    x = rng.uniform(-10.0, 110.0, n)
    y = rng.uniform(-10.0, 110.0, n)
    amount = rng.exponential(5.0, n)

    # Pin a few samples onto each edge
    x[:5] = 0.0
    x[5:10] = 100.0
    y[10:15] = 0.0
    y[15:20] = 100.0

    return SampleBatch(x, y, amount)


@pytest.fixture
def wide_bbox():
    """Provide the 100x100 box for random_samples."""
    return BoundingBox(min_x=0.0, min_y=0.0, max_x=100.0, max_y=100.0)


@pytest.fixture
def wide_spec():
    """Provide a 16x16 grid over wide_bbox."""
    return GridSpec(resolution=16, cell_size=6.25)


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Provide a config file describing the reference scenario."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "bbox:\n"
        "  min_x: 0\n"
        "  min_y: 0\n"
        "  max_x: 10\n"
        "  max_y: 10\n"
        "grid:\n"
        "  resolution: 2\n"
        "  cell_size: 5\n"
        "workers:\n"
        "  count: 2\n"
        "  executor: thread\n"
    )
    return path


@pytest.fixture
def scenario_records(tmp_path):
    """Provide the reference scenario as an 'amount y x' record file."""
    path = tmp_path / "tile.csv"
    path.write_text("2 1 1\n4 1 1\n10 9 9\n")
    return path
