"""
Accumulator Tests
=================

Per-partition (sum, count) accumulation.
"""

import numpy as np
import pytest

from torque_grid.binning import accumulate, map_sample
from torque_grid.models import PartialGrid, SampleBatch


class TestAccumulate:
    """Tests for accumulate()."""

    def test_scenario_sums_and_counts(self, scenario_samples, small_bbox, small_spec):
        """Verify the reference scenario accumulates as expected."""
        grid = accumulate(scenario_samples, small_bbox, small_spec)

        assert isinstance(grid, PartialGrid)
        assert grid.resolution == 2
        assert grid.counts.tolist() == [2, 0, 0, 1]
        assert grid.sums.tolist() == [6.0, 0.0, 0.0, 10.0]

    def test_dtypes_and_shape(self, scenario_samples, small_bbox, small_spec):
        """Verify grid layout is flat resolution² with float sums, uint counts."""
        grid = accumulate(scenario_samples, small_bbox, small_spec)

        assert grid.sums.shape == (4,)
        assert grid.counts.shape == (4,)
        assert grid.sums.dtype == np.float64
        assert grid.counts.dtype == np.uint64

    def test_empty_slice_yields_zero_grid(self, small_bbox, small_spec):
        """Verify an empty slice produces an all-zero grid."""
        grid = accumulate(SampleBatch.empty(), small_bbox, small_spec)

        assert grid.total_count == 0
        assert grid.total_sum == 0.0
        assert grid.sums.shape == (4,)

    def test_outside_samples_skipped(self, small_bbox, small_spec):
        """Verify out-of-bounds and edge samples contribute nothing."""
        batch = SampleBatch(
            x=[0.0, 10.0, -5.0, 3.0],
            y=[3.0, 3.0, 3.0, 10.0],
            amount=[1.0, 2.0, 3.0, 4.0],
        )

        grid = accumulate(batch, small_bbox, small_spec)

        assert grid.total_count == 0
        assert grid.total_sum == 0.0

    def test_matches_per_sample_loop(self, random_samples, wide_bbox, wide_spec):
        """Verify vectorized accumulation equals a plain loop over samples."""
        sums = np.zeros(wide_spec.cell_count)
        counts = np.zeros(wide_spec.cell_count, dtype=np.uint64)
        for sample in random_samples:
            idx = map_sample(sample, wide_bbox, wide_spec)
            if idx is not None:
                counts[idx] += 1
                sums[idx] += sample.amount

        grid = accumulate(random_samples, wide_bbox, wide_spec)

        np.testing.assert_array_equal(grid.counts, counts)
        np.testing.assert_allclose(grid.sums, sums, rtol=1e-12)

    def test_does_not_modify_input(self, random_samples, wide_bbox, wide_spec):
        """Verify the input columns are untouched and still read-only."""
        before = random_samples.amount.copy()

        accumulate(random_samples, wide_bbox, wide_spec)

        np.testing.assert_array_equal(random_samples.amount, before)
        assert not random_samples.amount.flags.writeable

    def test_non_finite_amounts_skipped(self, small_bbox, small_spec):
        """Verify NaN and infinite amounts are dropped, not summed."""
        batch = SampleBatch(
            x=[1.0, 1.0, 9.0, 9.0],
            y=[1.0, 1.0, 9.0, 9.0],
            amount=[float("nan"), 2.0, float("inf"), 10.0],
        )

        grid = accumulate(batch, small_bbox, small_spec)

        assert grid.counts.tolist() == [1, 0, 0, 1]
        assert grid.sums.tolist() == [2.0, 0.0, 0.0, 10.0]
        assert grid.exponent == 0

    def test_huge_totals_are_scaled(self, small_bbox, small_spec):
        """Verify a cell total beyond float64 is stored scaled, not as inf."""
        batch = SampleBatch(x=[1.0, 1.0], y=[1.0, 1.0], amount=[1e308, 1e308])

        grid = accumulate(batch, small_bbox, small_spec)

        assert np.isfinite(grid.sums).all()
        assert grid.exponent > 0
        assert np.ldexp(grid.sums[0], grid.exponent - 1) == pytest.approx(1e308)
        assert grid.counts.tolist() == [2, 0, 0, 0]
