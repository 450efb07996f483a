"""Unit tests for threshold derivation and box-plot summaries."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from embedcompare.comparison.labels import RelatednessLabels
from embedcompare.comparison.matrix import DistanceMatrix
from embedcompare.comparison.models import BoxPlotStats
from embedcompare.comparison.stats import (
    ThresholdEngine,
    summarize,
    threshold_from_distances,
)


class TestThresholdFromDistances:
    """Test the max-plus-epsilon threshold rule."""

    def test_max_plus_epsilon_rounded(self) -> None:
        """Test threshold of [0.10, 0.25, 0.18] is 0.2510."""
        assert threshold_from_distances([0.10, 0.25, 0.18]) == 0.251

    def test_single_value(self) -> None:
        """Test that one related value gives value + 0.001."""
        assert threshold_from_distances([0.05]) == 0.051

    def test_empty_is_none(self) -> None:
        """Test that no related distances gives no threshold."""
        assert threshold_from_distances([]) is None

    def test_rounds_to_four_decimals(self) -> None:
        """Test rounding of values with more precision."""
        assert threshold_from_distances([0.123456]) == 0.1245
        assert threshold_from_distances([0.30004]) == 0.301

    def test_rounds_to_nearest(self) -> None:
        """Test rounding up past the half and down below it."""
        assert threshold_from_distances([0.0000501]) == pytest.approx(0.0011)
        assert threshold_from_distances([0.0000499]) == pytest.approx(0.001)

    def test_accepts_generator(self) -> None:
        """Test that any iterable of floats works."""
        assert threshold_from_distances(x / 10 for x in range(3)) == 0.201


class TestSummarize:
    """Test nearest-rank five-number summaries."""

    def test_even_count_example(self) -> None:
        """Test [1..8] uses floor(n*p) indices without interpolation."""
        stats = summarize([1, 2, 3, 4, 5, 6, 7, 8])
        assert stats == BoxPlotStats(min=1, q1=3, median=5, q3=7, max=8, count=8)

    def test_unsorted_input(self) -> None:
        """Test that input is sorted before picking ranks."""
        stats = summarize([0.9, 0.1, 0.5, 0.3, 0.7])
        assert stats.min == 0.1
        assert stats.q1 == 0.3  # sorted[1]
        assert stats.median == 0.5  # sorted[2]
        assert stats.q3 == 0.7  # sorted[3]
        assert stats.max == 0.9
        assert stats.count == 5

    def test_single_value(self) -> None:
        """Test that one value fills every statistic."""
        stats = summarize([0.8])
        assert stats == BoxPlotStats(0.8, 0.8, 0.8, 0.8, 0.8, 1)

    def test_empty_is_none(self) -> None:
        """Test that empty input has no summary."""
        assert summarize([]) is None


class TestThresholdEngine:
    """Test statistics derived from matrix and labels."""

    def setup_method(self) -> None:
        """Set up related pairs 0-2 and unrelated pairs 3-4 for model M."""
        self.matrix = DistanceMatrix()
        self.labels = RelatednessLabels()
        self.engine = ThresholdEngine(self.matrix, self.labels)

        for pair_index, distance in enumerate([0.10, 0.25, 0.18, 0.70, 0.20]):
            self.matrix.set_value(pair_index, "M", distance)
        for pair_index in (0, 1, 2):
            self.labels.set(pair_index, True)

    def test_threshold_uses_related_only(self) -> None:
        """Test that unrelated distances do not affect the threshold."""
        assert self.engine.compute_threshold("M") == 0.251

    def test_threshold_is_idempotent(self) -> None:
        """Test that repeated reads without changes agree."""
        assert self.engine.compute_threshold("M") == self.engine.compute_threshold("M")

    def test_threshold_follows_label_changes(self) -> None:
        """Test that a label toggle is reflected on the next read."""
        self.labels.set(1, False)
        assert self.engine.compute_threshold("M") == 0.181

        self.labels.set(3, True)
        assert self.engine.compute_threshold("M") == 0.701

    def test_threshold_follows_matrix_changes(self) -> None:
        """Test that new and invalidated values are reflected."""
        self.matrix.invalidate(1)
        assert self.engine.compute_threshold("M") == 0.181

        self.matrix.set_value(1, "M", 0.3)
        assert self.engine.compute_threshold("M") == 0.301

    def test_no_related_values_is_none(self) -> None:
        """Test that a model without related values has no threshold."""
        self.labels.bulk_load({})
        assert self.engine.compute_threshold("M") is None
        assert self.engine.compute_threshold("other") is None

    def test_pending_and_error_related_entries_ignored(self) -> None:
        """Test that only VALUE entries anchor the threshold."""
        self.matrix.set_pending(1, "M")
        self.matrix.set_error(2, "M", "boom")
        assert self.engine.compute_threshold("M") == 0.101

    def test_box_plots_split_by_class(self) -> None:
        """Test that related and unrelated boxes use disjoint subsets."""
        related = self.engine.box_plot("M", related=True)
        unrelated = self.engine.box_plot("M", related=False)

        assert related.count == 3
        assert related.min == 0.10
        assert related.median == 0.18
        assert unrelated.count == 2
        assert unrelated.min == 0.20
        assert unrelated.max == 0.70

    def test_box_plot_models_are_independent(self) -> None:
        """Test that another model's values never leak in."""
        self.matrix.set_value(0, "N", 0.99)
        assert self.engine.box_plot("M", related=True).max == 0.25
        assert self.engine.box_plot("N", related=True).count == 1
        assert self.engine.box_plot("N", related=False) is None
