"""Threshold derivation and box-plot summaries over the distance matrix.

Nothing here is cached: every read recomputes from the current matrix and
labels, so a threshold can never be stale after a label toggle or a new
distance value.
"""

import math
from collections.abc import Iterable

from .labels import RelatednessLabels
from .matrix import DistanceMatrix
from .models import BoxPlotStats

# Buffer added above the largest related distance
THRESHOLD_EPSILON = 0.001
THRESHOLD_DECIMALS = 4


def _round_half_up(value: float, decimals: int = THRESHOLD_DECIMALS) -> float:
    scale = 10**decimals
    return math.floor(value * scale + 0.5) / scale


def threshold_from_distances(related_distances: Iterable[float]) -> float | None:
    """Compute the one-sided separating threshold for related distances.

    The threshold sits just above the largest related distance so that no
    related pair is classified as unrelated. The unrelated distribution is
    not considered, so the threshold may still overlap unrelated distances.

    Args:
        related_distances: Distances of pairs labeled related

    Returns:
        ``max + 0.001`` rounded to 4 decimals, or None if there are none
    """
    largest = max(related_distances, default=None)
    if largest is None:
        return None
    return _round_half_up(largest + THRESHOLD_EPSILON)


def summarize(distances: Iterable[float]) -> BoxPlotStats | None:
    """Compute a five-number summary using nearest-rank quantiles.

    Quantiles are read straight from the sorted values at
    ``floor(n * p)`` without interpolation.

    Returns:
        BoxPlotStats, or None for empty input
    """
    ordered = sorted(distances)
    n = len(ordered)
    if n == 0:
        return None
    return BoxPlotStats(
        min=ordered[0],
        q1=ordered[math.floor(n * 0.25)],
        median=ordered[math.floor(n * 0.5)],
        q3=ordered[math.floor(n * 0.75)],
        max=ordered[n - 1],
        count=n,
    )


class ThresholdEngine:
    """Derive per-model statistics from a DistanceMatrix and its labels."""

    def __init__(self, matrix: DistanceMatrix, labels: RelatednessLabels) -> None:
        self.matrix = matrix
        self.labels = labels

    def distances(self, model: str, related: bool) -> list[float]:
        """Computed distances of one relatedness class for a model."""
        return list(
            self.matrix.values_for(
                model, lambda pair_index: self.labels.get(pair_index) is related
            )
        )

    def compute_threshold(self, model: str) -> float | None:
        return threshold_from_distances(self.distances(model, related=True))

    def box_plot(self, model: str, related: bool) -> BoxPlotStats | None:
        return summarize(self.distances(model, related))
