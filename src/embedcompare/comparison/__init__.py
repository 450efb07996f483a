"""Pairwise comparison state: distances, labels and derived statistics."""

from .labels import RelatednessLabels, parse_related_label
from .matrix import DistanceMatrix
from .models import (
    UNSET,
    BoxPlotStats,
    DistanceEntry,
    EntryState,
    ModelSummary,
    TextPair,
)
from .orchestrator import ComparisonOrchestrator
from .stats import ThresholdEngine, summarize, threshold_from_distances

__all__ = [
    "UNSET",
    "BoxPlotStats",
    "ComparisonOrchestrator",
    "DistanceEntry",
    "DistanceMatrix",
    "EntryState",
    "ModelSummary",
    "RelatednessLabels",
    "TextPair",
    "ThresholdEngine",
    "parse_related_label",
    "summarize",
    "threshold_from_distances",
]
