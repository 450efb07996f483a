"""Core functionality for embedcompare - runs comparisons end to end."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .comparison.orchestrator import ComparisonOrchestrator
from .csv_io import ImportedRow, read_pairs, write_csv
from .embeddings.distance import cosine_distance, parse_embedding, similarity_percent
from .embeddings.models import MODEL_CATALOG, ModelSpec
from .providers.base import EmbeddingProvider
from .report import write_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistanceResult:
    """Result of comparing two pasted embeddings."""

    distance: float
    similarity: float
    dimensions: str


def list_models() -> list[ModelSpec]:
    """Return the supported models in catalog order."""
    return list(MODEL_CATALOG.values())


def calculate_distance(embedding_a: str, embedding_b: str) -> DistanceResult:
    """Calculate cosine distance between two JSON-array embeddings.

    Raises:
        InvalidEmbedding: If either embedding cannot be parsed
        DimensionMismatch: If the embeddings have different lengths
        ZeroMagnitude: If either embedding is the zero vector
    """
    vector_a = parse_embedding(embedding_a)
    vector_b = parse_embedding(embedding_b)
    distance = cosine_distance(vector_a, vector_b)
    return DistanceResult(
        distance=distance,
        similarity=similarity_percent(distance),
        dimensions=f"{len(vector_a)} × {len(vector_b)}",
    )


async def run_comparison(
    rows: Sequence[ImportedRow],
    models: Sequence[str | None],
    provider: EmbeddingProvider,
) -> ComparisonOrchestrator:
    """Compute distances for every pair under every model.

    Args:
        rows: Imported (query, stored, related) rows
        models: Models to bind to the comparison slots
        provider: Embedding provider collaborator

    Returns:
        Orchestrator holding the computed matrix and labels

    Raises:
        ValueError: If no model is selected or no pair has both texts
    """
    orchestrator = ComparisonOrchestrator(provider, models)
    if not orchestrator.active_models():
        raise ValueError("Please select at least one model to compare")

    orchestrator.bulk_import(rows)
    if not any(pair.is_complete for pair in orchestrator.pairs):
        raise ValueError(
            "Please enter both query and stored text for at least one row"
        )

    computed = await orchestrator.recompute()
    logger.info(
        f"Calculated distances for {len(orchestrator.active_models())} models "
        f"across {computed} slots"
    )
    return orchestrator


async def compare_csv(
    input_path: Path | str,
    models: Sequence[str | None],
    provider: EmbeddingProvider,
    output_path: Path | str | None = None,
    report_path: Path | str | None = None,
) -> ComparisonOrchestrator:
    """Import a CSV, compute all distances and optionally export results.

    Raises:
        ImportFormatError: If the input file cannot be read
        ValueError: If no model is selected or no pair has both texts
        OSError: If writing an output file fails
    """
    rows = read_pairs(input_path)
    orchestrator = await run_comparison(rows, models, provider)

    if output_path:
        write_csv(orchestrator, output_path)
    if report_path:
        write_report(orchestrator.summary(), report_path)
    return orchestrator
