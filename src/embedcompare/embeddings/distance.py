"""Vector distance math and helpers for pasted embeddings."""

import json
import math
from collections.abc import Sequence

import numpy as np

from ..errors import DimensionMismatch, InvalidEmbedding, ZeroMagnitude
from .models import Embedding


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Calculate cosine distance between two embeddings.

    Args:
        a: First embedding vector
        b: Second embedding vector, same length as ``a``

    Returns:
        ``1 - cos(a, b)``. Not clamped, so the result lies in [0, 2].

    Raises:
        DimensionMismatch: If the vectors have different lengths
        ZeroMagnitude: If either vector has zero magnitude
    """
    vector_a = np.asarray(a, dtype=np.float64).ravel()
    vector_b = np.asarray(b, dtype=np.float64).ravel()

    if vector_a.shape != vector_b.shape:
        raise DimensionMismatch(len(vector_a), len(vector_b))

    magnitude_a = math.sqrt(float(np.dot(vector_a, vector_a)))
    magnitude_b = math.sqrt(float(np.dot(vector_b, vector_b)))
    if magnitude_a == 0.0 or magnitude_b == 0.0:
        raise ZeroMagnitude()

    similarity = float(np.dot(vector_a, vector_b)) / (magnitude_a * magnitude_b)
    return 1.0 - similarity


def similarity_percent(distance: float) -> float:
    """Convert a cosine distance to the similarity percentage shown to users."""
    return (1.0 - distance) * 100.0


def parse_embedding(text: str) -> Embedding:
    """Parse a pasted JSON array into an embedding.

    Args:
        text: JSON array text such as ``"[0.1, -0.2, 0.3]"``

    Returns:
        Float64 numpy array

    Raises:
        InvalidEmbedding: If the text is not a non-empty array of finite numbers
    """
    try:
        parsed = json.loads(text.strip())
    except json.JSONDecodeError as e:
        raise InvalidEmbedding(
            "Invalid JSON format. Please paste a valid JSON array.", e
        ) from e

    if not isinstance(parsed, list):
        raise InvalidEmbedding("Embedding must be an array")

    if not parsed:
        raise InvalidEmbedding("Embedding cannot be empty")

    # bool is an int subclass but never a valid component
    if any(
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        for value in parsed
    ):
        raise InvalidEmbedding("Embedding must contain only finite numbers")

    return np.asarray(parsed, dtype=np.float64)


def format_embedding(embedding: Sequence[float], max_display: int = 5) -> str:
    """Format an embedding preview with 4 decimal places.

    Args:
        embedding: Vector to preview
        max_display: Number of leading components to show

    Returns:
        String like ``[0.1234, -0.5678, ...]``
    """
    values = [f"{float(n):.4f}" for n in list(embedding)[:max_display]]
    if len(embedding) <= max_display:
        return f"[{', '.join(values)}]"
    return f"[{', '.join(values)}, ...]"
