"""Embedding models and constants for pairwise comparison."""

from dataclasses import dataclass
from typing import TypeAlias

import numpy as np

# Type aliases for clarity
Embedding: TypeAlias = np.ndarray  # Shape: (dimensions,)
ModelId: TypeAlias = str


@dataclass(frozen=True)
class ModelSpec:
    """Catalog entry for a supported embedding model.

    Attributes:
        model_id: Identifier passed to the provider
        provider: Registered provider name that serves this model
        dimensions: Output dimensionality the provider returns
        label: Human-readable description for listings
    """

    model_id: ModelId
    provider: str
    dimensions: int
    label: str


# text-embedding-3-large is requested at half its native 3072 dimensions
OPENAI_LARGE_DIMENSIONS = 1536

MODEL_CATALOG: dict[ModelId, ModelSpec] = {
    spec.model_id: spec
    for spec in (
        ModelSpec(
            "text-embedding-3-small",
            "openai",
            1536,
            "text-embedding-3-small (1536 dim, $0.02/1M tokens)",
        ),
        ModelSpec(
            "text-embedding-3-large",
            "openai",
            OPENAI_LARGE_DIMENSIONS,
            "text-embedding-3-large (1536 of 3072 dim, $0.13/1M tokens)",
        ),
        ModelSpec(
            "text-embedding-ada-002",
            "openai",
            1536,
            "text-embedding-ada-002 (1536 dim, $0.10/1M tokens)",
        ),
        ModelSpec(
            "BAAI/bge-small-en-v1.5",
            "local",
            384,
            "BAAI/bge-small-en-v1.5 (384 dim, local sentence-transformers)",
        ),
    )
}
