"""Local embedding generation using sentence-transformers."""

import asyncio
import logging
from typing import TYPE_CHECKING

import numpy as np

from ..embeddings.models import Embedding
from ..errors import ProviderError
from .base import EmbeddingProvider

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


def resolve_device(device: str) -> str | None:
    """Map the configured device to a sentence-transformers argument.

    "auto" lets sentence-transformers pick (cuda, mps or cpu).
    """
    return None if device == "auto" else device


class SentenceTransformerProvider(EmbeddingProvider):
    """Generate embeddings locally with sentence-transformers.

    Models such as BAAI/bge-small-en-v1.5 are downloaded from the Hugging
    Face hub on first use and kept warm in memory, one instance per model.
    """

    def __init__(self, device: str = "auto") -> None:
        self.device = device
        self._models: dict[str, "SentenceTransformer"] = {}

    def _load(self, model: str) -> "SentenceTransformer":
        """Lazy-load a model only when actually needed."""
        if model not in self._models:
            # Import here to avoid loading torch at module import time
            from sentence_transformers import SentenceTransformer

            logger.debug(f"Loading sentence-transformers model {model}")
            self._models[model] = SentenceTransformer(
                model, device=resolve_device(self.device)
            )
        return self._models[model]

    async def generate(self, text: str, model: str) -> Embedding:
        """Embed text with a local sentence-transformers model.

        Raises:
            ProviderError: If the model cannot be loaded or encoding fails
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        def _sync_encode() -> np.ndarray:
            return self._load(model).encode(
                [text],
                convert_to_numpy=True,
                normalize_embeddings=True,  # Normalize for cosine similarity
            )[0]

        try:
            embedding = await asyncio.to_thread(_sync_encode)
        except Exception as e:
            raise ProviderError(f"Local model {model} failed: {e}", None, e) from e

        return np.asarray(embedding, dtype=np.float64)
