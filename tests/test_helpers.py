"""Test helpers: in-process embedding providers with known geometry."""

import asyncio
import math

import numpy as np

from embedcompare.errors import ProviderError
from embedcompare.providers.base import EmbeddingProvider


def vector_at_distance(distance: float) -> list[float]:
    """Unit vector whose cosine distance from [1, 0] is ``distance``."""
    cosine = 1.0 - distance
    return [cosine, math.sqrt(max(0.0, 1.0 - cosine * cosine))]


class FakeEmbeddingProvider(EmbeddingProvider):
    """Provider returning fixed vectors.

    Vectors are looked up by (text, model) first, then by text alone.
    Models or (text, model) keys listed in ``failures`` raise ProviderError.
    """

    def __init__(
        self,
        vectors: dict,
        failures: dict | None = None,
    ) -> None:
        self.vectors = vectors
        self.failures = failures or {}
        self.calls: list[tuple[str, str]] = []

    async def generate(self, text: str, model: str) -> np.ndarray:
        self.calls.append((text, model))
        await asyncio.sleep(0)
        for key in ((text, model), model):
            if key in self.failures:
                raise ProviderError(self.failures[key])
        if (text, model) in self.vectors:
            return np.asarray(self.vectors[(text, model)], dtype=np.float64)
        return np.asarray(self.vectors[text], dtype=np.float64)


class GatedEmbeddingProvider(FakeEmbeddingProvider):
    """Fake provider that holds every fetch until ``release`` is set."""

    def __init__(self, vectors: dict, failures: dict | None = None) -> None:
        super().__init__(vectors, failures)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, text: str, model: str) -> np.ndarray:
        self.started.set()
        await self.release.wait()
        return await super().generate(text, model)
