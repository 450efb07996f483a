"""Abstract base class for embedding providers.

This module defines the interface that all embedding providers must
implement, ensuring consistent behavior across different embedding backends.
"""

from abc import ABC, abstractmethod

from ..embeddings.models import Embedding


class EmbeddingProvider(ABC):
    """Abstract base class for embedding providers.

    All providers must inherit from this class and implement ``generate``.
    Providers do not retry; a failed call raises ProviderError and the
    caller decides whether to try again.
    """

    @abstractmethod
    async def generate(self, text: str, model: str) -> Embedding:
        """Convert text to an embedding vector.

        Args:
            text: The text to embed
            model: Model identifier to embed with

        Returns:
            One-dimensional numpy array of finite floats

        Raises:
            ProviderError: If the provider fails or the model is unsupported
            ProviderAuthError: If credentials are missing or rejected
        """
        pass
