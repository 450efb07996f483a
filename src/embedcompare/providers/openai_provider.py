"""OpenAI embeddings API provider implementation."""

import asyncio
import logging
import os

import numpy as np
from openai import OpenAI

from ..embeddings.models import OPENAI_LARGE_DIMENSIONS, Embedding
from ..errors import ProviderAuthError, ProviderError
from .base import EmbeddingProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(EmbeddingProvider):
    """OpenAI embedding provider.

    Serves the text-embedding-3 family and text-embedding-ada-002 through
    the OpenAI embeddings endpoint.
    """

    def __init__(
        self,
        api_key: str | None = None,
        large_dimensions: int = OPENAI_LARGE_DIMENSIONS,
    ) -> None:
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If not provided, reads from
                    OPENAI_API_KEY environment variable.
            large_dimensions: Output dimensions requested for
                    text-embedding-3-large.

        Raises:
            ProviderAuthError: If API key is not provided or client init fails.
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise ProviderAuthError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment "
                "variable or provide api_key parameter."
            )

        try:
            self._client = OpenAI(api_key=self._api_key)
        except Exception as e:
            raise ProviderAuthError(f"Failed to initialize OpenAI client: {e}") from e

        self.large_dimensions = large_dimensions

    def _request_params(self, text: str, model: str) -> dict:
        params: dict = {"model": model, "input": text}
        if model == "text-embedding-3-large":
            params["dimensions"] = self.large_dimensions
        return params

    async def generate(self, text: str, model: str) -> Embedding:
        """Embed text with an OpenAI model.

        Raises:
            ProviderAuthError: If authentication fails
            ProviderError: If the API call fails or returns no data
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        params = self._request_params(text, model)

        try:
            # Run synchronous OpenAI client in thread to avoid blocking event loop
            def _sync_create() -> list[float]:
                response = self._client.embeddings.create(**params)
                if not response.data:
                    raise ProviderError("No embedding data received from API")
                return response.data[0].embedding

            vector = await asyncio.to_thread(_sync_create)

        except ProviderError:
            raise
        except Exception as e:
            status = getattr(e, "status_code", None)
            if status == 401 or "unauthorized" in str(e).lower():
                raise ProviderAuthError(f"Authentication failed: {e}", 401, e) from e
            elif status == 429:
                raise ProviderError(f"Rate limit exceeded: {e}", 429, e) from e
            elif status is not None and status >= 500:
                raise ProviderError(f"Server error: {e}", status, e) from e
            else:
                raise ProviderError(f"API call failed: {e}", status, e) from e

        logger.debug(f"OpenAI {model} returned {len(vector)} dimensions")
        return np.asarray(vector, dtype=np.float64)
