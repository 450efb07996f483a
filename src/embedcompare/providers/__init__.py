"""Provider abstraction for embedding services.

This module provides a registry pattern for managing embedding providers and
a router that picks the provider serving each catalog model.
"""

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from ..embeddings.models import MODEL_CATALOG, Embedding
from ..errors import ProviderError
from .base import EmbeddingProvider
from .local import SentenceTransformerProvider
from .openai_provider import OpenAIProvider

if TYPE_CHECKING:
    from ..config import EmbedcompareConfig

__all__ = ["EmbeddingProvider", "ModelRouter", "ProviderRegistry"]

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry for managing embedding providers.

    This class maintains a registry of available providers,
    allowing registration and retrieval by name.
    """

    _providers: ClassVar[dict[str, type[EmbeddingProvider]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type[EmbeddingProvider]) -> None:
        """Register an embedding provider.

        Args:
            name: Name to register the provider under
            provider_class: Provider class that implements EmbeddingProvider
        """
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type[EmbeddingProvider]:
        """Get a provider class by name.

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys()) if cls._providers else "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return cls._providers[name]

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._providers)


class ModelRouter(EmbeddingProvider):
    """Embedding provider that dispatches each model to its catalog provider.

    Provider instances are created on first use and cached, so models stay
    warm in memory and credentials are only required for providers that
    are actually used.
    """

    def __init__(
        self,
        provider_options: dict[str, dict[str, Any]] | None = None,
        catalog: dict | None = None,
    ) -> None:
        """Initialize router.

        Args:
            provider_options: Keyword arguments per provider name, passed to
                the provider constructor on first use
            catalog: Model catalog, defaults to MODEL_CATALOG
        """
        self.provider_options = provider_options or {}
        self.catalog = MODEL_CATALOG if catalog is None else catalog
        self._instances: dict[str, EmbeddingProvider] = {}

    @classmethod
    def from_config(cls, config: "EmbedcompareConfig") -> "ModelRouter":
        return cls(
            provider_options={
                "openai": {"large_dimensions": config.openai.large_dimensions},
                "local": {"device": config.local.device},
            }
        )

    def provider_for(self, model: str) -> EmbeddingProvider:
        """Return the cached provider instance serving a model.

        Raises:
            ProviderError: If the model is not in the catalog
        """
        spec = self.catalog.get(model)
        if spec is None:
            supported = ", ".join(self.catalog)
            raise ProviderError(
                f"Unsupported model '{model}'. Supported models: {supported}"
            )

        if spec.provider not in self._instances:
            provider_class = ProviderRegistry.get(spec.provider)
            options = self.provider_options.get(spec.provider, {})
            self._instances[spec.provider] = provider_class(**options)
            logger.debug(f"Created {spec.provider} provider for {model}")
        return self._instances[spec.provider]

    async def generate(self, text: str, model: str) -> Embedding:
        return await self.provider_for(model).generate(text, model)


# Register providers
ProviderRegistry.register("openai", OpenAIProvider)
ProviderRegistry.register("local", SentenceTransformerProvider)
