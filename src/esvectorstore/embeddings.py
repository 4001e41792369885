"""Embedding provider interface and Haystack-based implementation.

The store only needs ``embed(text) -> list[float]``. Provider failures are
raised as EmbeddingError and are never retried here.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from haystack.components.embedders import SentenceTransformersTextEmbedder

from esvectorstore.errors import EmbeddingError
from esvectorstore.utils.config import DEFAULT_EMBEDDING_MODEL, resolve_embedding_model
from esvectorstore.utils.logging import LoggerFactory


__all__ = [
    "EmbeddingProvider",
    "SentenceTransformersEmbeddingProvider",
    "get_embedding_provider",
]

logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Produces an embedding vector for a piece of text."""

    def embed(self, text: str) -> List[float]:
        """Embed text.

        Raises:
            EmbeddingError: If the provider fails.
        """
        ...


class SentenceTransformersEmbeddingProvider:
    """Embedding provider backed by a Haystack SentenceTransformers embedder.

    Attributes:
        embedder: Warmed-up SentenceTransformersTextEmbedder.
    """

    def __init__(
        self,
        model: str = DEFAULT_EMBEDDING_MODEL,
        embedder: Optional[SentenceTransformersTextEmbedder] = None,
    ):
        """Create the provider.

        Args:
            model: HuggingFace model ID or alias ("minilm", "mpnet", "qwen3").
            embedder: Pre-built embedder; skips model loading when given.
        """
        self.model = resolve_embedding_model(model)
        if embedder is None:
            embedder = SentenceTransformersTextEmbedder(model=self.model)
            embedder.warm_up()
        self.embedder = embedder

    def embed(self, text: str) -> List[float]:
        """Embed text with the SentenceTransformers model.

        Args:
            text: Text to embed.

        Returns:
            Embedding vector.

        Raises:
            EmbeddingError: If the model fails or returns no embedding.
        """
        try:
            result = self.embedder.run(text=text)
        except Exception as e:
            raise EmbeddingError(f"Embedding with '{self.model}' failed: {e}") from e

        embedding = result.get("embedding")
        if not embedding:
            raise EmbeddingError(f"Model '{self.model}' returned no embedding.")
        return [float(v) for v in embedding]


def get_embedding_provider(
    config: Dict[str, Any],
) -> SentenceTransformersEmbeddingProvider:
    """Create an embedding provider from config.

    Configuration should include an 'embeddings' section with:
    - model: HuggingFace model ID or alias (default: all-MiniLM-L6-v2)

    Args:
        config: Configuration dictionary.

    Returns:
        Initialized SentenceTransformersEmbeddingProvider.
    """
    embeddings_config = config.get("embeddings") or {}
    model_name = embeddings_config.get("model", DEFAULT_EMBEDDING_MODEL)
    logger.info(f"Loading embedding model {resolve_embedding_model(model_name)}")
    return SentenceTransformersEmbeddingProvider(model=model_name)
