"""Tests for embedding providers."""

from unittest.mock import MagicMock, patch

import pytest

from esvectorstore.embeddings import (
    EmbeddingProvider,
    SentenceTransformersEmbeddingProvider,
    get_embedding_provider,
)
from esvectorstore.errors import EmbeddingError
from tests.conftest import FakeEmbeddingProvider


class TestSentenceTransformersEmbeddingProvider:
    """Test cases for the Haystack-backed provider."""

    @patch("esvectorstore.embeddings.SentenceTransformersTextEmbedder")
    def test_init_resolves_alias_and_warms_up(self, mock_embedder_cls):
        """Test model loading."""
        provider = SentenceTransformersEmbeddingProvider(model="mpnet")

        mock_embedder_cls.assert_called_once_with(
            model="sentence-transformers/all-mpnet-base-v2"
        )
        mock_embedder_cls.return_value.warm_up.assert_called_once()
        assert provider.embedder is mock_embedder_cls.return_value

    @patch("esvectorstore.embeddings.SentenceTransformersTextEmbedder")
    def test_prebuilt_embedder_is_used(self, mock_embedder_cls):
        """Test that an injected embedder skips model loading."""
        embedder = MagicMock()
        provider = SentenceTransformersEmbeddingProvider(embedder=embedder)

        mock_embedder_cls.assert_not_called()
        embedder.warm_up.assert_not_called()
        assert provider.embedder is embedder

    def test_embed_returns_floats(self):
        """Test the embed call."""
        embedder = MagicMock()
        embedder.run.return_value = {"embedding": [1, 0.5]}
        provider = SentenceTransformersEmbeddingProvider(embedder=embedder)

        assert provider.embed("hello") == [1.0, 0.5]
        embedder.run.assert_called_once_with(text="hello")

    def test_embed_failure_raises_embedding_error(self):
        """Test that model failures are wrapped."""
        embedder = MagicMock()
        embedder.run.side_effect = RuntimeError("CUDA out of memory")
        provider = SentenceTransformersEmbeddingProvider(embedder=embedder)

        with pytest.raises(EmbeddingError, match="CUDA out of memory"):
            provider.embed("hello")

    def test_empty_embedding_raises(self):
        """Test that a missing embedding is an error."""
        embedder = MagicMock()
        embedder.run.return_value = {"embedding": []}
        provider = SentenceTransformersEmbeddingProvider(embedder=embedder)

        with pytest.raises(EmbeddingError):
            provider.embed("hello")

    def test_providers_satisfy_protocol(self):
        """Test structural typing of providers."""
        provider = SentenceTransformersEmbeddingProvider(embedder=MagicMock())
        assert isinstance(provider, EmbeddingProvider)
        assert isinstance(FakeEmbeddingProvider(), EmbeddingProvider)


class TestGetEmbeddingProvider:
    """Test cases for config-driven provider creation."""

    @patch("esvectorstore.embeddings.SentenceTransformersTextEmbedder")
    def test_model_from_config(self, mock_embedder_cls):
        """Test the embeddings section."""
        provider = get_embedding_provider({"embeddings": {"model": "qwen3"}})

        assert provider.model == "Qwen/Qwen3-Embedding-0.6B"
        mock_embedder_cls.assert_called_once_with(model="Qwen/Qwen3-Embedding-0.6B")

    @patch("esvectorstore.embeddings.SentenceTransformersTextEmbedder")
    def test_default_model(self, mock_embedder_cls):
        """Test the default model."""
        provider = get_embedding_provider({})
        assert provider.model == "sentence-transformers/all-MiniLM-L6-v2"
