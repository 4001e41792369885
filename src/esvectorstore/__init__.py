"""Elasticsearch-backed vector store with metadata filtering.

This package stores Haystack documents with their embeddings in an
Elasticsearch index and answers similarity queries restricted by metadata
filter expressions.
"""

from esvectorstore.backends import ElasticsearchBackendClient, SearchBackendClient
from esvectorstore.embeddings import (
    EmbeddingProvider,
    SentenceTransformersEmbeddingProvider,
)
from esvectorstore.errors import (
    BulkOperationError,
    EmbeddingError,
    MalformedExpressionError,
    SchemaCreationError,
    TransportError,
    UnsupportedOperatorError,
    VectorStoreError,
)
from esvectorstore.options import VectorStoreOptions
from esvectorstore.query import ScoringFunction
from esvectorstore.store import VectorStore
from esvectorstore.types import IndexSchema, SearchRequest


__all__ = [
    "BulkOperationError",
    "ElasticsearchBackendClient",
    "EmbeddingError",
    "EmbeddingProvider",
    "IndexSchema",
    "MalformedExpressionError",
    "SchemaCreationError",
    "ScoringFunction",
    "SearchBackendClient",
    "SearchRequest",
    "SentenceTransformersEmbeddingProvider",
    "TransportError",
    "UnsupportedOperatorError",
    "VectorStore",
    "VectorStoreError",
    "VectorStoreOptions",
]
