"""Pytest configuration and shared fixtures.

Fixtures:
    schema: Small four-dimensional index schema.
    options: Store options matching the schema.
    fake_backend: In-memory SearchBackendClient.
    embedding_provider: Deterministic embedding provider.
    sample_documents: Haystack documents without embeddings.
    embedded_documents: Haystack documents with embeddings.
"""

from typing import Any, Dict, List, Optional, Sequence

import pytest
from haystack import Document

from esvectorstore.backends.base import SearchBackendClient
from esvectorstore.options import VectorStoreOptions
from esvectorstore.types import BulkItemResult, BulkOperation, BulkOutcome, IndexSchema


TEST_DIMENSIONS = 4
TEST_INDEX = "test-index"


class FakeBackend(SearchBackendClient):
    """In-memory backend recording every call.

    Items whose id is in ``failing_ids`` are rejected by ``bulk`` while the
    rest of the request is applied, like a real partial bulk failure.
    """

    def __init__(
        self,
        supports_vector_indexing: bool = True,
        failing_ids: Optional[Sequence[str]] = None,
        existing_indices: Optional[Sequence[str]] = None,
    ):
        self.supports_vector_indexing = supports_vector_indexing
        self.failing_ids = set(failing_ids or ())
        self.indices = set(existing_indices or ())
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.hits: List[Dict[str, Any]] = []
        self.bulk_calls: List[List[BulkOperation]] = []
        self.search_calls: List[tuple] = []
        self.create_calls: List[tuple] = []

    def bulk(self, operations: Sequence[BulkOperation]) -> BulkOutcome:
        self.bulk_calls.append(list(operations))
        items = []
        for op in operations:
            if op.doc_id in self.failing_ids:
                items.append(
                    BulkItemResult(
                        doc_id=op.doc_id,
                        success=False,
                        reason=f"failed to parse document {op.doc_id}",
                        status=400,
                    )
                )
            elif op.action == "index":
                self.documents[op.doc_id] = op.source
                items.append(BulkItemResult(doc_id=op.doc_id, success=True, status=201))
            else:
                found = self.documents.pop(op.doc_id, None) is not None
                items.append(
                    BulkItemResult(
                        doc_id=op.doc_id, success=True, status=200 if found else 404
                    )
                )
        return BulkOutcome(items=items)

    def search(self, index_name: str, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        self.search_calls.append((index_name, query))
        return list(self.hits)

    def index_exists(self, index_name: str) -> bool:
        return index_name in self.indices

    def create_index(self, schema: IndexSchema, vector_indexing: bool = True) -> bool:
        self.create_calls.append((schema, vector_indexing))
        self.indices.add(schema.index_name)
        return True


class FakeEmbeddingProvider:
    """Deterministic provider: the vector depends only on the text."""

    def __init__(self, dimensions: int = TEST_DIMENSIONS):
        self.dimensions = dimensions
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        return [float((len(text) + i) % 7) / 7 for i in range(self.dimensions)]


@pytest.fixture
def schema() -> IndexSchema:
    """Create a small index schema."""
    return IndexSchema(index_name=TEST_INDEX, dimensions=TEST_DIMENSIONS)


@pytest.fixture
def options() -> VectorStoreOptions:
    """Create store options matching the schema fixture."""
    return VectorStoreOptions(index_name=TEST_INDEX, dimensions=TEST_DIMENSIONS)


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Create an empty in-memory backend."""
    return FakeBackend()


@pytest.fixture
def embedding_provider() -> FakeEmbeddingProvider:
    """Create a deterministic embedding provider."""
    return FakeEmbeddingProvider()


@pytest.fixture
def sample_documents() -> List[Document]:
    """Create documents that still need embedding."""
    return [
        Document(
            id="doc-1",
            content="Elasticsearch stores dense vectors.",
            meta={"country": "UK", "year": 2020},
        ),
        Document(
            id="doc-2",
            content="Filters restrict the candidate set.",
            meta={"country": "NL", "year": 2021},
        ),
        Document(
            id="doc-3",
            content="Scores are mapped to distances.",
            meta={"country": "UK", "year": 2023, "draft": True},
        ),
    ]


@pytest.fixture
def embedded_documents() -> List[Document]:
    """Create documents that already carry embeddings."""
    return [
        Document(
            id="emb-1",
            content="Pre-embedded document one.",
            meta={"source": "test"},
            embedding=[0.1, 0.2, 0.3, 0.4],
        ),
        Document(
            id="emb-2",
            content="Pre-embedded document two.",
            meta={"source": "test"},
            embedding=[0.4, 0.3, 0.2, 0.1],
        ),
    ]
