"""Elasticsearch document converter for Haystack documents.

Converts Haystack Documents to the stored Elasticsearch document body and
search hits back to Haystack Documents.

Stored layout (one Elasticsearch document per Haystack Document)::

    {
        "id": "<doc id>",
        "content": "<text>",
        "metadata": {...},        # Document.meta, target of metadata filters
        "embedding": [0.1, ...],  # dense_vector field
    }

The Elasticsearch ``_id`` is the Haystack document id, so re-adding a document
with the same id overwrites it.
"""

from typing import Any, Dict, Optional

from haystack import Document

from esvectorstore.types import VECTOR_FIELD


__all__ = ["ElasticsearchDocumentConverter"]


class ElasticsearchDocumentConverter:
    """Bidirectional converter between Haystack Documents and stored bodies.

    Key Transformations:
        - Document.id -> "id" field and the bulk operation ``_id``
        - Document.content -> "content"
        - Document.meta -> "metadata" object
        - Document.embedding -> reserved "embedding" dense vector field
        - hit "_score" -> Document.score

    The converter is stateless and all methods are static.
    """

    @staticmethod
    def to_source(document: Document) -> Dict[str, Any]:
        """Build the stored body for a Haystack document.

        Args:
            document: Document with its embedding already assigned.

        Returns:
            Elasticsearch document body.
        """
        return {
            "id": document.id,
            "content": document.content,
            "metadata": dict(document.meta or {}),
            VECTOR_FIELD: list(document.embedding)
            if document.embedding is not None
            else None,
        }

    @staticmethod
    def from_source(
        source: Dict[str, Any],
        hit_id: Optional[str] = None,
        score: Optional[float] = None,
    ) -> Document:
        """Rebuild a Haystack document from a stored body.

        Args:
            source: Elasticsearch ``_source`` of a hit.
            hit_id: Elasticsearch ``_id``, used when the body carries no id.
            score: Relevance score of the hit.

        Returns:
            Haystack Document.
        """
        doc_id = source.get("id") or hit_id
        embedding = source.get(VECTOR_FIELD)
        return Document(
            id=str(doc_id) if doc_id is not None else "",
            content=source.get("content"),
            meta=dict(source.get("metadata") or {}),
            embedding=list(embedding) if embedding is not None else None,
            score=score,
        )
