"""Core data types shared by the store components.

Provides dataclasses for the index schema, bulk write operations and their
outcomes, and similarity search requests.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from esvectorstore.filters.expression import FilterExpression


__all__ = [
    "VECTOR_FIELD",
    "IndexSchema",
    "BulkOperation",
    "BulkItemResult",
    "BulkOutcome",
    "SearchRequest",
    "DEFAULT_TOP_K",
    "SIMILARITY_THRESHOLD_ACCEPT_ALL",
]

# Reserved document field holding the embedding vector.
VECTOR_FIELD = "embedding"

DEFAULT_TOP_K = 4

SIMILARITY_THRESHOLD_ACCEPT_ALL = 0.0

INDEX_SIMILARITIES = {"cosine", "dot_product", "l2_norm", "max_inner_product"}


@dataclass(frozen=True)
class IndexSchema:
    """Schema of the backing index.

    Attributes:
        index_name: Name of the index.
        dimensions: Length of every stored embedding.
        similarity: Similarity metric registered with the dense vector field
            (cosine, dot_product, l2_norm, max_inner_product).
        dense_vector_indexing: Whether the vector field should be indexed for
            approximate nearest-neighbor search.
    """

    index_name: str
    dimensions: int
    similarity: str = "cosine"
    dense_vector_indexing: bool = True

    def __post_init__(self) -> None:
        """Validate schema values."""
        if not self.index_name:
            raise ValueError("Index name must not be empty.")
        if (
            isinstance(self.dimensions, bool)
            or not isinstance(self.dimensions, int)
            or self.dimensions <= 0
        ):
            raise ValueError(
                f"Dimensions must be a positive integer, got {self.dimensions!r}"
            )
        if self.similarity not in INDEX_SIMILARITIES:
            raise ValueError(
                f"Invalid similarity: {self.similarity}. "
                f"Must be one of {sorted(INDEX_SIMILARITIES)}"
            )

    @property
    def vector_field(self) -> str:
        """Name of the dense vector field."""
        return VECTOR_FIELD

    def to_mappings(self, vector_indexing: bool = True) -> Dict[str, Any]:
        """Build the index mappings for this schema.

        Args:
            vector_indexing: Whether the dense vector field is indexed. The
                similarity metric is only registered for indexed fields.

        Returns:
            Mappings dictionary with the dense vector field definition.
        """
        vector_property: Dict[str, Any] = {
            "type": "dense_vector",
            "dims": self.dimensions,
            "index": vector_indexing,
        }
        if vector_indexing:
            vector_property["similarity"] = self.similarity
        return {"properties": {VECTOR_FIELD: vector_property}}


@dataclass(frozen=True)
class BulkOperation:
    """Single write operation inside a bulk request.

    Attributes:
        action: Either "index" or "delete".
        index_name: Target index.
        doc_id: Document identifier.
        source: Document body for index operations.
    """

    action: str
    index_name: str
    doc_id: str
    source: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        """Validate the action."""
        if self.action not in ("index", "delete"):
            raise ValueError(f"Unsupported bulk action: {self.action}")


@dataclass
class BulkItemResult:
    """Outcome of one item of a bulk request."""

    doc_id: str
    success: bool
    reason: Optional[str] = None
    status: Optional[int] = None


@dataclass
class BulkOutcome:
    """Per-item outcome of a bulk request.

    Attributes:
        items: Item results in request order.
    """

    items: List[BulkItemResult] = field(default_factory=list)

    @property
    def errors(self) -> bool:
        """True if any item failed."""
        return any(not item.success for item in self.items)

    @property
    def success(self) -> bool:
        """True if every item succeeded."""
        return not self.errors

    @property
    def failures(self) -> Dict[str, str]:
        """Mapping of failed document id to failure reason."""
        return {
            item.doc_id: item.reason or "unknown error"
            for item in self.items
            if not item.success
        }

    @property
    def reasons(self) -> List[str]:
        """Failure reasons in request order."""
        return list(self.failures.values())


@dataclass
class SearchRequest:
    """Similarity search request.

    Either ``query`` (embedded through the store's embedding provider) or
    ``query_vector`` must be given. When both are set the vector is used.

    Attributes:
        query: Query text.
        query_vector: Precomputed query embedding.
        top_k: Maximum number of results. Zero yields an empty result list.
        similarity_threshold: Minimum score, applied by the backend.
        filter_expression: Metadata filter as an expression tree, a canonical
            filter dict, or a textual filter expression.
    """

    query: Optional[str] = None
    query_vector: Optional[Sequence[float]] = None
    top_k: int = DEFAULT_TOP_K
    similarity_threshold: float = SIMILARITY_THRESHOLD_ACCEPT_ALL
    filter_expression: Optional[Union[FilterExpression, Dict[str, Any], str]] = None

    def __post_init__(self) -> None:
        """Validate request values."""
        if self.query is None and self.query_vector is None:
            raise ValueError("Either query or query_vector must be provided.")
        if isinstance(self.top_k, bool) or not isinstance(self.top_k, int):
            raise ValueError(f"top_k must be an integer, got {self.top_k!r}")
        if self.top_k < 0:
            raise ValueError(f"top_k must not be negative, got {self.top_k}")
