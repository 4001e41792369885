"""Search backend client interface.

The store components only talk to the search engine through this interface,
so a different engine can be plugged in without touching query construction.
An engine qualifies if it supports dense vector fields, scripted scoring and
bulk mutation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from esvectorstore.types import BulkOperation, BulkOutcome, IndexSchema


__all__ = ["SearchBackendClient"]


class SearchBackendClient(ABC):
    """Interface for search engine clients.

    Attributes:
        supports_vector_indexing: Capability flag. When False the dense vector
            field is created unindexed and similarity is brute-force scored at
            query time.
    """

    supports_vector_indexing: bool = True

    @abstractmethod
    def bulk(self, operations: Sequence[BulkOperation]) -> BulkOutcome:
        """Submit write operations in a single request.

        Args:
            operations: Index and delete operations.

        Returns:
            Per-item outcome in request order.

        Raises:
            TransportError: If the request as a whole fails.
        """

    @abstractmethod
    def search(self, index_name: str, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run a search request.

        Args:
            index_name: Index to search.
            query: Request body as built by SimilarityQueryBuilder.

        Returns:
            Hits with "_id", "_score" and "_source" keys, best first.

        Raises:
            TransportError: If the request fails.
        """

    @abstractmethod
    def index_exists(self, index_name: str) -> bool:
        """Return True if the index exists.

        Raises:
            TransportError: If the request fails.
        """

    @abstractmethod
    def create_index(self, schema: IndexSchema, vector_indexing: bool = True) -> bool:
        """Create an index for the schema.

        Args:
            schema: Index schema.
            vector_indexing: Whether the dense vector field is indexed.

        Returns:
            True if the index was created, False if it already existed.

        Raises:
            SchemaCreationError: If the engine rejects the creation.
            TransportError: If the request fails.
        """
