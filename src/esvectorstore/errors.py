"""Exception hierarchy for the esvectorstore package.

Every error raised by the package derives from ``VectorStoreError`` so callers
can catch the whole family at once, while the concrete subclasses tell apart
recoverable request errors from fatal infrastructure failures.

Error Taxonomy:
    - MalformedExpressionError: Filter tree is structurally invalid.
    - UnsupportedOperatorError: Operator/literal combination has no rendering
      in the backend query grammar.
    - SchemaCreationError: Index could not be created at startup.
    - BulkOperationError: One or more items of a bulk write failed. Items that
      succeeded are not rolled back.
    - EmbeddingError: The embedding provider failed.
    - TransportError: The search backend could not be reached or rejected
      the request.

Filter errors also subclass ``ValueError`` so they can be handled together
with other request validation failures.
"""

from typing import Dict, List, Optional


class VectorStoreError(Exception):
    """Base class for all esvectorstore errors."""


class FilterExpressionError(VectorStoreError, ValueError):
    """Base class for filter construction and compilation errors."""


class MalformedExpressionError(FilterExpressionError):
    """Raised when a filter expression tree is structurally invalid."""


class UnsupportedOperatorError(FilterExpressionError):
    """Raised when an operator or literal cannot be expressed by the backend."""


class SchemaCreationError(VectorStoreError):
    """Raised when the backing index cannot be created."""


class EmbeddingError(VectorStoreError):
    """Raised when the embedding provider fails to produce a vector."""


class TransportError(VectorStoreError):
    """Raised when the search backend fails at the network or API level."""


class BulkOperationError(VectorStoreError):
    """Aggregate error for a bulk write in which at least one item failed.

    Attributes:
        failures: Mapping of document id to the backend's failure reason.
    """

    def __init__(self, failures: Dict[str, str], message: Optional[str] = None):
        self.failures = dict(failures)
        if message is None:
            details = "; ".join(
                f"{doc_id}: {reason}" for doc_id, reason in self.failures.items()
            )
            message = f"Bulk operation failed for {len(self.failures)} item(s): {details}"
        super().__init__(message)

    @property
    def reasons(self) -> List[str]:
        """Failure reasons in bulk response order."""
        return list(self.failures.values())
