"""Bulk document mutations.

Writes documents (embedding them on demand) and deletes documents by id, each
as a single bulk request.

Partial failure semantics:
    A bulk request is not atomic. When some items fail, the items that
    succeeded stay persisted and the call raises BulkOperationError listing
    every failed item. Callers must treat a failed write as having had at
    least partial effect.
"""

import logging
from typing import List, Optional, Sequence

from haystack import Document

from esvectorstore.backends.base import SearchBackendClient
from esvectorstore.embeddings import EmbeddingProvider
from esvectorstore.errors import BulkOperationError, EmbeddingError
from esvectorstore.types import BulkOperation, BulkOutcome, IndexSchema
from esvectorstore.utils.document_converter import ElasticsearchDocumentConverter
from esvectorstore.utils.logging import LoggerFactory


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


class MutationPipeline:
    """Adds and deletes documents through bulk requests.

    The pipeline keeps no documents between calls.

    Attributes:
        backend: Search backend client.
        embedding_provider: Provider used for documents without an embedding.
        schema: Index schema (target index and dimensionality).
    """

    def __init__(
        self,
        backend: SearchBackendClient,
        embedding_provider: EmbeddingProvider,
        schema: IndexSchema,
    ):
        self.backend = backend
        self.embedding_provider = embedding_provider
        self.schema = schema

    def add(self, documents: Sequence[Document]) -> BulkOutcome:
        """Index documents in one bulk request.

        Documents without an embedding are embedded from their content, one
        provider call per document, and the embedding is assigned to the
        document before it is added to the request.

        Args:
            documents: Haystack documents to index. Existing ids are
                overwritten.

        Returns:
            Bulk outcome (all items successful).

        Raises:
            ValueError: If an embedding does not match the index dimensions.
            EmbeddingError: If the provider fails or a document has no content
                to embed.
            BulkOperationError: If any item failed. Successful items remain
                persisted.
            TransportError: If the bulk request fails as a whole.
        """
        if not documents:
            return BulkOutcome()

        operations: List[BulkOperation] = []
        for document in documents:
            if not document.embedding:
                document.embedding = self._embed(document)
            self._check_dimensions(document)
            operations.append(
                BulkOperation(
                    action="index",
                    index_name=self.schema.index_name,
                    doc_id=document.id,
                    source=ElasticsearchDocumentConverter.to_source(document),
                )
            )

        outcome = self.backend.bulk(operations)
        if outcome.errors:
            failures = outcome.failures
            logger.error(
                f"Bulk add to '{self.schema.index_name}' failed for "
                f"{len(failures)} of {len(operations)} documents."
            )
            raise BulkOperationError(failures)

        logger.info(
            f"Added {len(operations)} documents to '{self.schema.index_name}'."
        )
        return outcome

    def delete(self, ids: Optional[Sequence[str]]) -> Optional[bool]:
        """Delete documents by id in one bulk request.

        Args:
            ids: Document ids.

        Returns:
            True if any item of the bulk request reported an error, False
            otherwise (including the empty-list no-op). None if the operation
            could not be attempted because no id list was given.

        Raises:
            TransportError: If the bulk request fails as a whole.
        """
        if ids is None:
            return None
        if not ids:
            return False

        operations = [
            BulkOperation(
                action="delete", index_name=self.schema.index_name, doc_id=str(doc_id)
            )
            for doc_id in ids
        ]
        outcome = self.backend.bulk(operations)
        if outcome.errors:
            logger.warning(
                f"Delete from '{self.schema.index_name}' reported errors: "
                f"{outcome.reasons}"
            )
        return outcome.errors

    def _embed(self, document: Document) -> List[float]:
        if not document.content:
            raise EmbeddingError(f"Document {document.id} has no content to embed.")
        logger.debug(f"Calling embedding provider for document id = {document.id}")
        embedding = list(self.embedding_provider.embed(document.content))
        if len(embedding) != self.schema.dimensions:
            raise EmbeddingError(
                f"Embedding provider returned {len(embedding)} dimensions for "
                f"document {document.id}, expected {self.schema.dimensions}."
            )
        return embedding

    def _check_dimensions(self, document: Document) -> None:
        if len(document.embedding) != self.schema.dimensions:
            raise ValueError(
                f"Document {document.id} has embedding of length "
                f"{len(document.embedding)}, expected {self.schema.dimensions}."
            )
