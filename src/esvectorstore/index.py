"""Index lifecycle management.

Makes sure the backing index exists with the dense vector mapping before
any read or write traffic. ``ensure_index`` is idempotent: it checks for the
index first and only creates it when absent.
"""

import logging

from esvectorstore.backends.base import SearchBackendClient
from esvectorstore.errors import SchemaCreationError
from esvectorstore.types import IndexSchema
from esvectorstore.utils.logging import LoggerFactory


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


class IndexLifecycleManager:
    """Creates the backing index on first use.

    Attributes:
        backend: Search backend client.
        schema: Index schema, read-only after construction.
        vector_indexing_enabled: Whether the vector field is (or will be)
            indexed for approximate search. False when indexing was not
            requested or the backend lacks the capability, in which case
            similarity is brute-force scored at query time.
    """

    def __init__(self, backend: SearchBackendClient, schema: IndexSchema):
        self.backend = backend
        self.schema = schema
        self.vector_indexing_enabled = (
            schema.dense_vector_indexing and backend.supports_vector_indexing
        )
        self._ensured = False

        if schema.dense_vector_indexing and not backend.supports_vector_indexing:
            logger.warning(
                f"Backend does not support dense vector indexing; index "
                f"'{schema.index_name}' will use an unindexed vector field "
                f"scored by brute force."
            )

    @property
    def ensured(self) -> bool:
        """True once the index is known to exist."""
        return self._ensured

    def ensure_index(self) -> bool:
        """Create the index if it does not exist.

        Returns:
            True if this call created the index, False otherwise.

        Raises:
            SchemaCreationError: If creation fails and the index still does
                not exist afterwards.
            TransportError: If the backend cannot be reached.
        """
        if self._ensured:
            return False

        index_name = self.schema.index_name
        if self.backend.index_exists(index_name):
            logger.info(f"Index '{index_name}' already exists.")
            self._ensured = True
            return False

        try:
            created = self.backend.create_index(
                self.schema, vector_indexing=self.vector_indexing_enabled
            )
        except SchemaCreationError:
            # Another process may have created the index concurrently.
            if self.backend.index_exists(index_name):
                logger.info(f"Index '{index_name}' was created concurrently.")
                self._ensured = True
                return False
            raise

        self._ensured = True
        return created
