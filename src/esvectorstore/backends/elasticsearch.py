"""Elasticsearch backend client.

Wraps the official ``elasticsearch`` Python client behind the
SearchBackendClient interface used by the store components.

Features:
    - Bulk index/delete with per-item outcomes
    - script_score similarity search over a dense_vector field
    - Index existence check and mapping-based index creation
    - Transport and API failures wrapped into esvectorstore errors

Example:
    Initialize programmatically::

        backend = ElasticsearchBackendClient(
            config={
                "elasticsearch": {
                    "url": "https://localhost:9200",
                    "api_key": "your-key",
                    "request_timeout": 30,
                    "refresh": "wait_for",
                }
            }
        )

Note:
    Connection parameters fall back to the ELASTICSEARCH_URL and
    ELASTICSEARCH_API_KEY environment variables.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from elasticsearch import ApiError, Elasticsearch
from elasticsearch import TransportError as ElasticsearchTransportError

from esvectorstore.backends.base import SearchBackendClient
from esvectorstore.errors import SchemaCreationError, TransportError
from esvectorstore.types import BulkItemResult, BulkOperation, BulkOutcome, IndexSchema
from esvectorstore.utils.config import load_config, resolve_env_vars
from esvectorstore.utils.logging import LoggerFactory


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()

INDEX_ALREADY_EXISTS = "resource_already_exists_exception"


class ElasticsearchBackendClient(SearchBackendClient):
    """Elasticsearch implementation of SearchBackendClient.

    Attributes:
        client: Elasticsearch client instance.
        config: Resolved configuration dictionary.
        url: Elasticsearch endpoint (defaults to localhost:9200).
        api_key: API key for authentication, if any.
        refresh: Refresh policy for bulk writes (False, True or "wait_for").
        supports_vector_indexing: Whether the cluster can index dense vectors
            for approximate search.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        config_path: Optional[str] = None,
        client: Optional[Elasticsearch] = None,
    ):
        """Initialize the Elasticsearch client.

        Configuration priority: config_path > config > empty dict.

        Args:
            config: Configuration dictionary with an "elasticsearch" key.
            config_path: Path to a YAML file with the same structure.
            client: Pre-built Elasticsearch client. When given, connection
                settings in the configuration are ignored.

        Example:
            Typical configuration structure::

                {
                    "elasticsearch": {
                        "url": "http://localhost:9200",
                        "api_key": None,
                        "username": None,
                        "password": None,
                        "request_timeout": 30,
                        "verify_certs": True,
                        "refresh": False,
                        "vector_indexing": True,
                    }
                }
        """
        if config_path:
            self.config = load_config(config_path)
        elif config:
            self.config = resolve_env_vars(config)
        else:
            self.config = {}

        es_config = self.config.get("elasticsearch") or {}

        self.url = es_config.get("url") or os.environ.get(
            "ELASTICSEARCH_URL", "http://localhost:9200"
        )
        self.api_key = es_config.get("api_key") or os.environ.get(
            "ELASTICSEARCH_API_KEY"
        )
        self.refresh = es_config.get("refresh", False)
        self.supports_vector_indexing = bool(es_config.get("vector_indexing", True))

        if client is not None:
            self.client = client
        else:
            username = es_config.get("username")
            password = es_config.get("password")
            self.client = Elasticsearch(
                hosts=self.url,
                api_key=self.api_key or None,
                basic_auth=(username, password) if username else None,
                request_timeout=es_config.get("request_timeout", 30),
                verify_certs=es_config.get("verify_certs", True),
            )

        logger.info(f"Initialized ElasticsearchBackendClient for {self.url}")

    def bulk(self, operations: Sequence[BulkOperation]) -> BulkOutcome:
        """Submit index and delete operations in one bulk request.

        Args:
            operations: Bulk operations.

        Returns:
            Per-item outcome. An empty operation list yields an empty outcome
            without a request.
        """
        if not operations:
            return BulkOutcome()

        body: List[Dict[str, Any]] = []
        for op in operations:
            body.append({op.action: {"_index": op.index_name, "_id": op.doc_id}})
            if op.action == "index":
                body.append(op.source or {})

        try:
            response = self.client.bulk(operations=body, refresh=self.refresh)
        except (ApiError, ElasticsearchTransportError) as e:
            raise TransportError(f"Bulk request failed: {e}") from e

        items = []
        for op, raw_item in zip(operations, response["items"]):
            result = raw_item.get(op.action) or next(iter(raw_item.values()), {})
            error = result.get("error")
            items.append(
                BulkItemResult(
                    doc_id=str(result.get("_id", op.doc_id)),
                    success=error is None,
                    reason=_error_reason(error) if error is not None else None,
                    status=result.get("status"),
                )
            )

        outcome = BulkOutcome(items=items)
        logger.info(
            f"Bulk request with {len(operations)} operations completed "
            f"({len(outcome.failures)} failed)."
        )
        return outcome

    def search(self, index_name: str, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run a search request against an index.

        Args:
            index_name: Index to search.
            query: Request body with "query", "size" and "min_score".

        Returns:
            Raw hits, best first.
        """
        try:
            response = self.client.search(index=index_name, **query)
        except (ApiError, ElasticsearchTransportError) as e:
            raise TransportError(f"Search on '{index_name}' failed: {e}") from e

        hits = list(response["hits"]["hits"])
        logger.info(f"Query returned {len(hits)} results.")
        return hits

    def index_exists(self, index_name: str) -> bool:
        """Check whether an index exists."""
        try:
            return bool(self.client.indices.exists(index=index_name))
        except (ApiError, ElasticsearchTransportError) as e:
            raise TransportError(
                f"Existence check for '{index_name}' failed: {e}"
            ) from e

    def create_index(self, schema: IndexSchema, vector_indexing: bool = True) -> bool:
        """Create an index with the dense vector mapping of the schema.

        Args:
            schema: Index schema.
            vector_indexing: Whether the dense vector field is indexed.

        Returns:
            True if created, False if the index already existed.
        """
        try:
            self.client.indices.create(
                index=schema.index_name,
                mappings=schema.to_mappings(vector_indexing=vector_indexing),
            )
        except ApiError as e:
            if _error_type(e) == INDEX_ALREADY_EXISTS:
                logger.info(f"Index '{schema.index_name}' already exists.")
                return False
            raise SchemaCreationError(
                f"Failed to create index '{schema.index_name}': {e}"
            ) from e
        except ElasticsearchTransportError as e:
            raise TransportError(
                f"Index creation for '{schema.index_name}' failed: {e}"
            ) from e

        logger.info(
            f"Created index '{schema.index_name}' with dims={schema.dimensions}, "
            f"similarity={schema.similarity}, indexed={vector_indexing}"
        )
        return True


def _error_reason(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("reason") or error.get("type") or error)
    return str(error)


def _error_type(error: ApiError) -> str:
    body = error.body if isinstance(error.body, dict) else {}
    details = body.get("error")
    if isinstance(details, dict) and details.get("type"):
        return str(details["type"])
    return str(error.message)
