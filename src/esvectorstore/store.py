"""Vector store facade.

Ties the components together behind the caller-facing operations:

    - add(documents): embed missing vectors, bulk index
    - delete(ids): bulk delete, returns the has-any-error flag
    - similarity_search(request): filter + script_score query, mapped results

The backing index is created on construction (unless disabled through
``initialize_schema``), before any read or write traffic.

Usage Example:
    >>> store = VectorStore.from_config(config_path="store.yaml")
    >>> store.add([Document(content="Elasticsearch stores vectors")])
    >>> results = store.similarity_search(
    ...     SearchRequest(query="vector search", top_k=5, filter_expression="year >= 2020")
    ... )
    >>> results[0].meta["distance"]
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Union

from haystack import Document

from esvectorstore.backends.base import SearchBackendClient
from esvectorstore.backends.elasticsearch import ElasticsearchBackendClient
from esvectorstore.embeddings import EmbeddingProvider, get_embedding_provider
from esvectorstore.filters.converter import ElasticsearchFilterExpressionConverter
from esvectorstore.filters.expression import FilterExpression
from esvectorstore.filters.parser import to_expression
from esvectorstore.index import IndexLifecycleManager
from esvectorstore.mutation import MutationPipeline
from esvectorstore.options import VectorStoreOptions
from esvectorstore.query import ScoringFunction, SimilarityQueryBuilder
from esvectorstore.results import ResultMapper
from esvectorstore.types import (
    DEFAULT_TOP_K,
    SIMILARITY_THRESHOLD_ACCEPT_ALL,
    BulkOutcome,
    SearchRequest,
)
from esvectorstore.utils.config import load_config, resolve_env_vars, setup_logger
from esvectorstore.utils.logging import LoggerFactory


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()

FilterInput = Optional[Union[FilterExpression, Dict[str, Any], str]]


class VectorStore:
    """Document store with filtered vector similarity search.

    Operations are synchronous and keep no state between calls apart from
    the index schema, so a store can be shared between threads once
    configured.

    Attributes:
        backend: Search backend client.
        embedding_provider: Provider for document and query embeddings.
        options: Store options.
        schema: Index schema derived from the options.
        index_manager: Index lifecycle manager.
        mutations: Bulk mutation pipeline.
        filter_converter: Filter compiler.
        query_builder: Similarity query builder.
        result_mapper: Hit to document mapper.
    """

    def __init__(
        self,
        backend: SearchBackendClient,
        embedding_provider: EmbeddingProvider,
        options: Optional[VectorStoreOptions] = None,
    ):
        """Create the store and ensure its index exists.

        Args:
            backend: Search backend client.
            embedding_provider: Embedding provider.
            options: Store options. Defaults to VectorStoreOptions().

        Raises:
            SchemaCreationError: If the index cannot be created.
            TransportError: If the backend cannot be reached.
        """
        self.backend = backend
        self.embedding_provider = embedding_provider
        self.options = options or VectorStoreOptions()
        self.schema = self.options.to_schema()

        self.index_manager = IndexLifecycleManager(backend, self.schema)
        self.mutations = MutationPipeline(backend, embedding_provider, self.schema)
        self.filter_converter = ElasticsearchFilterExpressionConverter()

        scoring_function = self.options.resolve_scoring_function()
        self.query_builder = SimilarityQueryBuilder(scoring_function)
        self.result_mapper = ResultMapper(scoring_function)

        if self.options.initialize_schema:
            self.index_manager.ensure_index()

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        config_path: Optional[str] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        backend: Optional[SearchBackendClient] = None,
    ) -> "VectorStore":
        """Build a store backed by Elasticsearch from configuration.

        The "logging" section (or LOG_LEVEL) sets the package log level.

        Args:
            config: Configuration dictionary.
            config_path: Path to a YAML configuration file.
            embedding_provider: Provider override. Defaults to a
                SentenceTransformers provider from the "embeddings" section.
            backend: Backend override. Defaults to ElasticsearchBackendClient.

        Returns:
            Initialized VectorStore.
        """
        if config_path:
            resolved = load_config(config_path)
        elif config:
            resolved = resolve_env_vars(config)
        else:
            resolved = {}
        setup_logger(resolved)

        return cls(
            backend=backend or ElasticsearchBackendClient(config=resolved),
            embedding_provider=embedding_provider or get_embedding_provider(resolved),
            options=VectorStoreOptions.from_config(resolved),
        )

    @property
    def scoring_function(self) -> ScoringFunction:
        """Scoring function used by similarity queries."""
        return self.query_builder.scoring_function

    def with_scoring_function(
        self, scoring_function: Union[str, ScoringFunction]
    ) -> "VectorStore":
        """Replace the scoring function used for similarity queries.

        The distance derivation of returned documents follows the new
        function. Configure this before sharing the store between threads.

        Args:
            scoring_function: Built-in function name or a ScoringFunction.

        Returns:
            This store.
        """
        options = replace(self.options, scoring_function=scoring_function)
        resolved = options.resolve_scoring_function()
        self.options = options
        self.query_builder = SimilarityQueryBuilder(resolved)
        self.result_mapper = ResultMapper(resolved)
        logger.info(f"Using scoring function '{resolved.name}'")
        return self

    def add(self, documents: Sequence[Document]) -> BulkOutcome:
        """Add documents, embedding those without an embedding.

        The write is not atomic: if BulkOperationError is raised, documents
        that were accepted by the backend stay persisted.

        Args:
            documents: Haystack documents.

        Returns:
            Bulk outcome.
        """
        return self.mutations.add(documents)

    def delete(self, ids: Optional[Sequence[str]]) -> Optional[bool]:
        """Delete documents by id.

        Args:
            ids: Document ids.

        Returns:
            True if any deletion reported an error, False otherwise, None if
            no id list was given.
        """
        return self.mutations.delete(ids)

    def similarity_search(self, request: Union[SearchRequest, str]) -> List[Document]:
        """Find the documents most similar to a query.

        Args:
            request: SearchRequest, or query text searched with the default
                top_k and threshold.

        Returns:
            Documents ordered by similarity, each with ``meta["distance"]``.

        Raises:
            MalformedExpressionError: If the filter is invalid (raised before
                any external call).
            UnsupportedOperatorError: If the filter cannot be expressed.
            EmbeddingError: If the query text cannot be embedded.
            TransportError: If the search request fails.
        """
        if isinstance(request, str):
            request = SearchRequest(query=request)

        compiled_filter = self._compile_filter(request.filter_expression)
        if request.top_k == 0:
            return []

        if request.query_vector is not None:
            vector = list(request.query_vector)
        else:
            vector = list(self.embedding_provider.embed(request.query))

        return self._search(
            vector, request.top_k, request.similarity_threshold, compiled_filter
        )

    def similarity_search_by_vector(
        self,
        embedding: Sequence[float],
        top_k: int = DEFAULT_TOP_K,
        similarity_threshold: float = SIMILARITY_THRESHOLD_ACCEPT_ALL,
        filter_expression: FilterInput = None,
    ) -> List[Document]:
        """Find the documents most similar to a query embedding.

        Args:
            embedding: Query vector.
            top_k: Maximum number of results. Zero returns an empty list.
            similarity_threshold: Minimum score, applied by the backend.
            filter_expression: Filter tree, canonical dict or filter text.

        Returns:
            Documents ordered by similarity, each with ``meta["distance"]``.
        """
        compiled_filter = self._compile_filter(filter_expression)
        return self._search(list(embedding), top_k, similarity_threshold, compiled_filter)

    def _compile_filter(self, filter_expression: FilterInput) -> str:
        return self.filter_converter.convert(to_expression(filter_expression))

    def _search(
        self,
        vector: List[float],
        top_k: int,
        similarity_threshold: float,
        compiled_filter: str,
    ) -> List[Document]:
        query = self.query_builder.build(
            vector, top_k, similarity_threshold, compiled_filter
        )
        if top_k == 0:
            return []
        if len(vector) != self.schema.dimensions:
            raise ValueError(
                f"Query vector has {len(vector)} dimensions, "
                f"expected {self.schema.dimensions}."
            )

        hits = self.backend.search(self.schema.index_name, query)
        return self.result_mapper.to_documents(hits)
