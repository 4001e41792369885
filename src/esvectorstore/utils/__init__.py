"""Utility modules shared by the vector store components.

Utilities Provided:
    - Configuration: YAML config loading, environment variable resolution
    - Document Converter: Haystack Document <-> stored Elasticsearch body
    - Logging: Logger factory with environment-based configuration

Usage:
    >>> from esvectorstore.utils import LoggerFactory, load_config
"""

from esvectorstore.utils.config import (
    DEFAULT_EMBEDDING_MODEL,
    EMBEDDING_MODEL_ALIASES,
    load_config,
    resolve_embedding_model,
    resolve_env_vars,
    setup_logger,
)
from esvectorstore.utils.document_converter import ElasticsearchDocumentConverter
from esvectorstore.utils.logging import LoggerFactory


__all__ = [
    # Config
    "DEFAULT_EMBEDDING_MODEL",
    "EMBEDDING_MODEL_ALIASES",
    "load_config",
    "resolve_embedding_model",
    "resolve_env_vars",
    "setup_logger",
    # Document Converter
    "ElasticsearchDocumentConverter",
    # Logging
    "LoggerFactory",
]
