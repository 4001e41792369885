"""Configuration utilities for the vector store.

Handles YAML file loading, environment variable resolution, logging setup
and embedding model alias resolution.

Environment Variable Syntax:
    - ${VAR}: Substitute with environment variable VAR, empty string if unset
    - ${VAR:-default}: Substitute with VAR if set, otherwise use 'default'

Example configuration::

    elasticsearch:
      url: ${ELASTICSEARCH_URL:-http://localhost:9200}
      api_key: ${ELASTICSEARCH_API_KEY:-}
      request_timeout: 30
    vectorstore:
      index_name: documents
      dimensions: 384
      similarity: cosine
      scoring_function: cosine
    embeddings:
      model: minilm
    logging:
      level: INFO

Usage:
    >>> from esvectorstore.utils.config import load_config, resolve_embedding_model
    >>> config = load_config("store.yaml")
    >>> model = resolve_embedding_model("minilm")  # Returns full HF path
"""

import logging
import os
import re
from typing import Any

import yaml

from esvectorstore.utils.logging import LoggerFactory


def resolve_env_vars(value: Any) -> Any:
    """Resolve environment variables in configuration values.

    Supports both simple ${VAR} and ${VAR:-default} syntax, including
    multiple substitutions within a single string (e.g., "http://${HOST}:${PORT}").

    Args:
        value: The value to resolve, can be a string, dict, or list.

    Returns:
        The resolved value with environment variables expanded.
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}]+)\}"

        def replacer(match: re.Match[str]) -> str:
            expr = match.group(1)
            if ":-" in expr:
                var, default = expr.split(":-", 1)
                return os.environ.get(var, default)
            return os.environ.get(expr, "")

        return re.sub(pattern, replacer, value)
    if isinstance(value, dict):
        return {k: resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_env_vars(item) for item in value]
    return value


def load_config(config_path: str) -> dict[str, Any]:
    """Load configuration from a YAML file with environment variable resolution.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Configuration dictionary with environment variables resolved. An empty
        file yields an empty dictionary.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        yaml.YAMLError: If the YAML file is malformed.
    """
    with open(config_path) as f:
        config = yaml.safe_load(f)
    return resolve_env_vars(config or {})


def setup_logger(config: dict[str, Any]) -> logging.Logger:
    """Set up the package logger based on configuration.

    The level comes from the "logging" section, falling back to the
    LOG_LEVEL environment variable when the section sets none.

    Args:
        config: Configuration dictionary containing logging settings.

    Returns:
        Configured logger instance.
    """
    logging_config = config.get("logging") or {}
    logger_name = logging_config.get("name", "esvectorstore")
    log_level_str = logging_config.get("level")

    if log_level_str:
        log_level = getattr(logging, str(log_level_str).upper(), logging.INFO)
        factory = LoggerFactory(logger_name, log_level=log_level)
    else:
        factory = LoggerFactory.configure_from_env(logger_name)

    logger = factory.get_logger()
    logger.setLevel(factory.log_level)
    return logger


# Model name aliases for embedding models
EMBEDDING_MODEL_ALIASES: dict[str, str] = {
    "minilm": "sentence-transformers/all-MiniLM-L6-v2",
    "mpnet": "sentence-transformers/all-mpnet-base-v2",
    "qwen3": "Qwen/Qwen3-Embedding-0.6B",
}

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


def resolve_embedding_model(model_name: str) -> str:
    """Resolve embedding model name from alias or return as-is.

    Args:
        model_name: Model name or alias (e.g., "minilm", "qwen3").

    Returns:
        Full model path suitable for loading.
    """
    return EMBEDDING_MODEL_ALIASES.get(model_name.lower(), model_name)
