"""Unit tests for configuration utilities.

Test coverage includes:
- Environment variable resolution
- YAML configuration loading
- Logger setup from the logging section
- Embedding model alias resolution
"""

import logging
import os
from unittest.mock import patch

import pytest
import yaml

from esvectorstore.utils.config import (
    DEFAULT_EMBEDDING_MODEL,
    EMBEDDING_MODEL_ALIASES,
    load_config,
    resolve_embedding_model,
    resolve_env_vars,
    setup_logger,
)


class TestResolveEnvVars:
    """Test suite for environment variable resolution.

    Tests cover:
    - Simple ${VAR} syntax
    - Default value syntax ${VAR:-default}
    - Nested dict and list resolution
    - Non-string values pass through unchanged
    """

    def test_resolve_env_vars_simple_string(self) -> None:
        """Test resolving simple environment variable."""
        with patch.dict(os.environ, {"ELASTICSEARCH_URL": "http://es:9200"}):
            assert resolve_env_vars("${ELASTICSEARCH_URL}") == "http://es:9200"

    def test_resolve_env_vars_with_default_value(self) -> None:
        """Test resolving env var with default when var is not set."""
        with patch.dict(os.environ, {}, clear=True):
            result = resolve_env_vars("${ELASTICSEARCH_URL:-http://localhost:9200}")
            assert result == "http://localhost:9200"

    def test_resolve_env_vars_with_default_but_var_set(self) -> None:
        """Test resolving env var with default when var is set."""
        with patch.dict(os.environ, {"INDEX": "docs"}):
            assert resolve_env_vars("${INDEX:-fallback}") == "docs"

    def test_resolve_env_vars_unset_without_default(self) -> None:
        """Test resolving unset env var without default returns empty string."""
        with patch.dict(os.environ, {}, clear=True):
            assert resolve_env_vars("${UNSET_VAR}") == ""

    def test_resolve_env_vars_multiple_substitutions(self) -> None:
        """Test several placeholders in one string."""
        with patch.dict(os.environ, {"ES_HOST": "es", "ES_PORT": "9201"}):
            assert resolve_env_vars("http://${ES_HOST}:${ES_PORT}") == "http://es:9201"

    def test_resolve_env_vars_nested(self) -> None:
        """Test resolving env vars in nested dicts and lists."""
        with patch.dict(os.environ, {"API_KEY": "secret123"}):
            config = {
                "elasticsearch": {"api_key": "${API_KEY}"},
                "keys": ["${API_KEY}", "static"],
            }
            result = resolve_env_vars(config)
            assert result["elasticsearch"]["api_key"] == "secret123"
            assert result["keys"] == ["secret123", "static"]

    def test_resolve_env_vars_non_string_values(self) -> None:
        """Test that non-string values pass through unchanged."""
        assert resolve_env_vars(42) == 42
        assert resolve_env_vars(3.14) == 3.14
        assert resolve_env_vars(True) is True
        assert resolve_env_vars(None) is None


class TestLoadConfig:
    """Test suite for YAML configuration file loading."""

    def test_load_config_from_yaml_file(self, tmp_path) -> None:
        """Test loading configuration from a YAML file.

        Returns:
            None
        """
        config_file = tmp_path / "store.yaml"
        config_file.write_text(
            "elasticsearch:\n"
            "  url: ${TEST_ES_URL:-http://localhost:9200}\n"
            "  request_timeout: 30\n"
            "vectorstore:\n"
            "  index_name: documents\n"
            "  dimensions: 384\n"
        )

        with patch.dict(os.environ, {}, clear=True):
            config = load_config(str(config_file))

        assert config["elasticsearch"]["url"] == "http://localhost:9200"
        assert config["elasticsearch"]["request_timeout"] == 30
        assert config["vectorstore"] == {"index_name": "documents", "dimensions": 384}

    def test_load_config_empty_file(self, tmp_path) -> None:
        """Test that an empty file yields an empty config."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == {}

    def test_load_config_file_not_found(self) -> None:
        """Test that FileNotFoundError is raised for missing files."""
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/path/config.yaml")

    def test_load_config_malformed_yaml_raises_error(self, tmp_path) -> None:
        """Test that load_config raises yaml.YAMLError for malformed YAML."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("invalid_yaml: [\n    unclosed: quote\n")

        with pytest.raises(yaml.YAMLError):
            load_config(str(config_file))


class TestSetupLogger:
    """Test suite for logger setup from configuration."""

    def test_setup_logger_default_config(self, monkeypatch) -> None:
        """Test logger setup with default configuration."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        logger = setup_logger({})
        assert logger.name == "esvectorstore"
        assert logger.level == logging.INFO

    def test_setup_logger_custom_name_and_level(self) -> None:
        """Test logger setup with custom name and level."""
        config = {"logging": {"name": "store_debug", "level": "debug"}}
        logger = setup_logger(config)
        assert logger.name == "store_debug"
        assert logger.level == logging.DEBUG

    def test_setup_logger_invalid_level_falls_back_to_info(self) -> None:
        """Test that invalid log level falls back to INFO."""
        config = {"logging": {"name": "store_invalid", "level": "INVALID_LEVEL"}}
        assert setup_logger(config).level == logging.INFO

    def test_setup_logger_uses_log_level_env_without_section_level(self) -> None:
        """Test that LOG_LEVEL applies when the section sets no level."""
        config = {"logging": {"name": "store_env"}}
        with patch.dict(os.environ, {"LOG_LEVEL": "error"}):
            logger = setup_logger(config)
        assert logger.name == "store_env"
        assert logger.level == logging.ERROR

    def test_setup_logger_section_level_wins_over_env(self) -> None:
        """Test that an explicit level overrides LOG_LEVEL."""
        config = {"logging": {"name": "store_explicit", "level": "WARNING"}}
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}):
            assert setup_logger(config).level == logging.WARNING


class TestResolveEmbeddingModel:
    """Test suite for embedding model alias resolution."""

    @pytest.mark.parametrize("alias", sorted(EMBEDDING_MODEL_ALIASES))
    def test_aliases_resolve_to_full_paths(self, alias) -> None:
        """Test every known alias."""
        assert resolve_embedding_model(alias) == EMBEDDING_MODEL_ALIASES[alias]

    def test_alias_is_case_insensitive(self) -> None:
        """Test upper-case alias."""
        assert resolve_embedding_model("MiniLM") == DEFAULT_EMBEDDING_MODEL

    def test_unknown_model_passes_through(self) -> None:
        """Test full model IDs."""
        assert resolve_embedding_model("BAAI/bge-small-en") == "BAAI/bge-small-en"
