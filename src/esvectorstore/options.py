"""Vector store options."""

from dataclasses import dataclass
from typing import Any, Dict, Union

from esvectorstore.query import ScoringFunction, get_scoring_function
from esvectorstore.types import IndexSchema


__all__ = ["VectorStoreOptions", "DEFAULT_INDEX_NAME", "DEFAULT_DIMENSIONS"]

DEFAULT_INDEX_NAME = "esvectorstore-document-index"

# all-MiniLM-L6-v2 output size
DEFAULT_DIMENSIONS = 384


@dataclass
class VectorStoreOptions:
    """Configuration surface of a vector store.

    Attributes:
        index_name: Backing index name.
        dimensions: Embedding dimensionality.
        similarity: Similarity registered on the dense vector field.
        scoring_function: Built-in scoring function name or a ScoringFunction.
            The default cosine function is remapped to [0, 1].
        dense_vector_indexing: Whether native vector indexing is requested.
        initialize_schema: Whether the store creates the index on construction.
    """

    index_name: str = DEFAULT_INDEX_NAME
    dimensions: int = DEFAULT_DIMENSIONS
    similarity: str = "cosine"
    scoring_function: Union[str, ScoringFunction] = "cosine"
    dense_vector_indexing: bool = True
    initialize_schema: bool = True

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "VectorStoreOptions":
        """Read options from the "vectorstore" section of a config dict.

        Values coming from YAML with environment substitution may be strings,
        so numeric and boolean values are coerced.
        """
        section = config.get("vectorstore") or {}
        defaults = cls()
        return cls(
            index_name=section.get("index_name", defaults.index_name),
            dimensions=int(section.get("dimensions", defaults.dimensions)),
            similarity=section.get("similarity", defaults.similarity),
            scoring_function=section.get(
                "scoring_function", defaults.scoring_function
            ),
            dense_vector_indexing=_as_bool(
                section.get("dense_vector_indexing", defaults.dense_vector_indexing)
            ),
            initialize_schema=_as_bool(
                section.get("initialize_schema", defaults.initialize_schema)
            ),
        )

    def to_schema(self) -> IndexSchema:
        """Build the index schema described by these options."""
        return IndexSchema(
            index_name=self.index_name,
            dimensions=self.dimensions,
            similarity=self.similarity,
            dense_vector_indexing=self.dense_vector_indexing,
        )

    def resolve_scoring_function(self) -> ScoringFunction:
        """Return the configured scoring function."""
        if isinstance(self.scoring_function, ScoringFunction):
            return self.scoring_function
        return get_scoring_function(self.scoring_function)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
