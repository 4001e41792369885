"""Similarity query construction.

Builds the Elasticsearch ``script_score`` request that ranks candidates by
vector similarity. The query has a fixed shape:

    - query_string clause: the compiled metadata filter restricts candidates
    - script: the scoring function computes similarity between the stored
      "embedding" field and params.query_vector
    - size / min_score: result limit and native score cutoff

Scoring functions are configurable. Swapping one only changes the script
source, and each function knows how to derive a distance from the score it
produces, which keeps result distances consistent with the configured
function.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence

from esvectorstore.filters.converter import MATCH_ALL
from esvectorstore.types import VECTOR_FIELD


__all__ = [
    "ScoringFunction",
    "COSINE",
    "DOT_PRODUCT",
    "L1_NORM",
    "L2_NORM",
    "SCORING_FUNCTIONS",
    "COSINE_SIMILARITY_FUNCTION",
    "get_scoring_function",
    "SimilarityQueryBuilder",
]

QUERY_VECTOR_PARAM = "query_vector"

# divided by 2 to get score in the range [0, 1]
COSINE_SIMILARITY_FUNCTION = (
    f"(cosineSimilarity(params.{QUERY_VECTOR_PARAM}, '{VECTOR_FIELD}') + 1.0) / 2"
)


def _one_minus(score: float) -> float:
    return 1.0 - score


def _inverse_norm(score: float) -> float:
    # Norm scripts score 1 / (1 + norm), so the norm is recovered as 1/score - 1.
    if score <= 0:
        return math.inf
    return 1.0 / score - 1.0


@dataclass(frozen=True)
class ScoringFunction:
    """Similarity function evaluated by the backend scripting facility.

    Attributes:
        name: Identifier used in configuration.
        source: Painless script source computing the score.
        to_distance: Derives the distance metadata from a returned score.
        unit_range: Whether scores are guaranteed to lie in [0, 1].
    """

    name: str
    source: str
    to_distance: Callable[[float], float] = field(default=_one_minus, compare=False)
    unit_range: bool = True

    @classmethod
    def custom(
        cls,
        source: str,
        to_distance: Optional[Callable[[float], float]] = None,
        name: str = "custom",
    ) -> "ScoringFunction":
        """Create a scoring function from an arbitrary script.

        Without a ``to_distance`` derivation, distances are reported as
        ``1 - score`` and are unbounded.

        Args:
            source: Script source. Reference the query vector as
                params.query_vector and the stored vector as 'embedding'.
            to_distance: Optional score-to-distance derivation.
            name: Identifier for logging.

        Returns:
            ScoringFunction with ``unit_range`` False.
        """
        if not source or not source.strip():
            raise ValueError("Scoring function source must not be empty.")
        return cls(
            name=name,
            source=source,
            to_distance=to_distance or _one_minus,
            unit_range=False,
        )

    def distance(self, score: float) -> float:
        """Distance derived from a score produced by this function."""
        return self.to_distance(score)


COSINE = ScoringFunction(name="cosine", source=COSINE_SIMILARITY_FUNCTION)

DOT_PRODUCT = ScoringFunction(
    name="dot_product",
    source=(
        f"double value = dotProduct(params.{QUERY_VECTOR_PARAM}, '{VECTOR_FIELD}'); "
        "return sigmoid(1, Math.E, -value);"
    ),
)

L1_NORM = ScoringFunction(
    name="l1_norm",
    source=f"1 / (1 + l1norm(params.{QUERY_VECTOR_PARAM}, '{VECTOR_FIELD}'))",
    to_distance=_inverse_norm,
)

L2_NORM = ScoringFunction(
    name="l2_norm",
    source=f"1 / (1 + l2norm(params.{QUERY_VECTOR_PARAM}, '{VECTOR_FIELD}'))",
    to_distance=_inverse_norm,
)

SCORING_FUNCTIONS: Dict[str, ScoringFunction] = {
    fn.name: fn for fn in (COSINE, DOT_PRODUCT, L1_NORM, L2_NORM)
}


def get_scoring_function(name: str) -> ScoringFunction:
    """Look up a built-in scoring function by name.

    Raises:
        ValueError: If no built-in function has that name.
    """
    try:
        return SCORING_FUNCTIONS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown scoring function: {name}. "
            f"Must be one of {sorted(SCORING_FUNCTIONS)}"
        ) from None


class SimilarityQueryBuilder:
    """Builds script_score similarity requests.

    Attributes:
        scoring_function: Function used for the script part of the query.
    """

    def __init__(self, scoring_function: ScoringFunction = COSINE) -> None:
        self.scoring_function = scoring_function

    def build(
        self,
        vector: Sequence[float],
        top_k: int,
        min_score: float,
        compiled_filter: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build the similarity request body.

        Args:
            vector: Query embedding.
            top_k: Maximum number of hits. Zero is valid and requests no hits.
            min_score: Score cutoff, applied natively by the backend.
            compiled_filter: query_string expression restricting candidates.
                Defaults to the match-all wildcard.

        Returns:
            Request body with "size", "min_score" and "query" keys.

        Raises:
            ValueError: If top_k is not a non-negative integer or the vector
                is empty.
        """
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 0:
            raise ValueError(f"top_k must be a non-negative integer, got {top_k!r}")
        if len(vector) == 0:
            raise ValueError("Query vector must not be empty.")

        return {
            "size": top_k,
            "min_score": min_score,
            "query": {
                "script_score": {
                    "query": {
                        "query_string": {"query": compiled_filter or MATCH_ALL}
                    },
                    "script": {
                        "source": self.scoring_function.source,
                        "params": {QUERY_VECTOR_PARAM: [float(v) for v in vector]},
                    },
                }
            },
        }
