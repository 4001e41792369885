"""Mapping of raw search hits to Haystack documents."""

from typing import Any, Dict, List

from haystack import Document

from esvectorstore.query import COSINE, ScoringFunction
from esvectorstore.utils.document_converter import ElasticsearchDocumentConverter


__all__ = ["DISTANCE_META_KEY", "ResultMapper"]

DISTANCE_META_KEY = "distance"


class ResultMapper:
    """Converts backend hits into documents annotated with a distance.

    The distance is derived from the hit score by the configured scoring
    function. For the default cosine function scores lie in [0, 1] and the
    distance is ``1 - score``; norm-based functions recover the norm instead.

    Attributes:
        scoring_function: Function that produced the scores being mapped.
    """

    def __init__(self, scoring_function: ScoringFunction = COSINE) -> None:
        self.scoring_function = scoring_function

    def to_document(self, hit: Dict[str, Any]) -> Document:
        """Convert one hit.

        Args:
            hit: Raw hit with "_id", "_score" and "_source" keys.

        Returns:
            Document with ``score`` set to the raw score and
            ``meta["distance"]`` derived from it.
        """
        score = hit.get("_score")
        document = ElasticsearchDocumentConverter.from_source(
            hit.get("_source") or {},
            hit_id=hit.get("_id"),
            score=score,
        )
        if score is not None:
            document.meta[DISTANCE_META_KEY] = self.scoring_function.distance(
                float(score)
            )
        return document

    def to_documents(self, hits: List[Dict[str, Any]]) -> List[Document]:
        """Convert hits preserving backend ranking order."""
        return [self.to_document(hit) for hit in hits]
