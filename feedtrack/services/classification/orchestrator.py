"""
Analysis Orchestrator
=====================

Single-item analysis that never fails: the remote classification path
is tried first and any failure (missing key, every model failing, bad
payloads) drops through to the offline heuristics. Both paths return
the same FeedbackAnalysis shape.
"""

import logging
from typing import Optional

from feedtrack.models.feedback import Category, FeedbackAnalysis, Sentiment
from feedtrack.services.classification import heuristics
from feedtrack.services.classification.client import ClassificationClient
from feedtrack.services.classification.errors import ClassificationError
from feedtrack.services.classification.schemas import AnalysisPayload

logger = logging.getLogger(__name__)

_CATEGORY_LOOKUP = {c.value.lower(): c for c in Category}


def build_analysis_prompt(text: str) -> str:
    return f'Analyze this feedback: "{text}"'


def normalize_sentiment(value: Optional[str]) -> Sentiment:
    try:
        return Sentiment((value or "").strip().upper())
    except ValueError:
        return Sentiment.NEUTRAL


def normalize_category(value: Optional[str]) -> Category:
    return _CATEGORY_LOOKUP.get((value or "").strip().lower(), Category.OTHERS)


def normalize_confidence(value) -> int:
    try:
        confidence = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, confidence))


def normalize_payload(payload: AnalysisPayload) -> FeedbackAnalysis:
    """Map a remote payload onto the closed sentiment/category sets."""
    return FeedbackAnalysis(
        sentiment=normalize_sentiment(payload.sentiment),
        category=normalize_category(payload.category),
        confidence=normalize_confidence(payload.confidence),
        highlights=[h for h in payload.highlights if h],
        summary=payload.summary,
    )


class AnalysisOrchestrator:
    """Remote classification with heuristic fallback for one feedback text."""

    def __init__(self, client: ClassificationClient):
        self._client = client

    async def analyze(self, text: str) -> FeedbackAnalysis:
        try:
            result = await self._client.generate_structured(build_analysis_prompt(text), AnalysisPayload)
        except ClassificationError as e:
            logger.warning(
                "Falling back to heuristic analysis: %s",
                e.message,
                extra={"error.code": e.code},
            )
            return heuristics.classify(text)

        return normalize_payload(result.payload)
