"""
Insight Aggregator
==================

Batch counterpart of the orchestrator: summarizes a window of feedback
records into staff-facing trends. Remote first, offline heuristics on
any failure, canned answer for an empty batch.
"""

import logging
from typing import List

from feedtrack.models.feedback import FeedbackRecord, InsightResult
from feedtrack.services.classification import heuristics
from feedtrack.services.classification.client import ClassificationClient
from feedtrack.services.classification.errors import ClassificationError
from feedtrack.services.classification.schemas import InsightPayload

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA = InsightResult(
    common_issues=["No feedback data available"],
    trends="Insufficient data to generate trends.",
    corrective_actions=[],
    suggested_response="Please wait for students to submit feedback.",
)


def build_insight_prompt(records: List[FeedbackRecord]) -> str:
    context = "\n".join(f"[{record.analysis.sentiment.value}] {record.text}" for record in records)
    return f"Analyze these feedbacks and provide insights:\n{context}"


class InsightAggregator:
    """Summarizes any batch size it is given; the caller owns the window cap."""

    def __init__(self, client: ClassificationClient):
        self._client = client

    async def summarize(self, records: List[FeedbackRecord]) -> InsightResult:
        if not records:
            return INSUFFICIENT_DATA.model_copy(deep=True)

        try:
            result = await self._client.generate_structured(build_insight_prompt(records), InsightPayload)
        except ClassificationError as e:
            logger.warning(
                "Falling back to heuristic insights: %s",
                e.message,
                extra={"error.code": e.code, "batch_size": len(records)},
            )
            return heuristics.summarize(records)

        payload = result.payload
        return InsightResult(
            common_issues=payload.commonIssues,
            trends=payload.trends,
            corrective_actions=payload.correctiveActions,
            suggested_response=payload.suggestedResponse,
        )
