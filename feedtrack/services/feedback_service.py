"""
Feedback Service
================

Entry point for submitting and reading student feedback.

Every submission is analyzed exactly once, before it is persisted, so
no stored record ever lacks an analysis. Storage goes through a
ResilientFeedbackStore; classification and storage outages degrade the
result instead of failing the request. Only missing or empty text is rejected.
"""

import logging
from typing import List, Optional

from feedtrack.core.errors import FeedTrackError
from feedtrack.models.feedback import FeedbackRecord, InsightResult
from feedtrack.services.classification import AnalysisOrchestrator, InsightAggregator
from feedtrack.services.feedback_store import FeedbackStore

logger = logging.getLogger(__name__)

DEFAULT_INSIGHT_WINDOW = 50


class FeedbackService:
    def __init__(
        self,
        store: FeedbackStore,
        orchestrator: AnalysisOrchestrator,
        aggregator: InsightAggregator,
        insight_window: int = DEFAULT_INSIGHT_WINDOW,
    ):
        self.store = store
        self._orchestrator = orchestrator
        self._aggregator = aggregator
        self._insight_window = insight_window

    async def submit_feedback(
        self,
        text: Optional[str],
        student_id: Optional[str] = None,
        student_name: Optional[str] = None,
    ) -> FeedbackRecord:
        """Analyze and persist a new feedback entry.

        Raises:
            FeedTrackError: FT-API-001 when the text is missing or empty.
        """
        if not text:
            raise FeedTrackError(
                "FT-API-001",
                detail="empty feedback text",
                context={"student_id": student_id},
            )

        analysis = await self._orchestrator.analyze(text)
        record = await self.store.create(
            text,
            analysis,
            student_id=student_id,
            student_name=student_name,
        )
        logger.info(
            "Feedback %s stored (%s/%s)",
            record.id,
            analysis.sentiment.value,
            analysis.category.value,
            extra={"store": self.store.name},
        )
        return record

    async def list_feedback(self, student_id: Optional[str] = None) -> List[FeedbackRecord]:
        filters = {"student_id": student_id} if student_id is not None else None
        return await self.store.list(filters=filters)

    async def generate_insights(self) -> InsightResult:
        """Summarize the most recent window of feedback."""
        recent = await self.store.list(limit=self._insight_window)
        return await self._aggregator.summarize(recent)
