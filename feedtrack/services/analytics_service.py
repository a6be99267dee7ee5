"""
Analytics Service
=================

Dashboard aggregates computed from the same store contract the feedback
service writes through (count + distinct only), so they work unchanged
on the durable and the in-memory store.
"""

import logging
from typing import Dict, List

from feedtrack.models.feedback import Sentiment
from feedtrack.services.feedback_store import FeedbackStore

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, store: FeedbackStore):
        self._store = store

    async def metrics(self) -> Dict[str, int]:
        total = await self._store.count()
        critical = await self._store.count({"is_critical": True})
        students = await self._store.distinct("student_id")
        positive = await self._store.count({"sentiment": Sentiment.POSITIVE})

        return {
            "totalFeedback": total,
            "uniqueStudents": len(students),
            "criticalIssues": critical,
            "positiveScore": int(positive * 100 / total + 0.5) if total > 0 else 0,
        }

    async def _distribution(self, field: str) -> List[Dict]:
        buckets = []
        for value in await self._store.distinct(field):
            count = await self._store.count({field: value})
            if count:
                buckets.append({"name": value or "Unknown", "value": count})
        return buckets

    async def sentiment_distribution(self) -> List[Dict]:
        buckets = await self._distribution("sentiment")
        return sorted(buckets, key=lambda b: b["name"])

    async def category_distribution(self) -> List[Dict]:
        buckets = await self._distribution("category")
        return sorted(buckets, key=lambda b: (-b["value"], b["name"]))
