"""
In-memory fallback store.

Stands in for the durable store while it is unreachable. Lives exactly
as long as the owning process; nothing is persisted or migrated back.
The server and the degraded-mode client each construct their own
instance.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

from feedtrack.models.feedback import FeedbackRecord
from feedtrack.services.feedback_store import FeedbackStore, plain_value, validate_filters

logger = logging.getLogger(__name__)


class FallbackStore(FeedbackStore):
    """Insertion-ordered record list with newest-first reads."""

    name = "fallback"

    def __init__(self):
        # (insertion sequence, record)
        self._records: List[Tuple[int, FeedbackRecord]] = []
        self._last_id = 0

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped past the previous id on collision
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def _matching(self, filters: Dict[str, Any]) -> List[Tuple[int, FeedbackRecord]]:
        return [
            (seq, record) for seq, record in self._records
            if all(plain_value(record.field_value(name)) == plain_value(value) for name, value in filters.items())
        ]

    async def create(self, text, analysis, student_id=None, student_name=None, is_critical=False) -> FeedbackRecord:
        record = FeedbackRecord(
            id=self._next_id(),
            student_id=student_id,
            student_name=student_name,
            text=text,
            created_at=datetime.now(timezone.utc),
            analysis=analysis,
            is_critical=is_critical,
        )
        self._records.append((len(self._records), record))
        logger.debug("Stored feedback %s in memory (%d held)", record.id, len(self._records))
        return record

    async def list(self, filters=None, limit=None) -> List[FeedbackRecord]:
        matches = self._matching(validate_filters(filters))
        matches.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        records = [record for _, record in matches]
        return records if limit is None else records[:limit]

    async def count(self, filters=None) -> int:
        return len(self._matching(validate_filters(filters)))

    async def distinct(self, field: str) -> Set[Any]:
        validate_filters({field: None})
        return {plain_value(record.field_value(field)) for _, record in self._records}

    def __len__(self) -> int:
        return len(self._records)
