"""
Feedback Models
===============

Wire/domain models for student feedback and staff insights, plus the
SQLModel table backing the durable store.

Sentiment and category are closed sets; anything else coming back from
the classification service is normalized before it reaches a record.
"""

import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlmodel import Column, Field, SQLModel, Text


class Sentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


class Category(str, Enum):
    TEACHING = "Teaching"
    FACILITIES = "Facilities"
    EXAMS = "Exams"
    LABS = "Labs"
    HOSTEL = "Hostel"
    OTHERS = "Others"


# Field names accepted by list/count/distinct on both stores
FILTERABLE_FIELDS = ("student_id", "sentiment", "category", "is_critical")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FeedbackAnalysis(_CamelModel):
    """Labels attached to a feedback record exactly once, at creation."""

    sentiment: Sentiment
    category: Category
    confidence: int = PydanticField(ge=0, le=100)
    highlights: List[str] = PydanticField(default_factory=list)
    summary: str = ""


class FeedbackCreate(_CamelModel):
    """Inbound submission body: {text, studentId, studentName}."""

    text: Optional[str] = None
    student_id: Optional[str] = None
    student_name: Optional[str] = None


class FeedbackRecord(_CamelModel):
    """A persisted feedback entry, owned by whichever store created it."""

    id: str
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    text: str
    created_at: datetime
    analysis: FeedbackAnalysis
    is_critical: bool = False

    def field_value(self, name: str) -> Any:
        """Resolve a filterable field, reaching into the analysis for labels."""
        if name not in FILTERABLE_FIELDS:
            raise ValueError(f"Unsupported feedback field: {name!r}")
        if name == "sentiment":
            return self.analysis.sentiment
        if name == "category":
            return self.analysis.category
        return getattr(self, name)


class InsightResult(_CamelModel):
    """Staff-facing trend summary; recomputed on demand, never stored."""

    common_issues: List[str]
    trends: str
    corrective_actions: List[str]
    suggested_response: str


class FeedbackRow(SQLModel, table=True):
    """Durable-store row for a FeedbackRecord (analysis flattened into columns)."""

    __tablename__ = "feedback_records"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True, max_length=32)
    student_id: Optional[str] = Field(default=None, nullable=True, index=True, max_length=128)
    student_name: Optional[str] = Field(default=None, nullable=True, max_length=256)
    text: str = Field(sa_column=Column(Text, nullable=False))
    sentiment: str = Field(default=Sentiment.NEUTRAL.value, index=True, max_length=16)
    category: str = Field(default=Category.OTHERS.value, index=True, max_length=32)
    confidence: int = Field(default=0)
    summary: str = Field(default="", sa_column=Column(Text, default=""))
    highlights_json: str = Field(default="[]", sa_column=Column(Text, default="[]"))
    is_critical: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    @classmethod
    def from_analysis(
        cls,
        text: str,
        analysis: FeedbackAnalysis,
        student_id: Optional[str] = None,
        student_name: Optional[str] = None,
        is_critical: bool = False,
    ) -> "FeedbackRow":
        return cls(
            student_id=student_id,
            student_name=student_name,
            text=text,
            sentiment=analysis.sentiment.value,
            category=analysis.category.value,
            confidence=analysis.confidence,
            summary=analysis.summary,
            highlights_json=json.dumps(analysis.highlights),
            is_critical=is_critical,
        )

    def to_record(self) -> FeedbackRecord:
        created_at = self.created_at
        # SQLite drops tzinfo on round-trip
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return FeedbackRecord(
            id=self.id,
            student_id=self.student_id,
            student_name=self.student_name,
            text=self.text,
            created_at=created_at,
            is_critical=self.is_critical,
            analysis=FeedbackAnalysis(
                sentiment=Sentiment(self.sentiment),
                category=Category(self.category),
                confidence=self.confidence,
                highlights=json.loads(self.highlights_json or "[]"),
                summary=self.summary or "",
            ),
        )
