"""
Classification response contracts.

The generateContent envelope and the two structured payloads are
validated on receipt; a shape mismatch is a per-model failure, never an
unchecked cast. Each payload model carries the responseSchema sent to
the service so the request and the validation cannot drift apart.
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ── generateContent envelope ─────────────────────────────────────────
class ContentPart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None


class CandidateContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    parts: List[ContentPart] = Field(default_factory=list)


class Candidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: Optional[CandidateContent] = None


class GenerateContentResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    candidates: List[Candidate] = Field(default_factory=list)

    def first_text(self) -> Optional[str]:
        """Text of the first part of the first candidate, if any."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text


# ── Structured payloads ──────────────────────────────────────────────
class StructuredPayload(BaseModel):
    """Base for payloads requested with responseMimeType=application/json."""

    model_config = ConfigDict(extra="ignore")

    RESPONSE_SCHEMA: ClassVar[Dict[str, Any]] = {}


class AnalysisPayload(StructuredPayload):
    category: str
    sentiment: str
    confidence: float = Field(allow_inf_nan=False)
    highlights: List[str]
    summary: str

    RESPONSE_SCHEMA: ClassVar[Dict[str, Any]] = {
        "type": "OBJECT",
        "properties": {
            "category": {"type": "STRING", "description": "Category: Teaching, Facilities, Exams, Labs, Hostel, Others"},
            "sentiment": {"type": "STRING", "description": "Sentiment: Positive, Neutral, Negative"},
            "confidence": {"type": "NUMBER", "description": "Score 0-100"},
            "highlights": {"type": "ARRAY", "items": {"type": "STRING"}},
            "summary": {"type": "STRING"},
        },
        "required": ["category", "sentiment", "confidence", "highlights", "summary"],
    }


class InsightPayload(StructuredPayload):
    commonIssues: List[str]
    trends: str
    correctiveActions: List[str]
    suggestedResponse: str

    RESPONSE_SCHEMA: ClassVar[Dict[str, Any]] = {
        "type": "OBJECT",
        "properties": {
            "commonIssues": {"type": "ARRAY", "items": {"type": "STRING"}},
            "trends": {"type": "STRING"},
            "correctiveActions": {"type": "ARRAY", "items": {"type": "STRING"}},
            "suggestedResponse": {"type": "STRING"},
        },
        "required": ["commonIssues", "trends", "correctiveActions", "suggestedResponse"],
    }
