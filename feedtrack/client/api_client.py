"""
FeedTrack API Client - degraded-mode aware.
===========================================

Talks to the FeedTrack server over HTTP. When the server cannot be
reached (transport error or non-2xx), the same classification pipeline
runs locally and records go to this client's own in-memory store. That
store is separate from the server's and is never synced back.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter

from feedtrack.config import Settings, settings as default_settings
from feedtrack.core.errors import FeedTrackError
from feedtrack.models.feedback import FeedbackRecord, InsightResult
from feedtrack.services.classification import AnalysisOrchestrator, ClassificationClient, InsightAggregator
from feedtrack.services.fallback_store import FallbackStore

logger = logging.getLogger(__name__)

_RECORD_LIST = TypeAdapter(List[FeedbackRecord])


class ServerUnavailableError(Exception):
    """The FeedTrack server could not produce a usable answer."""


class FeedTrackClient:
    """Client with a local fallback for every server operation."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        classifier: Optional[ClassificationClient] = None,
        store: Optional[FallbackStore] = None,
        offline_delay_s: Optional[float] = None,
        config: Optional[Settings] = None,
    ):
        config = config or default_settings
        self._base_url = (base_url or config.api_base_url).rstrip("/")
        self._timeout = config.client_timeout_s
        self._min_text_length = config.client_min_text_length
        self._insight_window = config.insight_window
        self._offline_delay_s = config.client_offline_delay_s if offline_delay_s is None else offline_delay_s

        classifier = classifier or ClassificationClient(
            api_key=config.get_gemini_api_key() or "",
            models=config.classification_models,
            base_url=config.classification_base_url,
            timeout=config.classification_timeout_s,
        )
        self.store = store if store is not None else FallbackStore()
        self._orchestrator = AnalysisOrchestrator(classifier)
        self._aggregator = InsightAggregator(classifier)

    async def _request(self, method: str, path: str, *, json: Optional[dict] = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            raise ServerUnavailableError(f"{method} {path}: {type(e).__name__}: {e}")

        if not 200 <= resp.status_code < 300:
            raise ServerUnavailableError(f"{method} {path}: HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise ServerUnavailableError(f"{method} {path}: invalid JSON body: {e}")

    async def submit_feedback(self, text: str, student_id: str, student_name: str) -> FeedbackRecord:
        """Submit feedback; analyzed and stored locally if the server is down.

        Raises:
            FeedTrackError: FT-API-002 when the text is shorter than the
                minimum length. Nothing is sent in that case.
        """
        if len((text or "").strip()) < self._min_text_length:
            raise FeedTrackError(
                "FT-API-002",
                detail=f"feedback shorter than {self._min_text_length} characters",
            )

        try:
            data = await self._request(
                "POST",
                "/feedback",
                json={"text": text, "studentId": student_id, "studentName": student_name},
            )
            return FeedbackRecord.model_validate(data)
        except (ServerUnavailableError, ValueError) as e:
            logger.warning("Backend offline, falling back to local analysis: %s", e)

        await asyncio.sleep(self._offline_delay_s)
        analysis = await self._orchestrator.analyze(text)
        return await self.store.create(text, analysis, student_id=student_id, student_name=student_name)

    async def get_all_feedbacks(self) -> List[FeedbackRecord]:
        try:
            return _RECORD_LIST.validate_python(await self._request("GET", "/feedback/all"))
        except (ServerUnavailableError, ValueError) as e:
            logger.warning("Backend offline, loading feedback from local store: %s", e)
            return await self.store.list()

    async def get_staff_insights(self) -> InsightResult:
        try:
            return InsightResult.model_validate(await self._request("POST", "/insights/generate"))
        except (ServerUnavailableError, ValueError) as e:
            logger.warning("Backend offline, generating insights locally: %s", e)
            recent = await self.store.list(limit=self._insight_window)
            return await self._aggregator.summarize(recent)
