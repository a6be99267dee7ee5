"""
Remote Classification Client
============================

Async HTTP client for the Gemini generateContent REST endpoint with
structured (JSON) output.

Models are tried strictly in the configured order, one request each.
The first model that yields a payload passing validation wins and no
further models are contacted. There is no retry of the same model and
no backoff; a failing model simply hands over to the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, Type, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from feedtrack.config import settings
from feedtrack.services.classification.errors import (
    AllModelsExhaustedError,
    CredentialMissingError,
    ModelUnavailableError,
)
from feedtrack.services.classification.schemas import GenerateContentResponse, StructuredPayload

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=StructuredPayload)

_ERROR_BODY_PREVIEW = 200


@dataclass(frozen=True)
class StructuredResult(Generic[P]):
    payload: P
    model: str
    failures: List[ModelUnavailableError] = field(default_factory=list)


class ClassificationClient:
    """First-success-wins fallback chain over an ordered list of models."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        models: Optional[Sequence[str]] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._api_key = api_key if api_key is not None else settings.get_gemini_api_key()
        self._models = list(models if models is not None else settings.classification_models)
        self._base_url = (base_url or settings.classification_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.classification_timeout_s

    @property
    def models(self) -> List[str]:
        return list(self._models)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _build_body(self, prompt: str, output_model: Type[P]) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": output_model.RESPONSE_SCHEMA,
            },
        }

    async def generate_structured(self, prompt: str, output_model: Type[P]) -> StructuredResult[P]:
        """Return the first successfully parsed payload across the model list.

        Raises:
            CredentialMissingError: No API key configured; nothing was sent.
            AllModelsExhaustedError: Every model failed.
        """
        if not self._api_key:
            logger.warning("Classification API key is missing, skipping remote analysis")
            raise CredentialMissingError("Classification API key is not configured")

        body = self._build_body(prompt, output_model)
        failures: List[ModelUnavailableError] = []

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            for model in self._models:
                with structlog.contextvars.bound_contextvars(model=model):
                    logger.info("Attempting classification with model: %s", model)
                    try:
                        payload = await self._attempt(client, model, body, output_model)
                    except ModelUnavailableError as exc:
                        logger.warning(
                            "Model %s failed: %s",
                            model,
                            exc.message,
                            extra={"http.status_code": exc.status_code},
                        )
                        failures.append(exc)
                        continue

                    logger.info("Classification succeeded with model: %s", model)
                return StructuredResult(payload=payload, model=model, failures=failures)

        logger.warning("All %d classification models failed", len(failures))
        raise AllModelsExhaustedError(failures)

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        model: str,
        body: dict,
        output_model: Type[P],
    ) -> P:
        url = f"{self._base_url}/{model}:generateContent"
        try:
            resp = await client.post(url, params={"key": self._api_key}, json=body)
        except httpx.HTTPError as e:
            raise ModelUnavailableError(
                f"transport error: {type(e).__name__}: {e}", model=model, original_error=e,
            )

        if not 200 <= resp.status_code < 300:
            raise ModelUnavailableError(
                f"HTTP {resp.status_code} - {resp.text[:_ERROR_BODY_PREVIEW]}",
                model=model,
                status_code=resp.status_code,
            )

        try:
            envelope = GenerateContentResponse.model_validate(resp.json())
        except ValueError as e:
            raise ModelUnavailableError(
                f"malformed response envelope: {e}", model=model, status_code=resp.status_code, original_error=e,
            )

        text = envelope.first_text()
        if not text:
            raise ModelUnavailableError("empty response from model", model=model, status_code=resp.status_code)

        try:
            return output_model.model_validate_json(text)
        except ValidationError as e:
            raise ModelUnavailableError(
                f"payload did not match schema: {e.error_count()} error(s)",
                model=model,
                status_code=resp.status_code,
                original_error=e,
            )
