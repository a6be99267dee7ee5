"""
Tests for the remote classification client (ordered model fallback).
All HTTP is mocked at httpx.AsyncClient.
"""

from unittest.mock import patch

import httpx
import pytest

from feedtrack.services.classification.client import ClassificationClient
from feedtrack.services.classification.errors import (
    AllModelsExhaustedError,
    CredentialMissingError,
    ModelUnavailableError,
)
from feedtrack.services.classification.schemas import AnalysisPayload, InsightPayload
from conftest import gemini_body, make_response

MODELS = ["model-a", "model-b", "model-c", "model-d"]
BASE_URL = "https://example.test/v1beta/models"

GOOD_ANALYSIS = {
    "category": "Labs",
    "sentiment": "Negative",
    "confidence": 88,
    "highlights": ["Slow computers"],
    "summary": "Lab machines are slow.",
}


def _client(**kwargs) -> ClassificationClient:
    params = dict(api_key="test-key", models=MODELS, base_url=BASE_URL, timeout=5)
    params.update(kwargs)
    return ClassificationClient(**params)


def _called_models(mock_httpx):
    return [call.args[0].rsplit("/", 1)[1].split(":")[0] for call in mock_httpx.post.call_args_list]


class TestFallbackOrder:

    @pytest.mark.asyncio
    async def test_first_model_success_stops_chain(self, mock_httpx):
        mock_httpx.post.return_value = make_response(200, gemini_body(GOOD_ANALYSIS))

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-a"
        assert result.failures == []
        assert result.payload.category == "Labs"
        assert mock_httpx.post.call_count == 1

    @pytest.mark.asyncio
    async def test_third_model_success_after_two_failures(self, mock_httpx):
        mock_httpx.post.side_effect = [
            make_response(500, text="boom"),
            make_response(404, text="model not found"),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
        ]

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-c"
        assert _called_models(mock_httpx) == ["model-a", "model-b", "model-c"]
        assert [f.model for f in result.failures] == ["model-a", "model-b"]
        assert [f.status_code for f in result.failures] == [500, 404]

    @pytest.mark.asyncio
    async def test_all_models_fail(self, mock_httpx):
        mock_httpx.post.return_value = make_response(503, text="overloaded")

        with pytest.raises(AllModelsExhaustedError) as exc_info:
            await _client().generate_structured("prompt", AnalysisPayload)

        assert mock_httpx.post.call_count == len(MODELS)
        assert [f.model for f in exc_info.value.failures] == MODELS
        assert "model-a, model-b, model-c, model-d" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_each_model_tried_once(self, mock_httpx):
        mock_httpx.post.return_value = make_response(429, text="rate limited")

        with pytest.raises(AllModelsExhaustedError):
            await _client().generate_structured("prompt", AnalysisPayload)

        assert _called_models(mock_httpx) == MODELS


class TestFailureKinds:

    @pytest.mark.asyncio
    async def test_transport_error_advances(self, mock_httpx):
        mock_httpx.post.side_effect = [
            httpx.ConnectError("connection refused"),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
        ]

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-b"
        assert isinstance(result.failures[0], ModelUnavailableError)
        assert result.failures[0].status_code is None
        assert isinstance(result.failures[0].original_error, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_counts_as_failure(self, mock_httpx):
        mock_httpx.post.side_effect = [
            httpx.ReadTimeout("timed out"),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
        ]

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-b"
        assert "ReadTimeout" in result.failures[0].message

    @pytest.mark.asyncio
    async def test_empty_text_advances(self, mock_httpx):
        mock_httpx.post.side_effect = [
            make_response(200, {"candidates": []}),
            make_response(200, gemini_body("")),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
        ]

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-c"
        assert all("empty response" in f.message for f in result.failures)

    @pytest.mark.asyncio
    async def test_non_json_payload_advances(self, mock_httpx):
        mock_httpx.post.side_effect = [
            make_response(200, gemini_body("Sorry, I cannot help with that.")),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
        ]

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-b"
        assert "did not match schema" in result.failures[0].message

    @pytest.mark.asyncio
    async def test_schema_mismatch_advances(self, mock_httpx):
        mock_httpx.post.side_effect = [
            make_response(200, gemini_body({"category": "Labs"})),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
        ]

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-b"
        assert result.failures[0].status_code == 200

    @pytest.mark.asyncio
    async def test_malformed_envelope_advances(self, mock_httpx):
        mock_httpx.post.side_effect = [
            make_response(200, ValueError("not json")),
            make_response(200, gemini_body(GOOD_ANALYSIS)),
        ]

        result = await _client().generate_structured("prompt", AnalysisPayload)

        assert result.model == "model-b"
        assert "malformed response envelope" in result.failures[0].message


class TestCredentials:

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self):
        with patch("httpx.AsyncClient") as MockClient:
            with pytest.raises(CredentialMissingError):
                await _client(api_key="").generate_structured("prompt", AnalysisPayload)
            MockClient.assert_not_called()

    def test_is_configured(self):
        assert _client().is_configured is True
        assert _client(api_key="").is_configured is False


class TestRequestShape:

    @pytest.mark.asyncio
    async def test_request_carries_key_and_schema(self, mock_httpx):
        mock_httpx.post.return_value = make_response(200, gemini_body(GOOD_ANALYSIS))

        await _client().generate_structured("Analyze this feedback", AnalysisPayload)

        call = mock_httpx.post.call_args
        assert call.args[0] == f"{BASE_URL}/model-a:generateContent"
        assert call.kwargs["params"] == {"key": "test-key"}
        body = call.kwargs["json"]
        assert body["contents"][0]["parts"][0]["text"] == "Analyze this feedback"
        assert body["generationConfig"]["responseMimeType"] == "application/json"
        assert body["generationConfig"]["responseSchema"] == AnalysisPayload.RESPONSE_SCHEMA

    @pytest.mark.asyncio
    async def test_insight_payload(self, mock_httpx):
        mock_httpx.post.return_value = make_response(200, gemini_body({
            "commonIssues": ["Wifi"],
            "trends": "Mostly negative about connectivity",
            "correctiveActions": ["Upgrade routers"],
            "suggestedResponse": "We are upgrading the network.",
        }))

        result = await _client().generate_structured("prompt", InsightPayload)

        assert result.payload.commonIssues == ["Wifi"]
        assert result.payload.suggestedResponse == "We are upgrading the network."
