"""
Pytest configuration for FeedTrack tests.
Points the app at a throwaway SQLite file and removes any API key so no
test can reach the real classification service.
"""

import json
import os
import tempfile

_test_data_dir = tempfile.mkdtemp(prefix="feedtrack_test_")
os.environ["FEEDTRACK_DATA_DIRECTORY"] = _test_data_dir
os.environ["FEEDTRACK_LOG_DIRECTORY"] = os.path.join(_test_data_dir, "logs")
os.environ["FEEDTRACK_DATABASE_URL"] = f"sqlite:///{_test_data_dir}/test.db"
os.environ["FEEDTRACK_CLIENT_OFFLINE_DELAY_S"] = "0"
os.environ.pop("FEEDTRACK_GEMINI_API_KEY", None)
os.environ.pop("GEMINI_API_KEY", None)

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlmodel import SQLModel

from feedtrack.core.database import get_engine
from feedtrack.core.errors.registry import error_registry
from feedtrack.models.feedback import FeedbackRow  # noqa: F401

SQLModel.metadata.create_all(get_engine())

# Load error registry so FeedTrackError returns correct HTTP status codes
error_registry.load()


def make_response(status_code: int = 200, body=None, text: str = ""):
    """Create a mock httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    if isinstance(body, Exception):
        resp.text = text
        resp.json.side_effect = body
    else:
        resp.text = text or (json.dumps(body) if body is not None else "")
        resp.json.return_value = body
    return resp


def gemini_body(payload) -> dict:
    """Wrap a structured payload the way generateContent returns it."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def mock_httpx():
    """Patch httpx.AsyncClient; yields the client instance used inside `async with`."""
    with patch("httpx.AsyncClient") as MockClient:
        mock_instance = AsyncMock()
        mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
        mock_instance.__aexit__ = AsyncMock(return_value=False)
        MockClient.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def clean_db():
    """Recreate the feedback table so SQL store tests start empty."""
    engine = get_engine()
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
