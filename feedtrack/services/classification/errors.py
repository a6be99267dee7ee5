"""
Classification Errors
=====================

Failures of the remote classification path. None of these reach an API
caller: the orchestrator and the insight aggregator absorb every one of
them and answer from the offline heuristics instead.
"""

from typing import List, Optional


class ClassificationError(Exception):
    """Base exception for remote classification failures."""

    code = "FT-LLM-002"

    def __init__(self, message: str, model: Optional[str] = None, original_error: Optional[Exception] = None):
        self.message = message
        self.model = model
        self.original_error = original_error
        super().__init__(self.message)


class CredentialMissingError(ClassificationError):
    """Raised before any network call when no API key is configured."""

    code = "FT-LLM-001"


class ModelUnavailableError(ClassificationError):
    """One model identifier failed: bad status, transport error, or unusable payload."""

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, model=model, original_error=original_error)
        self.status_code = status_code


class AllModelsExhaustedError(ClassificationError):
    """Every configured model identifier failed."""

    code = "FT-LLM-003"

    def __init__(self, failures: List[ModelUnavailableError]):
        self.failures = failures
        tried = ", ".join(f.model or "?" for f in failures) or "none"
        super().__init__(f"All classification models failed (tried: {tried})")
