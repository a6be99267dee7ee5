"""
Error catalogue.

registry.yaml lists every FT-* code with the HTTP status and the
caller-safe message it maps to. Entries are validated with pydantic when
the catalogue is loaded at startup; a malformed catalogue stops the app.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from feedtrack.core.errors import CODE_PATTERN

logger = logging.getLogger(__name__)

REGISTRY_PATH = Path(__file__).with_name("registry.yaml")

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class ErrorEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str
    domain: Literal["API", "LLM", "DB", "SYS"]
    title: str
    severity: Literal["DEBUG", "INFO", "WARN", "ERROR", "CRITICAL"]
    retryable: bool
    user_action_required: bool
    http_status: int = Field(ge=400, le=599)
    safe_message: str
    remediation: List[str] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def _code_format(cls, value: str) -> str:
        if not CODE_PATTERN.match(value):
            raise ValueError(f"invalid code format {value!r}")
        return value

    @model_validator(mode="after")
    def _domain_matches_code(self) -> "ErrorEntry":
        if self.code.split("-")[1] != self.domain:
            raise ValueError(f"{self.code}: domain {self.domain!r} doesn't match the code prefix")
        return self

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self.severity]

    def to_body(self) -> dict:
        """Caller-facing JSON error body."""
        return {
            "error": {
                "code": self.code,
                "title": self.title,
                "message": self.safe_message,
                "retryable": self.retryable,
                "user_action_required": self.user_action_required,
                "remediation": list(self.remediation),
            }
        }


# Used when a raised code is missing from the catalogue
INTERNAL_ERROR = ErrorEntry(
    code="FT-SYS-001",
    domain="SYS",
    title="Internal error",
    severity="ERROR",
    retryable=False,
    user_action_required=False,
    http_status=500,
    safe_message="An unexpected error occurred.",
)


class RegistryValidationError(Exception):
    """registry.yaml is malformed."""


class ErrorRegistry:
    def __init__(self) -> None:
        self._entries: Dict[str, ErrorEntry] = {}

    def load(self, path: Optional[Path | str] = None) -> None:
        path = Path(path) if path else REGISTRY_PATH
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}

        entries: Dict[str, ErrorEntry] = {}
        for raw in data.get("errors") or []:
            try:
                entry = ErrorEntry.model_validate(raw)
            except ValidationError as e:
                code = raw.get("code", "?") if isinstance(raw, dict) else "?"
                raise RegistryValidationError(f"{path.name}: entry {code}: {e}") from e
            if entry.code in entries:
                raise RegistryValidationError(f"{path.name}: duplicate code {entry.code}")
            entries[entry.code] = entry

        self._entries = entries
        logger.info("Loaded %d error codes from %s", len(entries), path.name)

    def get(self, code: str) -> Optional[ErrorEntry]:
        return self._entries.get(code)

    def resolve(self, code: str) -> ErrorEntry:
        """Entry for code, or the internal-error entry when it is not catalogued."""
        return self._entries.get(code) or self._entries.get(INTERNAL_ERROR.code) or INTERNAL_ERROR


error_registry = ErrorRegistry()
