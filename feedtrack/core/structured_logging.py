"""
Logging setup
=============

Every log line is one JSON object, whether it comes from a structlog
logger or a plain ``logging.getLogger(__name__)`` call.

Fields bound with ``structlog.contextvars`` are merged into each line:
``request_id``/``correlation_id`` per HTTP request, ``model`` while a
classification model is being called, ``store`` while a store operation
runs. Keys passed through ``extra=`` on stdlib calls are kept as
top-level fields.
"""
from __future__ import annotations

import logging
import logging.handlers
import os
import sys
import time
from typing import List

import structlog

APP_VERSION = "1.0.0"
SERVICE_NAME = "feedtrack-backend"

QUIET_LOGGERS = ("httpcore", "httpx", "asyncio", "watchfiles", "sqlalchemy.engine")

_started_at = time.time()


def get_uptime_s() -> float:
    return time.time() - _started_at


def _add_service(logger, method_name: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", APP_VERSION)
    return event_dict


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
    ]


def build_formatter() -> structlog.stdlib.ProcessorFormatter:
    """JSON formatter shared by every handler."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*_pre_chain(), structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def _handlers(log_dir: str, log_file: str, max_bytes: int, backup_count: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    try:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, log_file),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )
    except OSError as e:
        sys.stderr.write(f"feedtrack: file logging disabled, {log_dir} is not writable: {e}\n")
    return handlers


def setup_logging(
    log_dir: str = "logs",
    log_level: int | str = logging.INFO,
    log_file: str = "feedtrack.jsonl",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """Route structlog and stdlib logging to stderr and a rotating JSONL file."""
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = build_formatter()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)
    for handler in _handlers(log_dir, log_file, max_bytes, backup_count):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
