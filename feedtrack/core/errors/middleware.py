"""
FastAPI exception handler for FeedTrackError.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from feedtrack.core.errors import FeedTrackError
from feedtrack.core.errors.registry import error_registry

logger = logging.getLogger(__name__)


async def feedtrack_error_handler(request: Request, exc: FeedTrackError) -> JSONResponse:
    """Render a FeedTrackError as its catalogued status and safe message."""
    entry = error_registry.resolve(exc.code)
    if entry.code != exc.code:
        logger.error("Error code %s is not in the registry", exc.code, extra={"error.detail": exc.detail})

    logger.log(
        entry.log_level,
        "%s %s -> %s (%s)",
        request.method,
        request.url.path,
        exc.code,
        exc.detail or entry.title,
        extra={"error.code": exc.code, **{f"error.ctx.{k}": v for k, v in exc.context.items()}},
    )
    return JSONResponse(status_code=entry.http_status, content=entry.to_body())
