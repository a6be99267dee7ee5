"""
FeedTrack API
=============

Student feedback collection with AI-assisted sentiment/category tagging
and staff insights. Keeps answering when the classification service,
its API key, or the database is unavailable.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from feedtrack.config import settings
from feedtrack.core.database import close_db, init_db
from feedtrack.core.errors import FeedTrackError
from feedtrack.core.errors.middleware import feedtrack_error_handler
from feedtrack.core.errors.registry import error_registry
from feedtrack.core.log_middleware import RequestContextMiddleware
from feedtrack.core.structured_logging import setup_logging
from feedtrack.routers import analytics, feedback, health, insights
from feedtrack.services.factory import build_services

setup_logging(log_dir=settings.log_directory, log_level=settings.log_level.upper())

logger = logging.getLogger(__name__)

API_TITLE = "FeedTrack API"
API_VERSION = "1.0.0"

TAGS_METADATA = [
    {"name": "health", "description": "Liveness and dependency status. No authentication required."},
    {"name": "feedback", "description": "Submit and list student feedback. Submissions are always analyzed."},
    {"name": "insights", "description": "Staff-facing trend summaries over recent feedback."},
    {"name": "analytics", "description": "Dashboard metrics and sentiment/category distributions."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s v%s...", API_TITLE, API_VERSION)

    error_registry.load()
    init_db()
    app.state.services = build_services()

    yield

    logger.info("Shutting down %s...", API_TITLE)
    close_db()


app = FastAPI(
    title=API_TITLE,
    version=API_VERSION,
    openapi_tags=TAGS_METADATA,
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(FeedTrackError, feedtrack_error_handler)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the stack, answer with FT-SYS-001."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return await feedtrack_error_handler(request, FeedTrackError("FT-SYS-001", detail=str(exc)))


app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(feedback.router, prefix="/api/feedback", tags=["feedback"])
app.include_router(insights.router, prefix="/api/insights", tags=["insights"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])


@app.get("/", tags=["health"])
async def root():
    return {
        "name": API_TITLE,
        "message": "FeedTrack API is running",
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run(
        "feedtrack.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "5000")),
        reload=settings.debug,
    )
