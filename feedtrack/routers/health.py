"""
Health check endpoints.

- GET /api/health      - cheap: process alive, version, uptime
- GET /api/health/deep - store mode and classification readiness
"""
import asyncio
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from feedtrack.core import database
from feedtrack.core.structured_logging import APP_VERSION, SERVICE_NAME, get_uptime_s
from feedtrack.dependencies import get_services
from feedtrack.services.factory import Services

logger = logging.getLogger(__name__)

router = APIRouter()

COMPONENT_TIMEOUT = 2.0  # seconds


@router.get("/health")
async def health_check():
    """Cheap health check - no I/O."""
    return {
        "status": "ok",
        "version": APP_VERSION,
        "service": SERVICE_NAME,
        "uptime_s": round(get_uptime_s(), 1),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/deep")
async def deep_health_check(services: Services = Depends(get_services)):
    """Report which store and which analysis path requests will get."""
    database_ok = False
    if not services.store.degraded:
        try:
            database_ok = await asyncio.wait_for(asyncio.to_thread(database.ping), timeout=COMPONENT_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Database health check timed out")

    components = {
        "store": {
            "status": "ok" if database_ok else "degraded",
            "mode": "durable" if database_ok else "fallback",
        },
        "classification": {
            "status": "ok" if services.classifier.is_configured else "degraded",
            "mode": "remote" if services.classifier.is_configured else "heuristic",
            "models": services.classifier.models,
        },
    }
    statuses = [c["status"] for c in components.values()]

    return {
        "status": "degraded" if "degraded" in statuses else "ok",
        "checked_at": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
        "uptime_s": round(get_uptime_s(), 1),
        "components": components,
    }
