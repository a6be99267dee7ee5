"""
Analytics Router
================

Dashboard aggregates for staff.

- GET /api/analytics/metrics   - totals, unique students, positive score
- GET /api/analytics/sentiment - [{name, value}] per sentiment
- GET /api/analytics/category  - [{name, value}] per category, largest first
"""

from fastapi import APIRouter, Depends

from feedtrack.dependencies import get_analytics_service
from feedtrack.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/metrics")
async def get_metrics(service: AnalyticsService = Depends(get_analytics_service)):
    return await service.metrics()


@router.get("/sentiment")
async def get_sentiment_analytics(service: AnalyticsService = Depends(get_analytics_service)):
    return await service.sentiment_distribution()


@router.get("/category")
async def get_category_analytics(service: AnalyticsService = Depends(get_analytics_service)):
    return await service.category_distribution()
