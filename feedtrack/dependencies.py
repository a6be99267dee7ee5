"""
FastAPI dependencies.

Services are built in the application lifespan and kept on app.state;
routers reach them only through these functions so tests can swap them
with app.dependency_overrides.
"""

from fastapi import Request

from feedtrack.services.analytics_service import AnalyticsService
from feedtrack.services.factory import Services
from feedtrack.services.feedback_service import FeedbackService


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_feedback_service(request: Request) -> FeedbackService:
    return get_services(request).feedback


def get_analytics_service(request: Request) -> AnalyticsService:
    return get_services(request).analytics
