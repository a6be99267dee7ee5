"""
Service wiring.

Builds the server-side object graph once at startup. The fallback store
is created here and handed to the services explicitly; nothing reaches
it through module globals.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from feedtrack.config import Settings, settings as default_settings
from feedtrack.services.analytics_service import AnalyticsService
from feedtrack.services.classification import AnalysisOrchestrator, ClassificationClient, InsightAggregator
from feedtrack.services.fallback_store import FallbackStore
from feedtrack.services.feedback_service import FeedbackService
from feedtrack.services.feedback_store import ResilientFeedbackStore, SQLFeedbackStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    classifier: ClassificationClient
    store: ResilientFeedbackStore
    feedback: FeedbackService
    analytics: AnalyticsService


def build_services(config: Optional[Settings] = None) -> Services:
    """Wire the services. The durable store is used whenever a database URL is configured."""
    config = config or default_settings
    classifier = ClassificationClient(
        api_key=config.get_gemini_api_key() or "",
        models=config.classification_models,
        base_url=config.classification_base_url,
        timeout=config.classification_timeout_s,
    )
    store = ResilientFeedbackStore(
        fallback=FallbackStore(),
        durable=SQLFeedbackStore() if config.get_database_url() else None,
    )
    logger.info(
        "Services ready (store=%s, models=%s, remote_analysis=%s)",
        store.name,
        ",".join(classifier.models),
        "on" if classifier.is_configured else "off",
    )
    return Services(
        classifier=classifier,
        store=store,
        feedback=FeedbackService(
            store=store,
            orchestrator=AnalysisOrchestrator(classifier),
            aggregator=InsightAggregator(classifier),
            insight_window=config.insight_window,
        ),
        analytics=AnalyticsService(store),
    )
