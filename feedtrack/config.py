"""
FeedTrack Application Configuration
===================================

PURPOSE:
    Pydantic-Settings based configuration for the FeedTrack backend and
    the degraded-mode client. All settings can be overridden via
    environment variables (FEEDTRACK_ prefix) or a local .env file.
"""

import logging
import os
from typing import List, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Ordered first-to-last; the classification client never reorders them.
DEFAULT_CLASSIFICATION_MODELS = [
    "gemini-1.5-flash",
    "gemini-1.5-flash-001",
    "gemini-1.5-flash-8b",
    "gemini-2.0-flash-exp",
]


class Settings(BaseSettings):
    """Process-wide settings for the API server and the degraded-mode client."""

    app_name: str = "FeedTrack"
    debug: bool = False
    environment: str = "production"

    # Remote classification (Gemini generateContent REST API)
    gemini_api_key: Optional[str] = None
    classification_base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    classification_models: List[str] = DEFAULT_CLASSIFICATION_MODELS
    classification_timeout_s: float = 30.0

    # Durable store. Empty string disables it and the service runs on the
    # in-memory fallback store for the whole process lifetime.
    database_url: Optional[str] = None
    data_directory: str = "./data"

    # Logging
    log_directory: str = "logs"
    log_level: str = "INFO"

    # Insight generation reads at most this many of the newest records
    insight_window: int = 50

    # Degraded-mode client
    api_base_url: str = "http://localhost:5000/api"
    client_timeout_s: float = 10.0
    client_offline_delay_s: float = 0.8
    client_min_text_length: int = 10

    # CORS
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000", "http://localhost:3001"]

    class Config:
        env_file = ".env"
        env_prefix = "FEEDTRACK_"

    def get_gemini_api_key(self) -> Optional[str]:
        """Return the classification API key.

        FEEDTRACK_GEMINI_API_KEY wins; the unprefixed GEMINI_API_KEY is
        accepted so existing deployments keep working.
        """
        return self.gemini_api_key or os.environ.get("GEMINI_API_KEY") or None

    def get_database_url(self) -> Optional[str]:
        """Return the SQLAlchemy URL of the durable store, or None when disabled."""
        if self.database_url is None:
            return os.environ.get(
                "DATABASE_URL",
                f"sqlite:///{os.path.join(self.data_directory, 'feedtrack.db')}",
            )
        return self.database_url or None


settings = Settings()

if not settings.get_gemini_api_key():
    logger.warning("No classification API key configured - feedback will be analyzed offline")
