"""
Feedback classification pipeline.

Shared by the API server and the degraded-mode client so the fallback
chain and the keyword priorities are defined in one place.
"""

from feedtrack.services.classification.client import ClassificationClient, StructuredResult
from feedtrack.services.classification.errors import (
    AllModelsExhaustedError,
    ClassificationError,
    CredentialMissingError,
    ModelUnavailableError,
)
from feedtrack.services.classification.insights import InsightAggregator
from feedtrack.services.classification.orchestrator import AnalysisOrchestrator

__all__ = [
    "AllModelsExhaustedError",
    "AnalysisOrchestrator",
    "ClassificationClient",
    "ClassificationError",
    "CredentialMissingError",
    "InsightAggregator",
    "ModelUnavailableError",
    "StructuredResult",
]
