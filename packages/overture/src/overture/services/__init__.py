"""Business logic services for overture.

Public API:
    PlaylistOrchestrator - Track resolution and the intent pipeline
    TrackResolver - Free-text title/artist to catalog track with features
    FeatureWorkerPool - Background preview analysis

Internal:
    PreviewAnalyzer - pydub-based preview energy analysis
"""

from overture.services.analyzer import PreviewAnalyzer
from overture.services.orchestrator import PlaylistOrchestrator
from overture.services.resolver import TrackResolver
from overture.services.worker import FeatureJob, FeatureWorkerPool

__all__ = [
    "FeatureJob",
    "FeatureWorkerPool",
    "PlaylistOrchestrator",
    "PreviewAnalyzer",
    "TrackResolver",
]
