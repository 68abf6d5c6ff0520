"""FastAPI dependency injection factories.

Dependencies are defined as Annotated types for clean, reusable injection.

Usage in routes:
    from overture_api.api.deps import OrchestratorDep

    @router.get("/playlists/{playlist_id}")
    def get_playlist(playlist_id: str, orchestrator: OrchestratorDep) -> ...:
        ...
"""

from typing import Annotated

from fastapi import Depends
from overture import FeatureWorkerPool, PlaylistOrchestrator

from overture_api.api.container import Services, get_services
from overture_api.services.intent_runner import IntentRunner

# -- Service dependencies (request-scoped via app.state) --

ServicesDep = Annotated[Services, Depends(get_services)]


def _get_orchestrator(services: ServicesDep) -> PlaylistOrchestrator:
    """Get playlist orchestrator from services container."""
    return services.orchestrator


def _get_worker_pool(services: ServicesDep) -> FeatureWorkerPool:
    """Get feature worker pool from services container."""
    return services.worker_pool


def _get_intent_runner(services: ServicesDep) -> IntentRunner:
    """Get intent runner from services container."""
    return services.intent_runner


OrchestratorDep = Annotated[PlaylistOrchestrator, Depends(_get_orchestrator)]
WorkerPoolDep = Annotated[FeatureWorkerPool, Depends(_get_worker_pool)]
IntentRunnerDep = Annotated[IntentRunner, Depends(_get_intent_runner)]
