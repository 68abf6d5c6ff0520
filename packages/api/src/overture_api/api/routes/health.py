"""Health check endpoint."""

from fastapi import APIRouter

from overture_api.api.deps import OrchestratorDep
from overture_api.schemas.playlists import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(orchestrator: OrchestratorDep) -> HealthResponse:
    """Report liveness and whether the intent pipeline is available."""
    return HealthResponse(intent_compiler=orchestrator.has_intent_compiler)
