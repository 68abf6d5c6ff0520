"""Intent endpoint: free-text vibe request streamed as server-sent events."""

import asyncio

from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from overture import IntentCompilerNotConfiguredError

from overture_api.api.deps import IntentRunnerDep, OrchestratorDep
from overture_api.api.exceptions import ErrorResponse
from overture_api.schemas.intent import IntentRequest

router = APIRouter(prefix="/playlists", tags=["intent"])


@router.post(
    "/{playlist_id}/intent",
    response_class=StreamingResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Playlist not found"},
        501: {"model": ErrorResponse, "description": "Intent compiler not configured"},
    },
    summary="Add tracks matching a free-text vibe",
    description=(
        "Streams a thinking event, heartbeats while the pipeline runs, "
        "then one complete or error event. Disconnecting does not stop "
        "the pipeline."
    ),
)
async def process_intent(
    playlist_id: str,
    request: IntentRequest,
    orchestrator: OrchestratorDep,
    intent_runner: IntentRunnerDep,
) -> StreamingResponse:
    """Start the intent pipeline and stream its progress."""
    if not orchestrator.has_intent_compiler:
        raise IntentCompilerNotConfiguredError()

    # Fail with a plain 404 before the stream opens
    await asyncio.to_thread(orchestrator.get_playlist, playlist_id)

    task = intent_runner.start(playlist_id, request.message)
    return StreamingResponse(
        intent_runner.stream(task),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
