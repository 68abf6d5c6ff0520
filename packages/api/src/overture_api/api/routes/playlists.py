"""Playlist API endpoints.

Routes are plain functions: FastAPI runs them in its threadpool, which
keeps the blocking catalog lookups and SQLite writes off the event loop.
"""

import logging

from fastapi import APIRouter, Response, status
from overture import AudioFeatures, FeatureJob, Playlist

from overture_api.api.deps import OrchestratorDep, WorkerPoolDep
from overture_api.api.exceptions import ErrorResponse
from overture_api.schemas.playlists import (
    AddTrackRequest,
    AddTrackResponse,
    CreatePlaylistRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/playlists", tags=["playlists"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Playlist not found"}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Empty name"}},
)
def create_playlist(
    request: CreatePlaylistRequest, orchestrator: OrchestratorDep
) -> Playlist:
    """Create an empty playlist."""
    return orchestrator.create_playlist(request.name)


@router.get("/{playlist_id}", responses=_NOT_FOUND)
def get_playlist(playlist_id: str, orchestrator: OrchestratorDep) -> Playlist:
    """Get a playlist with its tracks in insertion order."""
    return orchestrator.get_playlist(playlist_id)


@router.get("/{playlist_id}/analysis", responses=_NOT_FOUND)
def get_playlist_analysis(
    playlist_id: str, orchestrator: OrchestratorDep
) -> AudioFeatures:
    """Average audio features of the playlist's tracks."""
    return orchestrator.get_playlist_analysis(playlist_id)


@router.post(
    "/{playlist_id}/tracks",
    status_code=status.HTTP_201_CREATED,
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Duplicate ISRC"},
        422: {"model": ErrorResponse, "description": "No confident match"},
        502: {"model": ErrorResponse, "description": "Catalog unavailable"},
    },
)
def add_track(
    playlist_id: str,
    request: AddTrackRequest,
    response: Response,
    orchestrator: OrchestratorDep,
    worker_pool: WorkerPoolDep,
) -> AddTrackResponse:
    """Resolve a track against the catalog and append it.

    When the track has a preview clip, an energy analysis job is queued.
    A full queue drops the job without failing the request.
    """
    result = orchestrator.add_track_to_playlist(
        playlist_id, request.title, request.artist
    )

    queued = False
    if result.preview_url:
        queued = worker_pool.submit(
            FeatureJob(result.track_id, result.preview_url, result.track.features)
        )

    response.headers["Location"] = f"/api/playlists/{playlist_id}"
    return AddTrackResponse(
        playlist_id=result.playlist_id, track=result.track, enrichment_queued=queued
    )
