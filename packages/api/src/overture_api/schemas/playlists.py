"""Playlist API schemas."""

from typing import Annotated

from overture import Track
from pydantic import BaseModel, Field, StringConstraints

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CreatePlaylistRequest(BaseModel):
    """Request to create an empty playlist."""

    name: str = Field(description="Playlist name", examples=["Road Trip"])


class AddTrackRequest(BaseModel):
    """Request to resolve a track and append it to a playlist."""

    title: NonBlankStr = Field(description="Track title", examples=["Happy"])
    artist: NonBlankStr = Field(
        description="Track artist", examples=["Pharrell Williams"]
    )


class AddTrackResponse(BaseModel):
    """The resolved track that was appended."""

    playlist_id: str
    track: Track
    enrichment_queued: bool = Field(
        description="Whether a background audio analysis job was queued"
    )


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str = "Overture is live"
    intent_compiler: bool
