"""Intent API schemas and server-sent event payloads."""

from typing import Literal

from overture import IntentObject
from pydantic import BaseModel, Field

from overture_api.schemas.playlists import NonBlankStr


class IntentRequest(BaseModel):
    """Free-text description of the tracks to add."""

    message: NonBlankStr = Field(
        description="Vibe request", examples=["Mellow acoustic Willie Nelson"]
    )


class StatusEvent(BaseModel):
    """Progress event (thinking or heartbeat)."""

    status: Literal["thinking", "heartbeat"]
    message: str | None = None


class CompleteEvent(BaseModel):
    """Terminal event carrying the extracted intent and counts."""

    status: Literal["complete"] = "complete"
    data: IntentObject
    tracks_evaluated: int
    tracks_added: int
    summary: str


class ErrorEvent(BaseModel):
    """Terminal event for a failed pipeline."""

    status: Literal["error"] = "error"
    error: str
    code: str


IntentEvent = StatusEvent | CompleteEvent | ErrorEvent
