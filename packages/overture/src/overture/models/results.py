"""Result models returned by orchestrator operations."""

from pydantic import BaseModel

from overture.models.domain import IntentObject, Track


class AddTrackResult(BaseModel):
    """Outcome of resolving a track and adding it to a playlist."""

    playlist_id: str
    track: Track

    @property
    def track_id(self) -> str:
        return self.track.id

    @property
    def preview_url(self) -> str:
        return self.track.preview_url


class IntentResult(BaseModel):
    """Outcome of processing a free-text intent against a playlist.

    Attributes:
        intent: The extracted intent.
        tracks_evaluated: Tracks fetched across artists after de-duplication.
        tracks_added: Tracks that passed filtering and were persisted.
        summary: One-line human readable summary.
    """

    intent: IntentObject
    tracks_evaluated: int
    tracks_added: int
    summary: str
