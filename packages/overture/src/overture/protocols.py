"""Storage and analysis protocols for dependency injection."""

from typing import Protocol

from overture.models.domain import AudioFeatures, Playlist, Track


class PlaylistStore(Protocol):
    """Narrow interface for playlist persistence.

    Lookups of a missing playlist raise PlaylistNotFoundError.
    """

    def get_by_id(self, playlist_id: str) -> Playlist: ...

    def save(self, playlist: Playlist) -> None:
        """Persist a playlist and its full ordered track list."""
        ...

    def add_tracks_to_playlist(self, playlist_id: str, tracks: list[Track]) -> None:
        """Append tracks to a playlist in one transaction."""
        ...

    def get_playlist_audio_features(self, playlist_id: str) -> AudioFeatures: ...


class TrackFeatureStore(Protocol):
    """Narrow interface the feature worker needs."""

    def update_track_features(self, track_id: str, features: AudioFeatures) -> None: ...


class AudioAnalyzerProtocol(Protocol):
    """Derives an energy scalar in [0, 1] from a preview clip."""

    def analyze_preview(self, url: str) -> float: ...
