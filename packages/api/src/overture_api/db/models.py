"""Database models."""

from datetime import UTC, datetime

from overture.models import AudioFeatures, Track
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PlaylistRecord(SQLModel, table=True):
    """A stored playlist (tracks are attached through PlaylistTrackLink)."""

    __tablename__ = "playlists"

    id: str = Field(primary_key=True)
    name: str = Field(max_length=200)
    created_at: datetime = Field(default_factory=_utcnow)


class TrackRecord(SQLModel, table=True):
    """A catalog track shared by every playlist that links it."""

    __tablename__ = "tracks"

    id: str = Field(primary_key=True)
    title: str
    artist: str
    album: str = ""
    cover_url: str = ""
    duration_ms: int = 0
    isrc: str = Field(default="", index=True)
    preview_url: str = ""

    # Audio features
    danceability: float = 0.0
    energy: float = 0.0
    valence: float = 0.0
    tempo: float = 0.0
    instrumentalness: float = 0.0
    acousticness: float = 0.0

    @classmethod
    def from_track(cls, track: Track) -> "TrackRecord":
        return cls(
            **track.model_dump(exclude={"features"}),
            **track.features.model_dump(),
        )

    @property
    def features(self) -> AudioFeatures:
        return AudioFeatures(
            danceability=self.danceability,
            energy=self.energy,
            valence=self.valence,
            tempo=self.tempo,
            instrumentalness=self.instrumentalness,
            acousticness=self.acousticness,
        )

    def apply_features(self, features: AudioFeatures) -> None:
        """Overwrite all feature columns."""
        for name, value in features.model_dump().items():
            setattr(self, name, value)

    def to_track(self) -> Track:
        return Track(
            id=self.id,
            title=self.title,
            artist=self.artist,
            album=self.album,
            cover_url=self.cover_url,
            duration_ms=self.duration_ms,
            isrc=self.isrc,
            preview_url=self.preview_url,
            features=self.features,
        )


class PlaylistTrackLink(SQLModel, table=True):
    """Membership of a track in a playlist, ordered by position."""

    __tablename__ = "playlist_tracks"

    playlist_id: str = Field(foreign_key="playlists.id", primary_key=True)
    track_id: str = Field(foreign_key="tracks.id", primary_key=True)
    position: int = Field(index=True)
    added_at: datetime = Field(default_factory=_utcnow)
