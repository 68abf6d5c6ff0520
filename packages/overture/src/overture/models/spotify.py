"""Models for parsing Spotify Web API responses.

These are internal models used to parse and validate responses from
the Spotify API. They may change if the API changes.
"""

from pydantic import BaseModel, ConfigDict, Field

from overture.models.domain import AudioFeatures, Track

__all__ = [
    "SpotifyAlbum",
    "SpotifyArtist",
    "SpotifyAudioFeatures",
    "SpotifyExternalIds",
    "SpotifyImage",
    "SpotifyTrack",
]


class SpotifyModel(BaseModel):
    """Base model for Spotify responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class SpotifyImage(SpotifyModel):
    url: str


class SpotifyArtist(SpotifyModel):
    """Artist reference."""

    name: str
    id: str | None = None


class SpotifyAlbum(SpotifyModel):
    name: str = ""
    images: list[SpotifyImage] = Field(default_factory=list)


class SpotifyExternalIds(SpotifyModel):
    isrc: str | None = None


class SpotifyAudioFeatures(SpotifyModel):
    """Response item of the audio-features endpoint."""

    id: str | None = None
    danceability: float = 0.0
    energy: float = 0.0
    valence: float = 0.0
    tempo: float = 0.0
    instrumentalness: float = 0.0
    acousticness: float = 0.0

    def to_domain(self) -> AudioFeatures:
        return AudioFeatures(
            danceability=self.danceability,
            energy=self.energy,
            valence=self.valence,
            tempo=self.tempo,
            instrumentalness=self.instrumentalness,
            acousticness=self.acousticness,
        )


class SpotifyTrack(SpotifyModel):
    """Track object from search and top-tracks responses."""

    id: str
    name: str
    duration_ms: int = 0
    artists: list[SpotifyArtist] = Field(default_factory=list)
    album: SpotifyAlbum = Field(default_factory=SpotifyAlbum)
    external_ids: SpotifyExternalIds = Field(default_factory=SpotifyExternalIds)
    preview_url: str | None = None

    @property
    def artist_display(self) -> str:
        """Flattened artist string for display."""
        return ", ".join(a.name for a in self.artists)

    def to_domain(self, features: AudioFeatures | None = None) -> Track:
        """Map to a domain Track, optionally with audio features."""
        return Track(
            id=self.id,
            title=self.name,
            artist=self.artist_display,
            album=self.album.name,
            cover_url=self.album.images[0].url if self.album.images else "",
            duration_ms=self.duration_ms,
            isrc=self.external_ids.isrc or "",
            preview_url=self.preview_url or "",
            features=features or AudioFeatures(),
        )
