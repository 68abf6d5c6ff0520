"""Core domain models: tracks, playlists and extracted intents."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from overture.exceptions import DuplicateISRCError

FEATURE_FIELDS = (
    "danceability",
    "energy",
    "valence",
    "tempo",
    "instrumentalness",
    "acousticness",
)


class AudioFeatures(BaseModel):
    """Audio characteristics ("vibe") of a track.

    All fields are in [0.0, 1.0] except tempo, which is in BPM.

    Attributes:
        danceability: Suitability for dancing.
        energy: Perceptual intensity and activity.
        valence: Musical positiveness.
        tempo: Estimated tempo in beats per minute.
        instrumentalness: Likelihood the track has no vocals.
        acousticness: Confidence the track is acoustic.
    """

    model_config = ConfigDict(frozen=True)

    danceability: float = 0.0
    energy: float = 0.0
    valence: float = 0.0
    tempo: float = 0.0
    instrumentalness: float = 0.0
    acousticness: float = 0.0

    @property
    def is_zero(self) -> bool:
        """True when every field is exactly zero (no data)."""
        return all(getattr(self, name) == 0 for name in FEATURE_FIELDS)


class Track(BaseModel):
    """A single catalog track."""

    id: str
    title: str
    artist: str
    album: str = ""
    cover_url: str = ""
    duration_ms: int = 0
    isrc: str = ""
    preview_url: str = ""
    features: AudioFeatures = Field(default_factory=AudioFeatures)


class Playlist(BaseModel):
    """An ordered collection of tracks.

    Insertion order is display order. No two tracks may share a non-empty
    ISRC. The playlist does no locking of its own; callers serialize
    structural edits per playlist id.
    """

    id: str
    name: str
    tracks: list[Track] = Field(default_factory=list)

    @property
    def track_ids(self) -> set[str]:
        """IDs of all tracks in the playlist."""
        return {t.id for t in self.tracks}

    def add_track(self, track: Track) -> None:
        """Append a track, rejecting duplicate ISRCs.

        Args:
            track: Track to append.

        Raises:
            DuplicateISRCError: If the track's non-empty ISRC is already present.
        """
        if track.isrc and any(t.isrc == track.isrc for t in self.tracks):
            raise DuplicateISRCError(track.isrc)
        self.tracks.append(track)

    def analyze(self) -> AudioFeatures:
        """Average audio features across all tracks (zeros when empty)."""
        if not self.tracks:
            return AudioFeatures()
        count = len(self.tracks)
        return AudioFeatures(
            **{
                name: sum(getattr(t.features, name) for t in self.tracks) / count
                for name in FEATURE_FIELDS
            }
        )


class VibeConstraint(BaseModel):
    """A numeric range constraint on one audio feature.

    A constraint with min and max both exactly 0 is "unset" and never
    filters anything; it is not a valid [0, 0] range.
    """

    model_config = ConfigDict(extra="ignore")

    target: float | None = None
    min: float = 0.0
    max: float = 0.0
    weight: str = ""

    @field_validator("min", "max", mode="before")
    @classmethod
    def null_bound_is_zero(cls, v: object) -> object:
        """LLM output may carry explicit nulls for missing bounds."""
        return 0.0 if v is None else v

    @field_validator("weight", mode="before")
    @classmethod
    def null_weight_is_empty(cls, v: object) -> object:
        return "" if v is None else v

    @property
    def is_unset(self) -> bool:
        return self.min == 0 and self.max == 0


class IntentEntities(BaseModel):
    model_config = ConfigDict(extra="ignore")

    artists: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)


class VibeConstraints(BaseModel):
    model_config = ConfigDict(extra="ignore")

    energy: VibeConstraint | None = None
    valence: VibeConstraint | None = None
    acousticness: VibeConstraint | None = None
    instrumentalness: VibeConstraint | None = None


class SequenceHint(BaseModel):
    model_config = ConfigDict(extra="ignore")

    pattern: str = ""
    description: str = ""


class IntentObject(BaseModel):
    """Structured intent extracted from a free-text "vibe" request."""

    model_config = ConfigDict(extra="ignore")

    intent_type: str = ""
    entities: IntentEntities = Field(default_factory=IntentEntities)
    vibe_constraints: VibeConstraints = Field(default_factory=VibeConstraints)
    sequence: SequenceHint = Field(default_factory=SequenceHint)
    explanation: str = ""
