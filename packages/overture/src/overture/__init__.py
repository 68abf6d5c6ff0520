"""overture - Build playlists from free-text track and "vibe" requests.

This library resolves loosely typed track requests against the Spotify
catalog, extracts structured intents from free text with a local LLM, and
filters artist top tracks by audio features.

Designed for use as a library in applications (e.g., FastAPI) with
a CLI for debugging and development.

Examples:
    Resolve a track:
    ```python
    from overture import create_resolver, SpotifyConfig

    resolver = create_resolver(SpotifyConfig(client_id="...", client_secret="..."))
    track = resolver.resolve_track("Happy", "Pharrell Williams")
    ```
"""

from overture.client import CatalogProtocol, SpotifyClient
from overture.config import (
    DEFAULT_MIN_CONFIDENCE,
    MatchConfig,
    OllamaConfig,
    SpotifyConfig,
    WorkerConfig,
    parse_min_confidence,
)
from overture.exceptions import (
    AudioAnalysisError,
    CatalogAccessDeniedError,
    CatalogError,
    CollaboratorError,
    DuplicateISRCError,
    IntentAnalysisError,
    IntentCompilerNotConfiguredError,
    InvalidPlaylistError,
    NoConfidentMatchError,
    OvertureError,
    PlaylistNotFoundError,
    StorageError,
)
from overture.intent import IntentCompilerProtocol, OllamaIntentCompiler
from overture.lib.constraints import check_constraint, matches_constraints
from overture.lib.features import deterministic_features
from overture.lib.matching import select_best_match, similarity
from overture.lib.normalize import normalize
from overture.models import (
    AddTrackResult,
    AudioFeatures,
    IntentEventType,
    IntentObject,
    IntentResult,
    IntentStage,
    Playlist,
    Track,
    VibeConstraint,
)
from overture.protocols import AudioAnalyzerProtocol, PlaylistStore, TrackFeatureStore
from overture.services import (
    FeatureJob,
    FeatureWorkerPool,
    PlaylistOrchestrator,
    PreviewAnalyzer,
    TrackResolver,
)


def create_resolver(
    spotify: SpotifyConfig,
    match: MatchConfig | None = None,
) -> TrackResolver:
    """Create a track resolver backed by the Spotify Web API.

    Args:
        spotify: Spotify credentials and tuning.
        match: Optional matching configuration. Uses defaults if not provided.

    Returns:
        A configured TrackResolver.
    """
    return TrackResolver(SpotifyClient(spotify), match)


def create_orchestrator(
    spotify: SpotifyConfig,
    store: PlaylistStore,
    *,
    match: MatchConfig | None = None,
    ollama: OllamaConfig | None = None,
) -> PlaylistOrchestrator:
    """Create a playlist orchestrator.

    Args:
        spotify: Spotify credentials and tuning.
        store: Playlist persistence.
        match: Optional matching configuration.
        ollama: Ollama configuration. Without it the intent pipeline is
            disabled and process_intent raises IntentCompilerNotConfiguredError.

    Returns:
        A configured PlaylistOrchestrator.
    """
    compiler = OllamaIntentCompiler(ollama) if ollama is not None else None
    return PlaylistOrchestrator(create_resolver(spotify, match), store, compiler)


__all__ = [
    "DEFAULT_MIN_CONFIDENCE",
    "AddTrackResult",
    "AudioAnalysisError",
    "AudioAnalyzerProtocol",
    "AudioFeatures",
    "CatalogAccessDeniedError",
    "CatalogError",
    "CatalogProtocol",
    "CollaboratorError",
    "DuplicateISRCError",
    "FeatureJob",
    "FeatureWorkerPool",
    "IntentAnalysisError",
    "IntentCompilerNotConfiguredError",
    "IntentCompilerProtocol",
    "IntentEventType",
    "IntentObject",
    "IntentResult",
    "IntentStage",
    "InvalidPlaylistError",
    "MatchConfig",
    "NoConfidentMatchError",
    "OllamaConfig",
    "OllamaIntentCompiler",
    "OvertureError",
    "Playlist",
    "PlaylistNotFoundError",
    "PlaylistOrchestrator",
    "PlaylistStore",
    "PreviewAnalyzer",
    "SpotifyClient",
    "SpotifyConfig",
    "StorageError",
    "Track",
    "TrackFeatureStore",
    "TrackResolver",
    "VibeConstraint",
    "WorkerConfig",
    "check_constraint",
    "create_orchestrator",
    "create_resolver",
    "deterministic_features",
    "matches_constraints",
    "normalize",
    "parse_min_confidence",
    "select_best_match",
    "similarity",
]
