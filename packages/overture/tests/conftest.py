"""Test fixtures and configuration."""

from collections.abc import Callable
from typing import Any

import pytest
from overture.exceptions import PlaylistNotFoundError
from overture.models.domain import AudioFeatures, IntentObject, Playlist, Track

TrackFactory = Callable[..., Track]


class FakeCatalog:
    """In-memory CatalogProtocol implementation.

    Set ``search_results``, ``features`` and ``top_tracks`` directly. Values
    in ``features`` / ``top_tracks`` may be exceptions, which are raised.
    """

    def __init__(self) -> None:
        self.search_results: list[Track] = []
        self.features: dict[str, AudioFeatures | Exception] = {}
        self.top_tracks: dict[str, list[Track] | Exception] = {}
        self.queries: list[tuple[str, int]] = []
        self.feature_calls: list[str] = []

    def search_tracks(self, query: str, limit: int = 5) -> list[Track]:
        self.queries.append((query, limit))
        return list(self.search_results)

    def get_features(self, track_id: str) -> AudioFeatures:
        self.feature_calls.append(track_id)
        value = self.features.get(track_id, AudioFeatures())
        if isinstance(value, Exception):
            raise value
        return value

    def get_artist_top_tracks(self, artist_name: str) -> list[Track]:
        value = self.top_tracks.get(artist_name, [])
        if isinstance(value, Exception):
            raise value
        return list(value)


class FakeIntentCompiler:
    """IntentCompilerProtocol returning a canned intent or raising."""

    def __init__(self, result: IntentObject | Exception) -> None:
        self.result = result
        self.messages: list[str] = []

    def analyze_intent(self, message: str) -> IntentObject:
        self.messages.append(message)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class InMemoryPlaylistStore:
    """PlaylistStore and TrackFeatureStore backed by dicts."""

    def __init__(self) -> None:
        self.playlists: dict[str, Playlist] = {}
        self.track_features: dict[str, AudioFeatures] = {}
        self.batch_calls: list[tuple[str, list[str]]] = []
        self.fail_batch: Exception | None = None
        self.fail_update: Exception | None = None

    def get_by_id(self, playlist_id: str) -> Playlist:
        if playlist_id not in self.playlists:
            raise PlaylistNotFoundError(playlist_id)
        return self.playlists[playlist_id].model_copy(deep=True)

    def save(self, playlist: Playlist) -> None:
        self.playlists[playlist.id] = playlist.model_copy(deep=True)

    def add_tracks_to_playlist(self, playlist_id: str, tracks: list[Track]) -> None:
        if self.fail_batch is not None:
            raise self.fail_batch
        if playlist_id not in self.playlists:
            raise PlaylistNotFoundError(playlist_id)
        self.batch_calls.append((playlist_id, [t.id for t in tracks]))
        self.playlists[playlist_id].tracks.extend(tracks)

    def update_track_features(self, track_id: str, features: AudioFeatures) -> None:
        if self.fail_update is not None:
            raise self.fail_update
        self.track_features[track_id] = features

    def get_playlist_audio_features(self, playlist_id: str) -> AudioFeatures:
        return self.get_by_id(playlist_id).analyze()


class FakeAnalyzer:
    """AudioAnalyzerProtocol returning a fixed energy or raising."""

    def __init__(self, result: float | Exception = 0.75) -> None:
        self.result = result
        self.urls: list[str] = []

    def analyze_preview(self, url: str) -> float:
        self.urls.append(url)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def make_track() -> TrackFactory:
    """Factory for tracks with sensible defaults."""

    def factory(
        id: str = "track1",
        title: str = "Test Song",
        artist: str = "Test Artist",
        **kwargs: Any,
    ) -> Track:
        return Track(id=id, title=title, artist=artist, **kwargs)

    return factory


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def store() -> InMemoryPlaylistStore:
    return InMemoryPlaylistStore()


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def intent_compiler_factory() -> type[FakeIntentCompiler]:
    """Build a fake compiler from a canned intent or an exception."""
    return FakeIntentCompiler
