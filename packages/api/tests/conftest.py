"""Test fixtures and configuration for overture-api tests.

This module provides shared fixtures organized into:
- Database fixtures: In-memory SQLite for repository tests, a file-backed
  database for app tests (requests and workers run on different threads)
- Fake fixtures: Hand-written catalog, intent compiler and analyzer
- App fixtures: Services container, FastAPI app and TestClient
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient
from overture import (
    AudioFeatures,
    FeatureWorkerPool,
    IntentObject,
    PlaylistOrchestrator,
    Track,
    TrackResolver,
    WorkerConfig,
)
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine
from overture_api.api.app import create_app
from overture_api.api.container import Services
from overture_api.db import create_db_engine, init_db
from overture_api.db.repository import PlaylistRepository
from overture_api.services.intent_runner import IntentRunner
from overture_api.settings import Settings

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create in-memory SQLite engine for tests."""
    engine = create_engine("sqlite:///:memory:")
    SQLModel.metadata.create_all(engine)
    yield engine


@pytest.fixture
def repository(engine: Engine) -> PlaylistRepository:
    """Create repository with test engine."""
    return PlaylistRepository(engine)


@pytest.fixture
def file_engine(tmp_path: Path) -> Engine:
    """Create a file-backed SQLite engine safe to share across threads."""
    engine = create_db_engine(tmp_path / "db" / "overture.db")
    init_db(engine)
    return engine


# =============================================================================
# Fakes
# =============================================================================


class FakeCatalog:
    """CatalogProtocol returning canned search results and top tracks."""

    def __init__(self) -> None:
        self.search_results: list[Track] = []
        self.features: dict[str, AudioFeatures] = {}
        self.top_tracks: dict[str, list[Track]] = {}

    def search_tracks(self, query: str, limit: int = 5) -> list[Track]:
        return list(self.search_results[:limit])

    def get_features(self, track_id: str) -> AudioFeatures:
        return self.features.get(track_id, AudioFeatures())

    def get_artist_top_tracks(self, artist_name: str) -> list[Track]:
        return list(self.top_tracks.get(artist_name, []))


class FakeIntentCompiler:
    """IntentCompilerProtocol returning a fixed intent or raising.

    When a gate is set, analyze_intent blocks until the gate opens.
    """

    def __init__(self, result: IntentObject | Exception) -> None:
        self.result = result
        self.gate: threading.Event | None = None
        self.messages: list[str] = []

    def analyze_intent(self, message: str) -> IntentObject:
        self.messages.append(message)
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeAnalyzer:
    def __init__(self, energy: float = 0.75) -> None:
        self.energy = energy
        self.urls: list[str] = []

    def analyze_preview(self, url: str) -> float:
        self.urls.append(url)
        return self.energy


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def intent_compiler() -> FakeIntentCompiler:
    """Compiler asking for Willie Nelson tracks with any vibe."""
    return FakeIntentCompiler(
        IntentObject.model_validate(
            {
                "intent_type": "playlist_generation",
                "entities": {"artists": ["Willie Nelson"]},
            }
        )
    )


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def make_track() -> Callable[..., Track]:
    """Factory for tracks with sensible defaults."""

    def _make_track(
        id: str = "track1",
        title: str = "Test Song",
        artist: str = "Test Artist",
        **kwargs: Any,
    ) -> Track:
        return Track(id=id, title=title, artist=artist, **kwargs)

    return _make_track


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        spotify_client_id="test-id",
        spotify_client_secret="test-secret",
        log_level="WARNING",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def make_services(
    file_engine: Engine, catalog: FakeCatalog, analyzer: FakeAnalyzer
) -> Callable[..., Services]:
    """Factory for a services container wired to the fakes."""

    def _make_services(compiler: FakeIntentCompiler | None = None) -> Services:
        repository = PlaylistRepository(file_engine)
        orchestrator = PlaylistOrchestrator(
            TrackResolver(catalog), repository, compiler
        )
        return Services(
            repository=repository,
            orchestrator=orchestrator,
            worker_pool=FeatureWorkerPool(
                repository, analyzer, WorkerConfig(workers=1, queue_size=10)
            ),
            intent_runner=IntentRunner(orchestrator, heartbeat_interval=0.05),
        )

    return _make_services


@pytest.fixture
def services(
    make_services: Callable[..., Services], intent_compiler: FakeIntentCompiler
) -> Services:
    return make_services(intent_compiler)


@pytest.fixture
def client(settings: Settings, services: Services) -> Generator[TestClient, None, None]:
    """TestClient running the app lifespan (worker pool started and stopped)."""
    with TestClient(create_app(settings, services)) as client:
        yield client
