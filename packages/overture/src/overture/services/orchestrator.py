"""Playlist orchestration: track resolution and the intent pipeline."""

import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from overture.exceptions import (
    CatalogError,
    IntentCompilerNotConfiguredError,
    InvalidPlaylistError,
)
from overture.intent import IntentCompilerProtocol
from overture.lib.constraints import matches_constraints
from overture.models.domain import AudioFeatures, IntentObject, Playlist, Track
from overture.models.enums import IntentStage
from overture.models.results import AddTrackResult, IntentResult
from overture.protocols import PlaylistStore
from overture.services.resolver import TrackResolver

logger = logging.getLogger(__name__)

StageCallback = Callable[[IntentStage], None]


def _summarize(intent: IntentObject, evaluated: int, added: int) -> str:
    artists = intent.entities.artists
    if not artists:
        return f"Found {evaluated} tracks, added {added} matching your vibe"
    names = artists[0]
    if len(artists) > 1:
        names += " and others"
    return f"Found {evaluated} tracks, added {added} matching your '{names}' vibe"


@dataclass
class _PlaylistLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class PlaylistOrchestrator:
    """Coordinates the catalog, the intent compiler and the playlist store.

    Pipeline Overview:
    ==================
    1. add_track_to_playlist() - Resolve a free-text track and append it
    2. process_intent() - Free text to intent, per-artist top tracks,
                   de-duplication, vibe filtering and one batch persist

    Structural edits to one playlist are serialized by a per-playlist lock
    held across load, mutate and save. All methods are synchronous and safe
    to call from worker threads.
    """

    def __init__(
        self,
        resolver: TrackResolver,
        store: PlaylistStore,
        intent_compiler: IntentCompilerProtocol | None = None,
    ) -> None:
        self._resolver = resolver
        self._store = store
        self._intent = intent_compiler
        self._locks: dict[str, _PlaylistLock] = {}
        self._locks_guard = threading.Lock()

    @property
    def has_intent_compiler(self) -> bool:
        return self._intent is not None

    @contextmanager
    def _playlist_lock(self, playlist_id: str) -> Iterator[None]:
        """Hold the lock for one playlist.

        Entries live only while some caller holds or waits on them.
        """
        with self._locks_guard:
            entry = self._locks.setdefault(playlist_id, _PlaylistLock())
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[playlist_id]

    # ============================================================================
    # PLAYLISTS
    # ============================================================================

    def create_playlist(self, name: str) -> Playlist:
        """Create and persist a new empty playlist.

        Raises:
            InvalidPlaylistError: If the name is blank.
        """
        if not name or not name.strip():
            raise InvalidPlaylistError("playlist name cannot be empty")
        playlist = Playlist(id=str(uuid.uuid4()), name=name.strip())
        self._store.save(playlist)
        logger.info("Created playlist '%s' (%s)", playlist.name, playlist.id)
        return playlist

    def get_playlist(self, playlist_id: str) -> Playlist:
        """Load a playlist.

        Raises:
            InvalidPlaylistError: If the id is blank.
            PlaylistNotFoundError: If it does not exist.
        """
        if not playlist_id:
            raise InvalidPlaylistError("playlist id cannot be empty")
        return self._store.get_by_id(playlist_id)

    def get_playlist_analysis(self, playlist_id: str) -> AudioFeatures:
        """Mean audio features of a playlist (zeros when empty)."""
        if not playlist_id:
            raise InvalidPlaylistError("playlist id cannot be empty")
        return self._store.get_playlist_audio_features(playlist_id)

    # ============================================================================
    # TRACKS
    # ============================================================================

    def add_track_to_playlist(
        self, playlist_id: str, title: str, artist: str
    ) -> AddTrackResult:
        """Resolve a track from the catalog and append it to a playlist.

        Args:
            playlist_id: Target playlist.
            title: Free-text title.
            artist: Free-text artist.

        Returns:
            The playlist id and the added track (with its preview URL).

        Raises:
            NoConfidentMatchError: If the track could not be matched.
            CatalogError: If the catalog is unavailable.
            PlaylistNotFoundError: If the playlist does not exist.
            DuplicateISRCError: If the playlist already has the track's ISRC.
        """
        track = self._resolver.resolve_track(title, artist)

        with self._playlist_lock(playlist_id):
            playlist = self._store.get_by_id(playlist_id)
            playlist.add_track(track)
            self._store.save(playlist)

        logger.info("Added %s to playlist %s", track.id, playlist_id)
        return AddTrackResult(playlist_id=playlist_id, track=track)

    # ============================================================================
    # INTENT PIPELINE
    # ============================================================================

    def process_intent(
        self,
        playlist_id: str,
        message: str,
        on_stage: StageCallback | None = None,
    ) -> IntentResult:
        """Turn a free-text request into playlist additions.

        Per-artist catalog failures are skipped. Nothing is persisted unless
        every earlier step succeeded, and then only in one batch.

        Args:
            playlist_id: Target playlist.
            message: Free-text request.
            on_stage: Optional callback notified on each stage transition.

        Returns:
            Intent, evaluated/added counts and a summary line.

        Raises:
            IntentCompilerNotConfiguredError: Before any stage is reported.
            IntentAnalysisError: If intent extraction fails.
            PlaylistNotFoundError: If the playlist does not exist.
            StorageError: If the batch persist fails.
        """
        if self._intent is None:
            raise IntentCompilerNotConfiguredError()

        def report(stage: IntentStage) -> None:
            logger.debug("Intent pipeline for %s: %s", playlist_id, stage)
            if on_stage is not None:
                on_stage(stage)

        report(IntentStage.RECEIVED)
        try:
            report(IntentStage.THINKING)
            intent = self._intent.analyze_intent(message)

            existing = self._store.get_by_id(playlist_id).track_ids

            report(IntentStage.FETCHING)
            fetched = self._fetch_artist_tracks(intent.entities.artists)

            report(IntentStage.FILTERING)
            matching = [
                t
                for t in fetched
                if t.id not in existing and matches_constraints(t.features, intent)
            ]

            if matching:
                report(IntentStage.PERSISTING)
                with self._playlist_lock(playlist_id):
                    self._store.add_tracks_to_playlist(playlist_id, matching)
        except Exception:
            report(IntentStage.ERROR)
            raise

        result = IntentResult(
            intent=intent,
            tracks_evaluated=len(fetched),
            tracks_added=len(matching),
            summary=_summarize(intent, len(fetched), len(matching)),
        )
        report(IntentStage.COMPLETE)
        logger.info("Intent for %s: %s", playlist_id, result.summary)
        return result

    def _fetch_artist_tracks(self, artists: list[str]) -> list[Track]:
        """Top tracks for each artist in order, de-duplicated by id."""
        seen: set[str] = set()
        tracks: list[Track] = []
        for artist in artists:
            try:
                top = self._resolver.artist_top_tracks(artist)
            except CatalogError as e:
                logger.warning("Skipping artist '%s': %s", artist, e)
                continue
            for track in top:
                if track.id in seen:
                    continue
                seen.add(track.id)
                tracks.append(track)
        return tracks
