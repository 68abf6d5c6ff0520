"""Database repository for playlists and tracks."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from overture import (
    AudioFeatures,
    Playlist,
    PlaylistNotFoundError,
    StorageError,
    Track,
)
from overture.models.domain import FEATURE_FIELDS
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, func, select

from overture_api.db.models import PlaylistRecord, PlaylistTrackLink, TrackRecord

logger = logging.getLogger(__name__)


class PlaylistRepository:
    """Repository for playlist database operations.

    Implements both the PlaylistStore and TrackFeatureStore protocols.
    Every method runs in its own session and commits once, so each call
    is a single transaction.
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize repository with database engine."""
        self._engine = engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with Session(self._engine) as session:
                yield session
        except SQLAlchemyError as e:
            raise StorageError(f"database error: {e}") from e

    @staticmethod
    def _require_playlist(session: Session, playlist_id: str) -> PlaylistRecord:
        record = session.get(PlaylistRecord, playlist_id)
        if record is None:
            raise PlaylistNotFoundError(playlist_id)
        return record

    @staticmethod
    def _links(session: Session, playlist_id: str) -> list[PlaylistTrackLink]:
        stmt = (
            select(PlaylistTrackLink)
            .where(PlaylistTrackLink.playlist_id == playlist_id)
            .order_by(col(PlaylistTrackLink.position))
        )
        return list(session.exec(stmt).all())

    @staticmethod
    def _upsert_tracks(session: Session, tracks: list[Track]) -> None:
        for track in tracks:
            session.merge(TrackRecord.from_track(track))
        session.flush()

    def get_by_id(self, playlist_id: str) -> Playlist:
        """Get a playlist with its tracks in insertion order."""
        with self._session() as session:
            record = self._require_playlist(session, playlist_id)
            stmt = (
                select(TrackRecord)
                .join(
                    PlaylistTrackLink,
                    col(PlaylistTrackLink.track_id) == col(TrackRecord.id),
                )
                .where(PlaylistTrackLink.playlist_id == playlist_id)
                .order_by(col(PlaylistTrackLink.position))
            )
            tracks = [row.to_track() for row in session.exec(stmt).all()]
            return Playlist(id=record.id, name=record.name, tracks=tracks)

    def save(self, playlist: Playlist) -> None:
        """Upsert a playlist and replace its track links in order.

        Existing links keep their original added_at timestamp.
        """
        with self._session() as session:
            record = session.get(PlaylistRecord, playlist.id)
            if record is None:
                session.add(PlaylistRecord(id=playlist.id, name=playlist.name))
            else:
                record.name = playlist.name

            added_at: dict[str, datetime] = {}
            for link in self._links(session, playlist.id):
                added_at[link.track_id] = link.added_at
                session.delete(link)
            session.flush()

            self._upsert_tracks(session, playlist.tracks)

            now = datetime.now(UTC)
            linked: set[str] = set()
            for position, track in enumerate(playlist.tracks):
                if track.id in linked:
                    continue
                linked.add(track.id)
                session.add(
                    PlaylistTrackLink(
                        playlist_id=playlist.id,
                        track_id=track.id,
                        position=position,
                        added_at=added_at.get(track.id, now),
                    )
                )
            session.commit()

    def add_tracks_to_playlist(self, playlist_id: str, tracks: list[Track]) -> None:
        """Append tracks after the current last position in one transaction.

        Tracks already linked to the playlist are upserted but not linked again.
        """
        with self._session() as session:
            self._require_playlist(session, playlist_id)
            links = self._links(session, playlist_id)
            linked = {link.track_id for link in links}
            position = links[-1].position + 1 if links else 0

            self._upsert_tracks(session, tracks)

            for track in tracks:
                if track.id in linked:
                    continue
                linked.add(track.id)
                session.add(
                    PlaylistTrackLink(
                        playlist_id=playlist_id, track_id=track.id, position=position
                    )
                )
                position += 1
            session.commit()
        logger.debug("Added %d tracks to playlist %s", len(tracks), playlist_id)

    def update_track_features(self, track_id: str, features: AudioFeatures) -> None:
        """Overwrite the stored feature vector of a track."""
        with self._session() as session:
            record = session.get(TrackRecord, track_id)
            if record is None:
                logger.warning("Track %s not stored, skipping feature update", track_id)
                return
            record.apply_features(features)
            session.commit()

    def get_playlist_audio_features(self, playlist_id: str) -> AudioFeatures:
        """Average feature vector over the playlist's tracks (zeros when empty)."""
        with self._session() as session:
            self._require_playlist(session, playlist_id)
            averages = [
                func.coalesce(func.avg(getattr(TrackRecord, name)), 0.0)
                for name in FEATURE_FIELDS
            ]
            stmt = (
                select(*averages)
                .select_from(TrackRecord)
                .join(
                    PlaylistTrackLink,
                    col(PlaylistTrackLink.track_id) == col(TrackRecord.id),
                )
                .where(PlaylistTrackLink.playlist_id == playlist_id)
            )
            row = session.exec(stmt).one()
            return AudioFeatures(**dict(zip(FEATURE_FIELDS, row, strict=True)))
