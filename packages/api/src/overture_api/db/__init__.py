"""Database module for playlist persistence."""

from overture_api.db.engine import DEFAULT_DB_PATH, create_db_engine, init_db
from overture_api.db.models import PlaylistRecord, PlaylistTrackLink, TrackRecord
from overture_api.db.repository import PlaylistRepository

__all__ = [
    "DEFAULT_DB_PATH",
    "PlaylistRecord",
    "PlaylistRepository",
    "PlaylistTrackLink",
    "TrackRecord",
    "create_db_engine",
    "init_db",
]
