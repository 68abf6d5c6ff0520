"""SQLite database engine setup."""

from pathlib import Path

from sqlalchemy import Engine, event
from sqlmodel import SQLModel, create_engine

DEFAULT_DB_PATH = Path("data") / "overture.db"

# Request threads and feature workers write concurrently.
BUSY_TIMEOUT_SECONDS = 30.0


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine shared by request threads and feature workers.

    Connections use write-ahead logging so reads do not block on a writer,
    and wait up to BUSY_TIMEOUT_SECONDS for a competing write lock.

    Args:
        db_path: Path to the SQLite database file. Parent directories are
            created as needed.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False, "timeout": BUSY_TIMEOUT_SECONDS},
    )

    @event.listens_for(engine, "connect")
    def _enable_wal(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_db(engine: Engine) -> None:
    """Create the playlists, tracks and playlist_tracks tables if missing."""
    SQLModel.metadata.create_all(engine)
