from enum import StrEnum


class IntentStage(StrEnum):
    """Stages of the intent-to-playlist pipeline."""

    RECEIVED = "received"
    THINKING = "thinking"  # Intent extraction
    FETCHING = "fetching"  # Per-artist catalog fetch loop
    FILTERING = "filtering"
    PERSISTING = "persisting"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_finished(self) -> bool:
        return self in (IntentStage.COMPLETE, IntentStage.ERROR)


class IntentEventType(StrEnum):
    """Status events streamed to the client while an intent is processed."""

    THINKING = "thinking"
    HEARTBEAT = "heartbeat"
    COMPLETE = "complete"
    ERROR = "error"
