from overture.models.domain import (
    AudioFeatures,
    IntentEntities,
    IntentObject,
    Playlist,
    SequenceHint,
    Track,
    VibeConstraint,
    VibeConstraints,
)
from overture.models.enums import IntentEventType, IntentStage
from overture.models.results import AddTrackResult, IntentResult

__all__ = [
    "AddTrackResult",
    "AudioFeatures",
    "IntentEntities",
    "IntentEventType",
    "IntentObject",
    "IntentResult",
    "IntentStage",
    "Playlist",
    "SequenceHint",
    "Track",
    "VibeConstraint",
    "VibeConstraints",
]
