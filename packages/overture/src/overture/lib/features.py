"""Deterministic fallback audio features.

When the catalog has no feature data for a track (access denied or an
all-zero vector), features are generated from a PRNG seeded with the
FNV-1a hash of the track id, so the same id always yields the same vector.
"""

import random

from overture.models.domain import AudioFeatures

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193

# Fixed draw ranges; changing them changes every fallback vector
_UNIT_RANGE = (0.1, 0.9)
_TEMPO_RANGE = (60.0, 180.0)


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a hash."""
    h = _FNV32_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def deterministic_features(track_id: str) -> AudioFeatures:
    """Generate reproducible pseudo-random features for a track id.

    A fresh generator is created per call, so the function is pure and
    thread-safe.
    """
    rng = random.Random(fnv1a_32(track_id.encode("utf-8")))

    def between(low: float, high: float) -> float:
        return rng.uniform(low, high)

    return AudioFeatures(
        energy=between(*_UNIT_RANGE),
        valence=between(*_UNIT_RANGE),
        danceability=between(*_UNIT_RANGE),
        acousticness=between(*_UNIT_RANGE),
        instrumentalness=between(*_UNIT_RANGE),
        tempo=between(*_TEMPO_RANGE),
    )


def features_or_fallback(
    track_id: str, features: AudioFeatures | None
) -> AudioFeatures:
    """Return catalog features, or the deterministic set when missing or all zero."""
    if features is None or features.is_zero:
        return deterministic_features(track_id)
    return features
