"""Similarity scoring and candidate selection for catalog search results.

The catalog search returns a relevance-ranked list of candidates for a
"track:<title> artist:<artist>" query. This module scores each candidate
against the requested title and artist and picks the best one above a
confidence threshold.

Scoring scheme:
    base  = 0.7 * similarity(title) + 0.3 * similarity(artist)
            on independently normalized title and artist strings
    score = base + 0.4 (exact artist) + 0.3 (title substring), clamped to 1.0

Ties are broken by exact-artist match, then title-substring match, then
catalog order (first encountered wins).
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from overture.config import MatchConfig
from overture.exceptions import NoConfidentMatchError
from overture.lib.normalize import normalize_or_raw
from overture.models.domain import Track

logger = logging.getLogger(__name__)

# Separator used when flattening multiple artists into one display string
_ARTIST_SEPARATOR = ", "


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert/delete/substitute cost 1) over code points."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1].

    Equal strings (including two empty strings) score 1.0.
    """
    if a == b:
        return 1.0
    longest = max(len(a), len(b))
    return 1.0 - levenshtein_distance(a, b) / longest


def composite_score(
    target_title: str,
    target_artist: str,
    candidate_title: str,
    candidate_artist: str,
    config: MatchConfig | None = None,
) -> float:
    """Weighted title/artist similarity, before boosts."""
    config = config or MatchConfig()
    title_sim = similarity(
        normalize_or_raw(target_title).lower(),
        normalize_or_raw(candidate_title).lower(),
    )
    artist_sim = similarity(
        normalize_or_raw(target_artist).lower(),
        normalize_or_raw(candidate_artist).lower(),
    )
    return config.title_weight * title_sim + config.artist_weight * artist_sim


def is_exact_artist(candidate_artist: str, target_artist: str) -> bool:
    """Case-insensitive exact artist match after trimming.

    The candidate's flattened artist string matches as a whole or by any of
    its individual artists.
    """
    target = target_artist.strip().casefold()
    if not target:
        return False
    names = [candidate_artist, *candidate_artist.split(_ARTIST_SEPARATOR)]
    return any(name.strip().casefold() == target for name in names)


def is_title_substring(candidate_title: str, target_title: str) -> bool:
    """Whether the candidate title contains the target title (lowercased)."""
    candidate = candidate_title.strip().lower()
    target = target_title.strip().lower()
    if not candidate or not target:
        return False
    return target in candidate


@dataclass(frozen=True)
class MatchCandidate:
    """A search result paired with its confidence score.

    Attributes:
        track: The catalog track.
        base_score: Weighted similarity before boosts.
        score: Final clamped confidence score.
        exact_artist: Candidate artist equals the target artist.
        title_substring: Candidate title contains the target title.
    """

    track: Track
    base_score: float
    score: float
    exact_artist: bool
    title_substring: bool

    @property
    def rank_key(self) -> tuple[float, bool, bool]:
        """Ordering used to compare candidates (higher is better)."""
        return (self.score, self.exact_artist, self.title_substring)


def score_candidate(
    target_title: str,
    target_artist: str,
    candidate: Track,
    config: MatchConfig | None = None,
) -> MatchCandidate:
    """Score one search result against the requested title and artist."""
    config = config or MatchConfig()
    base = composite_score(
        target_title, target_artist, candidate.title, candidate.artist, config
    )
    exact_artist = is_exact_artist(candidate.artist, target_artist)
    title_substring = is_title_substring(candidate.title, target_title)

    score = base
    if exact_artist:
        score += config.exact_artist_boost
    if title_substring:
        score += config.title_substring_boost

    return MatchCandidate(
        track=candidate,
        base_score=base,
        score=min(score, 1.0),
        exact_artist=exact_artist,
        title_substring=title_substring,
    )


def select_best_match(
    target_title: str,
    target_artist: str,
    candidates: Sequence[Track],
    min_confidence: float | None = None,
    config: MatchConfig | None = None,
) -> Track:
    """Pick the best candidate whose score clears the confidence threshold.

    Only the first ``config.max_candidates`` results are evaluated, in
    catalog order.

    Args:
        target_title: Requested title.
        target_artist: Requested artist.
        candidates: Search results, relevance-ranked upstream.
        min_confidence: Threshold override; defaults to config.min_confidence.
        config: Matching configuration.

    Returns:
        The selected track.

    Raises:
        NoConfidentMatchError: If there are no candidates or none clears the
            threshold.
    """
    config = config or MatchConfig()
    threshold = config.min_confidence if min_confidence is None else min_confidence
    threshold = min(max(threshold, 0.0), 1.0)

    best: MatchCandidate | None = None
    for track in candidates[: config.max_candidates]:
        candidate = score_candidate(target_title, target_artist, track, config)
        logger.debug(
            "Candidate: %s - %s (score: %.2f)",
            track.artist,
            track.title,
            candidate.score,
        )
        if candidate.score < threshold:
            continue
        if best is None or candidate.rank_key > best.rank_key:
            best = candidate

    if best is None:
        raise NoConfidentMatchError(target_title, target_artist)

    return best.track
