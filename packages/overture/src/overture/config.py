"""Configuration for overture."""

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONFIDENCE = 0.5


def parse_min_confidence(raw: object) -> float:
    """Parse a minimum-confidence override.

    Blank values fall back to the default. Malformed values fall back to the
    default with a warning. Numeric values are clamped to [0, 1].

    Args:
        raw: Raw override (usually an environment string, may already be a float).

    Returns:
        Confidence threshold in [0, 1].
    """
    if raw is None:
        return DEFAULT_MIN_CONFIDENCE
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return DEFAULT_MIN_CONFIDENCE
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        value = math.nan
    if math.isnan(value):
        logger.warning(
            "Invalid min confidence %r, using %.2f", raw, DEFAULT_MIN_CONFIDENCE
        )
        return DEFAULT_MIN_CONFIDENCE
    return min(max(value, 0.0), 1.0)


@dataclass(frozen=True)
class MatchConfig:
    """Candidate matching configuration.

    Attributes:
        min_confidence: Minimum final score for a candidate to be accepted.
        max_candidates: Number of ranked candidates evaluated per search.
        search_limit: Page size requested from the catalog search.
        title_weight: Weight of title similarity in the composite score.
        artist_weight: Weight of artist similarity in the composite score.
        exact_artist_boost: Added when the candidate artist equals the target.
        title_substring_boost: Added when the candidate title contains the target.
    """

    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    max_candidates: int = 5
    search_limit: int = 5
    title_weight: float = 0.7
    artist_weight: float = 0.3
    exact_artist_boost: float = 0.4
    title_substring_boost: float = 0.3


@dataclass(frozen=True)
class SpotifyConfig:
    """Spotify Web API configuration.

    Attributes:
        client_id: Client-credentials application id.
        client_secret: Client-credentials application secret.
        base_url: API root.
        token_url: OAuth token endpoint.
        market: Market used for search and top-track lookups.
        max_retries: Attempts per request for retryable failures.
        retry_backoff: Base backoff in seconds (doubled per attempt).
        timeout: Per-request timeout in seconds.
    """

    client_id: str
    client_secret: str
    base_url: str = "https://api.spotify.com/v1"
    token_url: str = "https://accounts.spotify.com/api/token"
    market: str = "US"
    max_retries: int = 3
    retry_backoff: float = 0.5
    timeout: float = 10.0


@dataclass(frozen=True)
class OllamaConfig:
    """Ollama intent compiler configuration."""

    base_url: str = "http://localhost:11434"
    model: str = "deepseek-r1:8b"
    timeout: float = 30.0


@dataclass(frozen=True)
class WorkerConfig:
    """Background feature worker configuration.

    Attributes:
        workers: Number of long-lived worker threads.
        queue_size: Capacity of the job queue; submissions beyond it are dropped.
        preview_timeout: Timeout in seconds for downloading a preview clip.
    """

    workers: int = 2
    queue_size: int = 100
    preview_timeout: float = 15.0
