"""Spotify Web API client wrapper."""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol

import requests
from pydantic import ValidationError

from overture.config import SpotifyConfig
from overture.exceptions import CatalogAccessDeniedError, CatalogError
from overture.models.domain import AudioFeatures, Track
from overture.models.spotify import SpotifyAudioFeatures, SpotifyTrack

logger = logging.getLogger(__name__)

# Refresh the access token this many seconds before it actually expires
_TOKEN_EXPIRY_MARGIN = 60.0
# Maximum number of ids per audio-features batch request
_FEATURES_BATCH_SIZE = 100
_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})
_ACCESS_DENIED_STATUSES = frozenset({403, 404})


class CatalogProtocol(Protocol):
    """Protocol for music catalog clients.

    This protocol enables dependency injection and testing.
    Implement this protocol to create fake catalogs for testing.
    """

    def search_tracks(self, query: str, limit: int = 5) -> list[Track]:
        """Search for tracks, relevance ranked."""
        ...

    def get_features(self, track_id: str) -> AudioFeatures:
        """Fetch audio features for one track."""
        ...

    def get_artist_top_tracks(self, artist_name: str) -> list[Track]:
        """Fetch an artist's top tracks with audio features populated."""
        ...


class SpotifyClient:
    """Production Spotify Web API client.

    Uses the client-credentials flow. The access token is cached and shared
    across threads. Transient failures (connection errors, timeouts, 429 and
    5xx responses) are retried with exponential backoff. Implements
    CatalogProtocol.
    """

    def __init__(
        self,
        config: SpotifyConfig,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Spotify configuration with credentials.
            session: Optional requests session. Creates one if not provided.
            sleep: Sleep function used between retries.
        """
        self._config = config
        self._session = session or requests.Session()
        self._sleep = sleep
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def search_tracks(self, query: str, limit: int = 5) -> list[Track]:
        """Search for tracks.

        Args:
            query: Catalog query, e.g. "track:happy artist:pharrell williams".
            limit: Maximum number of results.

        Returns:
            Relevance-ranked tracks without audio features.

        Raises:
            CatalogError: If the request fails.
        """
        logger.debug("Searching catalog: %s", query)
        data = self._get(
            "/search",
            "search",
            params={
                "q": query,
                "type": "track",
                "limit": limit,
                "market": self._config.market,
            },
        )
        items = (data.get("tracks") or {}).get("items") or []
        return [t.to_domain() for t in self._parse_tracks(items, "search")]

    def get_features(self, track_id: str) -> AudioFeatures:
        """Fetch audio features for a single track.

        Raises:
            CatalogAccessDeniedError: If the catalog denies the lookup (403/404).
            CatalogError: If the request fails otherwise.
        """
        data = self._get(f"/audio-features/{track_id}", "audio-features")
        try:
            return SpotifyAudioFeatures.model_validate(data).to_domain()
        except ValidationError as e:
            raise CatalogError(f"invalid response: {e}", "audio-features") from e

    def get_artist_top_tracks(self, artist_name: str) -> list[Track]:
        """Fetch an artist's top tracks with audio features.

        The artist is resolved by name (first search hit). Features are
        fetched in one batch; if the batch fails the tracks are returned
        with zero features.

        Args:
            artist_name: Artist to look up.

        Returns:
            Top tracks, or an empty list if no artist matches.

        Raises:
            CatalogError: If the artist search or top-tracks request fails.
        """
        data = self._get(
            "/search",
            "artist-search",
            params={"q": artist_name, "type": "artist", "limit": 1},
        )
        artists = (data.get("artists") or {}).get("items") or []
        if not artists or not artists[0].get("id"):
            logger.info("No artist found for '%s'", artist_name)
            return []
        artist_id = artists[0]["id"]

        data = self._get(
            f"/artists/{artist_id}/top-tracks",
            "top-tracks",
            params={"market": self._config.market},
        )
        raw_tracks = self._parse_tracks(data.get("tracks") or [], "top-tracks")
        if not raw_tracks:
            return []

        features = self._batch_audio_features([t.id for t in raw_tracks])
        return [t.to_domain(features.get(t.id)) for t in raw_tracks]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _batch_audio_features(self, track_ids: list[str]) -> dict[str, AudioFeatures]:
        result: dict[str, AudioFeatures] = {}
        for start in range(0, len(track_ids), _FEATURES_BATCH_SIZE):
            chunk = track_ids[start : start + _FEATURES_BATCH_SIZE]
            try:
                data = self._get(
                    "/audio-features",
                    "audio-features",
                    params={"ids": ",".join(chunk)},
                )
            except CatalogError as e:
                logger.warning("Batch audio features failed: %s", e)
                continue
            for item in data.get("audio_features") or []:
                # Unknown ids come back as null entries
                if not item:
                    continue
                try:
                    parsed = SpotifyAudioFeatures.model_validate(item)
                except ValidationError as e:
                    logger.debug("Skipping malformed audio features: %s", e)
                    continue
                if parsed.id:
                    result[parsed.id] = parsed.to_domain()
        return result

    @staticmethod
    def _parse_tracks(items: list[Any], operation: str) -> list[SpotifyTrack]:
        tracks: list[SpotifyTrack] = []
        for item in items:
            if not item:
                continue
            try:
                tracks.append(SpotifyTrack.model_validate(item))
            except ValidationError as e:
                logger.debug("Skipping malformed track in %s: %s", operation, e)
        return tracks

    def _access_token(self) -> str:
        with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            logger.debug("Requesting new Spotify access token")
            try:
                response = self._session.post(
                    self._config.token_url,
                    data={"grant_type": "client_credentials"},
                    auth=(self._config.client_id, self._config.client_secret),
                    timeout=self._config.timeout,
                )
            except requests.RequestException as e:
                raise CatalogError(str(e), "token") from e
            if response.status_code != 200:
                raise CatalogError(f"status {response.status_code}", "token")
            try:
                payload = response.json()
                token = payload["access_token"]
                expires_in = float(payload.get("expires_in", 3600))
            except (ValueError, KeyError, TypeError) as e:
                raise CatalogError(f"invalid token response: {e}", "token") from e

            self._token = token
            self._token_expires_at = (
                time.monotonic() + expires_in - _TOKEN_EXPIRY_MARGIN
            )
            return token

    def _get(
        self,
        path: str,
        operation: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """GET a JSON resource with retries.

        Raises:
            CatalogAccessDeniedError: On 403/404.
            CatalogError: On any other failure after retries are exhausted.
        """
        url = f"{self._config.base_url}{path}"
        attempts = max(self._config.max_retries, 1)

        for attempt in range(1, attempts + 1):
            token = self._access_token()
            delay = self._config.retry_backoff * (2 ** (attempt - 1))
            try:
                response = self._session.get(
                    url,
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                    timeout=self._config.timeout,
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt == attempts:
                    raise CatalogError(str(e), operation) from e
                logger.debug(
                    "Spotify %s failed (%s), retry %d/%d in %.1fs",
                    operation,
                    e,
                    attempt,
                    attempts - 1,
                    delay,
                )
                self._sleep(delay)
                continue
            except requests.RequestException as e:
                raise CatalogError(str(e), operation) from e

            status = response.status_code
            if status in _RETRYABLE_STATUSES and attempt < attempts:
                delay = _retry_after(response, delay)
                logger.debug(
                    "Spotify %s returned %d, retry %d/%d in %.1fs",
                    operation,
                    status,
                    attempt,
                    attempts - 1,
                    delay,
                )
                self._sleep(delay)
                continue
            if status == 401:
                # Token revoked early; force a refresh on the next call
                with self._token_lock:
                    self._token = None
            if status in _ACCESS_DENIED_STATUSES:
                raise CatalogAccessDeniedError(f"status {status}", operation)
            if status != 200:
                raise CatalogError(f"status {status}", operation)

            try:
                data = response.json()
            except ValueError as e:
                raise CatalogError(f"invalid JSON: {e}", operation) from e
            if not isinstance(data, dict):
                raise CatalogError("unexpected response shape", operation)
            return data

        # Unreachable: the loop either returns or raises
        raise CatalogError("retries exhausted", operation)


def _retry_after(response: requests.Response, default: float) -> float:
    value = response.headers.get("Retry-After")
    if not value:
        return default
    try:
        return max(float(value), 0.0)
    except ValueError:
        return default
