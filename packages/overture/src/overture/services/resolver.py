"""Track resolution: free-text title/artist to a catalog track with features."""

import logging

from overture.client import CatalogProtocol
from overture.config import MatchConfig
from overture.exceptions import CatalogAccessDeniedError
from overture.lib.features import deterministic_features, features_or_fallback
from overture.lib.matching import select_best_match
from overture.lib.normalize import normalize_or_raw
from overture.models.domain import Track

logger = logging.getLogger(__name__)


def build_search_query(title: str, artist: str) -> str:
    """Build the catalog field-filter query from normalized title and artist."""
    return f"track:{normalize_or_raw(title)} artist:{normalize_or_raw(artist)}"


class TrackResolver:
    """Resolves user-supplied titles to catalog tracks.

    Feature lookups that the catalog denies, or that come back all zero,
    are replaced by deterministic fallback features. Any other catalog
    failure propagates.
    """

    def __init__(
        self, catalog: CatalogProtocol, config: MatchConfig | None = None
    ) -> None:
        self._catalog = catalog
        self._config = config or MatchConfig()

    @property
    def config(self) -> MatchConfig:
        return self._config

    def resolve_track(self, title: str, artist: str) -> Track:
        """Search, match and enrich a track.

        Args:
            title: Requested title.
            artist: Requested artist.

        Returns:
            The matched track with audio features populated.

        Raises:
            NoConfidentMatchError: If no candidate clears the threshold.
            CatalogError: If the search or a non-denied feature lookup fails.
        """
        query = build_search_query(title, artist)
        candidates = self._catalog.search_tracks(query, self._config.search_limit)
        logger.debug("Search '%s' returned %d candidate(s)", query, len(candidates))
        return self.resolve_from_candidates(title, artist, candidates)

    def resolve_from_candidates(
        self, title: str, artist: str, candidates: list[Track]
    ) -> Track:
        """Match already-fetched search results and enrich the winner.

        Raises:
            NoConfidentMatchError: If no candidate clears the threshold.
            CatalogError: If a non-denied feature lookup fails.
        """
        track = select_best_match(title, artist, candidates, config=self._config)
        logger.info("Matched '%s' by '%s' to %s", title, artist, track.id)

        try:
            features = self._catalog.get_features(track.id)
        except CatalogAccessDeniedError as e:
            logger.warning(
                "Features unavailable for %s (%s), using fallback", track.id, e
            )
            features = deterministic_features(track.id)
        else:
            if features.is_zero:
                logger.warning("Zero features for %s, using fallback", track.id)
                features = deterministic_features(track.id)

        return track.model_copy(update={"features": features})

    def artist_top_tracks(self, artist_name: str) -> list[Track]:
        """Fetch an artist's top tracks, filling missing features.

        Raises:
            CatalogError: If the catalog lookup fails.
        """
        tracks = self._catalog.get_artist_top_tracks(artist_name)
        return [
            t.model_copy(update={"features": features_or_fallback(t.id, t.features)})
            for t in tracks
        ]
