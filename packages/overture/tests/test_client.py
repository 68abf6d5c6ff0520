"""Tests for SpotifyClient with a mocked HTTP session."""

from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
from overture.client import SpotifyClient
from overture.config import SpotifyConfig
from overture.exceptions import CatalogAccessDeniedError, CatalogError


def _response(
    status: int = 200,
    payload: Any = None,
    headers: dict[str, str] | None = None,
) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload if payload is not None else {}
    response.headers = headers or {}
    return response


def _track_payload(id: str, name: str = "Song", artist: str = "Artist") -> dict:
    return {
        "id": id,
        "name": name,
        "duration_ms": 200000,
        "artists": [{"name": artist, "id": "a1"}],
        "album": {"name": "Album", "images": [{"url": f"https://img/{id}"}]},
        "external_ids": {"isrc": f"ISRC{id}"},
        "preview_url": f"https://p.scdn.co/{id}",
    }


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.post.return_value = _response(
        payload={"access_token": "tok", "expires_in": 3600}
    )
    return session


@pytest.fixture
def sleep() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(session: MagicMock, sleep: MagicMock) -> SpotifyClient:
    config = SpotifyConfig(client_id="id", client_secret="secret", retry_backoff=0.5)
    return SpotifyClient(config, session=session, sleep=sleep)


class TestSearchTracks:
    """Tests for search_tracks."""

    def test_parses_results(self, client: SpotifyClient, session: MagicMock) -> None:
        session.get.return_value = _response(
            payload={"tracks": {"items": [_track_payload("t1"), None]}}
        )

        tracks = client.search_tracks("track:song artist:artist", 5)

        assert [t.id for t in tracks] == ["t1"]
        assert tracks[0].isrc == "ISRCt1"
        assert tracks[0].preview_url == "https://p.scdn.co/t1"
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {
            "q": "track:song artist:artist",
            "type": "track",
            "limit": 5,
            "market": "US",
        }
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert kwargs["timeout"] == 10.0

    def test_token_is_cached(self, client: SpotifyClient, session: MagicMock) -> None:
        session.get.return_value = _response(payload={"tracks": {"items": []}})

        client.search_tracks("q")
        client.search_tracks("q")

        assert session.post.call_count == 1

    def test_token_failure(self, client: SpotifyClient, session: MagicMock) -> None:
        session.post.return_value = _response(status=401)

        with pytest.raises(CatalogError, match="token"):
            client.search_tracks("q")

    def test_malformed_items_skipped(
        self, client: SpotifyClient, session: MagicMock
    ) -> None:
        session.get.return_value = _response(
            payload={"tracks": {"items": [{"name": "no id"}, _track_payload("t2")]}}
        )
        assert [t.id for t in client.search_tracks("q")] == ["t2"]


class TestRetries:
    """Tests for retry behaviour."""

    def test_retries_server_errors(
        self, client: SpotifyClient, session: MagicMock, sleep: MagicMock
    ) -> None:
        session.get.side_effect = [
            _response(status=503),
            _response(payload={"tracks": {"items": []}}),
        ]

        assert client.search_tracks("q") == []
        assert session.get.call_count == 2
        sleep.assert_called_once_with(0.5)

    def test_backoff_doubles(
        self, client: SpotifyClient, session: MagicMock, sleep: MagicMock
    ) -> None:
        session.get.side_effect = [
            _response(status=500),
            _response(status=502),
            _response(payload={"tracks": {"items": []}}),
        ]

        client.search_tracks("q")

        assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0]

    def test_honours_retry_after(
        self, client: SpotifyClient, session: MagicMock, sleep: MagicMock
    ) -> None:
        session.get.side_effect = [
            _response(status=429, headers={"Retry-After": "2"}),
            _response(payload={"tracks": {"items": []}}),
        ]

        client.search_tracks("q")

        sleep.assert_called_once_with(2.0)

    def test_retries_connection_errors(
        self, client: SpotifyClient, session: MagicMock
    ) -> None:
        session.get.side_effect = [
            requests.ConnectionError("reset"),
            requests.Timeout("slow"),
            _response(payload={"tracks": {"items": []}}),
        ]

        assert client.search_tracks("q") == []

    def test_gives_up_after_max_retries(
        self, client: SpotifyClient, session: MagicMock
    ) -> None:
        session.get.return_value = _response(status=503)

        with pytest.raises(CatalogError, match="search"):
            client.search_tracks("q")
        assert session.get.call_count == 3

    def test_client_errors_not_retried(
        self, client: SpotifyClient, session: MagicMock
    ) -> None:
        session.get.return_value = _response(status=400)

        with pytest.raises(CatalogError):
            client.search_tracks("q")
        assert session.get.call_count == 1

    def test_invalid_json(self, client: SpotifyClient, session: MagicMock) -> None:
        response = _response()
        response.json.side_effect = ValueError("not json")
        session.get.return_value = response

        with pytest.raises(CatalogError, match="invalid JSON"):
            client.search_tracks("q")


class TestGetFeatures:
    """Tests for get_features."""

    def test_parses_features(self, client: SpotifyClient, session: MagicMock) -> None:
        session.get.return_value = _response(
            payload={"id": "t1", "energy": 0.82, "valence": 0.96, "tempo": 160.0}
        )

        features = client.get_features("t1")

        assert features.energy == 0.82
        assert features.tempo == 160.0
        assert session.get.call_args.args[0].endswith("/audio-features/t1")

    @pytest.mark.parametrize("status", [403, 404])
    def test_denied(
        self, client: SpotifyClient, session: MagicMock, status: int
    ) -> None:
        session.get.return_value = _response(status=status)

        with pytest.raises(CatalogAccessDeniedError):
            client.get_features("t1")
        assert session.get.call_count == 1


class TestGetArtistTopTracks:
    """Tests for get_artist_top_tracks."""

    def test_fetches_tracks_with_features(
        self, client: SpotifyClient, session: MagicMock
    ) -> None:
        session.get.side_effect = [
            _response(payload={"artists": {"items": [{"id": "willie"}]}}),
            _response(payload={"tracks": [_track_payload("t1"), _track_payload("t2")]}),
            _response(
                payload={"audio_features": [{"id": "t1", "energy": 0.3}, None]}
            ),
        ]

        tracks = client.get_artist_top_tracks("Willie Nelson")

        assert [t.id for t in tracks] == ["t1", "t2"]
        assert tracks[0].features.energy == 0.3
        assert tracks[1].features.is_zero
        urls = [c.args[0] for c in session.get.call_args_list]
        assert urls[1].endswith("/artists/willie/top-tracks")
        assert session.get.call_args_list[2].kwargs["params"] == {"ids": "t1,t2"}

    def test_unknown_artist(self, client: SpotifyClient, session: MagicMock) -> None:
        session.get.return_value = _response(payload={"artists": {"items": []}})

        assert client.get_artist_top_tracks("Nobody") == []
        assert session.get.call_count == 1

    def test_feature_batch_failure_keeps_tracks(
        self, client: SpotifyClient, session: MagicMock
    ) -> None:
        session.get.side_effect = [
            _response(payload={"artists": {"items": [{"id": "willie"}]}}),
            _response(payload={"tracks": [_track_payload("t1")]}),
            _response(status=403),
        ]

        tracks = client.get_artist_top_tracks("Willie Nelson")

        assert [t.id for t in tracks] == ["t1"]
        assert tracks[0].features.is_zero

    def test_top_tracks_failure_raises(
        self, client: SpotifyClient, session: MagicMock
    ) -> None:
        session.get.side_effect = [
            _response(payload={"artists": {"items": [{"id": "willie"}]}}),
            _response(status=400),
        ]

        with pytest.raises(CatalogError, match="top-tracks"):
            client.get_artist_top_tracks("Willie Nelson")
