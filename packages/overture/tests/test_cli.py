"""Tests for the debugging CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from overture.cli import main
from overture.exceptions import CatalogError
from overture.lib.features import deterministic_features
from overture.models.domain import AudioFeatures, Track


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestNormalizeCommand:
    def test_prints_normalized(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["normalize", "Happy (Remastered 2014)"])
        assert result.exit_code == 0
        assert result.output.strip() == "happy"


class TestFallbackFeaturesCommand:
    def test_json_output(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["fallback-features", "t1", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == deterministic_features("t1").model_dump()

    def test_table_output(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["fallback-features", "t1"])
        assert result.exit_code == 0
        assert "energy" in result.output


class TestMatchCommand:
    """Tests for the match command with a patched Spotify client."""

    @pytest.fixture
    def env(self) -> dict[str, str]:
        return {
            "OVERTURE_SPOTIFY_CLIENT_ID": "id",
            "OVERTURE_SPOTIFY_CLIENT_SECRET": "secret",
        }

    def test_prints_match(self, runner: CliRunner, env: dict[str, str]) -> None:
        track = Track(id="happy", title="Happy", artist="Pharrell Williams")
        with patch("overture.cli.SpotifyClient") as client_cls:
            client = client_cls.return_value
            client.search_tracks.return_value = [track]
            client.get_features.return_value = AudioFeatures(energy=0.82)

            result = runner.invoke(
                main, ["match", "Happy", "Pharrell Williams"], env=env
            )

        assert result.exit_code == 0, result.output
        assert "Matched" in result.output
        assert "happy" in result.output
        client.search_tracks.assert_called_once()
        client.get_features.assert_called_once_with("happy")

    def test_no_match_fails(self, runner: CliRunner, env: dict[str, str]) -> None:
        track = Track(id="ls", title="Love Story", artist="Taylor Swift")
        with patch("overture.cli.SpotifyClient") as client_cls:
            client_cls.return_value.search_tracks.return_value = [track]

            result = runner.invoke(main, ["match", "Creep", "Radiohead"], env=env)

        assert result.exit_code == 1
        assert "no confident match" in result.output

    def test_catalog_error_fails(self, runner: CliRunner, env: dict[str, str]) -> None:
        with patch("overture.cli.SpotifyClient") as client_cls:
            client_cls.return_value.search_tracks.side_effect = CatalogError(
                "status 503", "search"
            )

            result = runner.invoke(main, ["match", "Creep", "Radiohead"], env=env)

        assert result.exit_code == 1
        assert "spotify search" in result.output

    def test_requires_credentials(self, runner: CliRunner) -> None:
        result = runner.invoke(
            main,
            ["match", "Creep", "Radiohead"],
            env={
                "OVERTURE_SPOTIFY_CLIENT_ID": None,
                "OVERTURE_SPOTIFY_CLIENT_SECRET": None,
            },
        )
        assert result.exit_code == 2
