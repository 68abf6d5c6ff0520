"""Tests for exceptions."""

import pytest
from overture.exceptions import (
    AudioAnalysisError,
    CatalogAccessDeniedError,
    CatalogError,
    CollaboratorError,
    DuplicateISRCError,
    IntentAnalysisError,
    IntentCompilerNotConfiguredError,
    InvalidPlaylistError,
    NoConfidentMatchError,
    OvertureError,
    PlaylistNotFoundError,
    StorageError,
)


class TestExceptionStatusCodes:
    """Tests for HTTP status codes on exceptions."""

    @pytest.mark.parametrize(
        ("error", "expected_status"),
        [
            (OvertureError("x"), 500),
            (NoConfidentMatchError("Creep", "Radiohead"), 422),
            (DuplicateISRCError("USRC1"), 409),
            (PlaylistNotFoundError("p1"), 404),
            (InvalidPlaylistError("empty"), 400),
            (IntentCompilerNotConfiguredError(), 501),
            (CatalogError("down", "search"), 502),
            (CatalogAccessDeniedError("status 403", "audio-features"), 502),
            (IntentAnalysisError("empty", "chat"), 502),
            (AudioAnalysisError("bad mp3", "decode"), 502),
            (StorageError("locked"), 500),
        ],
        ids=lambda v: type(v).__name__ if isinstance(v, Exception) else str(v),
    )
    def test_exception_status_codes(
        self, error: OvertureError, expected_status: int
    ) -> None:
        assert error.status_code == expected_status
        assert isinstance(error, OvertureError)


class TestMessages:
    """Tests for exception messages and context attributes."""

    def test_no_confident_match_carries_query(self) -> None:
        error = NoConfidentMatchError("Creep", "Radiohead")
        assert error.title == "Creep"
        assert error.artist == "Radiohead"
        assert "Creep" in str(error)
        assert "Radiohead" in str(error)

    def test_no_confident_match_without_query(self) -> None:
        assert str(NoConfidentMatchError("", "")) == "no confident match"

    def test_collaborator_prefix(self) -> None:
        error = CatalogError("status 503", "top-tracks")
        assert error.message == "spotify top-tracks: status 503"
        assert error.collaborator == "spotify"
        assert error.operation == "top-tracks"

    def test_collaborator_without_operation(self) -> None:
        assert AudioAnalysisError("boom").message == "analyzer: boom"

    def test_access_denied_is_catalog_error(self) -> None:
        assert issubclass(CatalogAccessDeniedError, CatalogError)
        assert issubclass(CatalogError, CollaboratorError)

    def test_not_found_message(self) -> None:
        error = PlaylistNotFoundError("p1")
        assert error.playlist_id == "p1"
        assert error.message == "Playlist p1 not found"
