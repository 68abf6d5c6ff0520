"""Custom exceptions for overture.

All exceptions include an HTTP status_code attribute for easy
integration with web frameworks like FastAPI.
"""


class OvertureError(Exception):
    """Base exception for overture.

    Attributes:
        status_code: HTTP status code for API error responses.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NoConfidentMatchError(OvertureError):
    """No catalog candidate cleared the confidence threshold.

    Raised when the search returned nothing, or nothing scored high enough.
    The caller can ask the user to refine the title or artist.
    """

    status_code: int = 422  # Unprocessable Entity

    def __init__(self, title: str, artist: str) -> None:
        self.title = title
        self.artist = artist
        if not title and not artist:
            message = "no confident match"
        else:
            message = f"no confident match found for title {title!r} artist {artist!r}"
        super().__init__(message)


class DuplicateISRCError(OvertureError):
    """A track with the same ISRC is already in the playlist.

    The playlist is left unchanged.
    """

    status_code: int = 409  # Conflict

    def __init__(self, isrc: str) -> None:
        self.isrc = isrc
        super().__init__(f"duplicate ISRC {isrc!r} in playlist")


class PlaylistNotFoundError(OvertureError):
    """Playlist does not exist in the store."""

    status_code: int = 404  # Not Found

    def __init__(self, playlist_id: str) -> None:
        self.playlist_id = playlist_id
        super().__init__(f"Playlist {playlist_id} not found")


class InvalidPlaylistError(OvertureError):
    """Playlist arguments are invalid (e.g. an empty name)."""

    status_code: int = 400  # Bad Request


class IntentCompilerNotConfiguredError(OvertureError):
    """No intent compiler is wired into the orchestrator.

    Raised before any side effect of intent processing takes place.
    """

    status_code: int = 501  # Not Implemented

    def __init__(self) -> None:
        super().__init__("intent compiler not configured")


class CollaboratorError(OvertureError):
    """An external collaborator (catalog, LLM, audio decoder) failed.

    Attributes:
        collaborator: Which collaborator failed (e.g. "spotify").
        operation: Which operation failed (e.g. "search").
    """

    status_code: int = 502  # Bad Gateway (upstream failure)
    collaborator: str = "upstream"

    def __init__(self, message: str, operation: str = "") -> None:
        self.operation = operation
        prefix = f"{self.collaborator} {operation}" if operation else self.collaborator
        super().__init__(f"{prefix}: {message}")


class CatalogError(CollaboratorError):
    """Spotify catalog request failed (transport, status or decoding)."""

    collaborator = "spotify"


class CatalogAccessDeniedError(CatalogError):
    """Catalog explicitly denied a lookup (403/404 class response).

    The track resolver treats this as "no data" and substitutes
    deterministic features instead of failing.
    """


class IntentAnalysisError(CollaboratorError):
    """Intent extraction from free text failed."""

    collaborator = "ollama"


class AudioAnalysisError(CollaboratorError):
    """Preview audio could not be fetched or decoded."""

    collaborator = "analyzer"


class StorageError(OvertureError):
    """Persistence layer failure."""

    status_code: int = 500
