"""Error codes and exception handlers for the API.

All API errors use a consistent response format:
{
    "error": "error_code",
    "message": "Human-readable description",
    ...additional context fields
}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from overture import (
    AudioAnalysisError,
    CatalogError,
    DuplicateISRCError,
    IntentAnalysisError,
    IntentCompilerNotConfiguredError,
    InvalidPlaylistError,
    NoConfidentMatchError,
    OvertureError,
    PlaylistNotFoundError,
    StorageError,
)
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    message: str


# Most specific class wins: lookups walk the exception's MRO.
_ERROR_CODES: dict[type[Exception], str] = {
    NoConfidentMatchError: "no_confident_match",
    DuplicateISRCError: "duplicate_isrc",
    PlaylistNotFoundError: "playlist_not_found",
    InvalidPlaylistError: "invalid_playlist",
    IntentCompilerNotConfiguredError: "intent_compiler_not_configured",
    CatalogError: "catalog_unavailable",
    IntentAnalysisError: "intent_analysis_failed",
    AudioAnalysisError: "audio_analysis_failed",
    StorageError: "storage_error",
    OvertureError: "internal_error",
}

_CONTEXT_FIELDS = ("playlist_id", "isrc", "title", "artist", "operation")


def error_code(exc: BaseException) -> str:
    """Machine-readable error identifier for an exception."""
    for cls in type(exc).__mro__:
        if cls in _ERROR_CODES:
            return _ERROR_CODES[cls]
    return "internal_error"


def error_content(exc: OvertureError) -> dict[str, str]:
    """Render an exception as an error response body."""
    content = {"error": error_code(exc), "message": exc.message}

    # Add context fields if present on the exception
    for field in _CONTEXT_FIELDS:
        value = getattr(exc, field, None)
        if value:
            content[field] = str(value)
    return content


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on the FastAPI app."""

    @app.exception_handler(OvertureError)
    async def overture_error_handler(
        request: Request, exc: OvertureError
    ) -> JSONResponse:
        """Generic handler for all OvertureError subclasses."""
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=error_content(exc))
