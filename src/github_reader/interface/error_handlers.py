"""Global exception handlers — translate domain errors to HTTP responses.

Every :class:`GithubReaderError` is answered with the standard
``{"status": "error", "message": "..."}`` envelope; the status code is taken
from the most specific entry of ``_EXCEPTION_STATUS`` in the exception's MRO.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from github_reader.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    EntryNotFoundError,
    GithubReaderError,
    GitHubRateLimitError,
    InvalidListingError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
    TransportError,
    UnknownConnectionError,
    UnsupportedArchiveFormatError,
)

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: dict[type[GithubReaderError], int] = {
    ConfigurationError: 422,
    UnknownConnectionError: 422,
    UnsupportedArchiveFormatError: 422,
    EntryNotFoundError: 404,
    RepositoryNotFoundError: 404,
    InvalidListingError: 400,
    AuthenticationError: 401,
    RepositoryAccessDeniedError: 403,
    GitHubRateLimitError: 429,
    TransportError: 502,
}


def status_for(exc: GithubReaderError) -> int:
    """Return the HTTP status for *exc* (500 for unmapped domain errors)."""
    for klass in type(exc).__mro__:
        if klass in _EXCEPTION_STATUS:
            return _EXCEPTION_STATUS[klass]
    return 500


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    @app.exception_handler(GithubReaderError)
    async def domain_handler(request: Request, exc: GithubReaderError) -> JSONResponse:
        status_code = status_for(exc)
        logger.warning("%s %s → %d %s: %s", request.method, request.url.path,
                       status_code, type(exc).__name__, exc)
        return _error_json(status_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
