"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx

from github_reader.domain.ports.contents_client import ConnectionProvider
from github_reader.infrastructure.config import get_settings
from github_reader.infrastructure.github_rest_client import GitHubConnectionManager

_http_client: httpx.AsyncClient | None = None
_connections: GitHubConnectionManager | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _connections  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout))
    _connections = GitHubConnectionManager(
        client=_http_client,
        tokens=settings.connection_tokens(),
        api_url=settings.github_api_url,
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _connections  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    _connections = None


def get_connection_provider() -> ConnectionProvider:
    """Return the shared connection manager built at startup."""
    assert _connections is not None, "startup() was not called"
    return _connections
