"""GitHub REST API client — implements the RemoteContentClient port."""

from __future__ import annotations

import base64
import logging
from datetime import datetime, timezone
from typing import Any, NoReturn
from urllib.parse import quote

import httpx

from github_reader.domain.entities import ArchiveFormat, ArchiveReference, EntryDescriptor
from github_reader.domain.exceptions import (
    AuthenticationError,
    GitHubRateLimitError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
    TransportError,
    UnknownConnectionError,
    UnsupportedArchiveFormatError,
)
from github_reader.domain.ports.contents_client import ContentsResult

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_USER_AGENT = "github-reader/1.0"
_ARCHIVE_FORMATS = frozenset(f.value for f in ArchiveFormat)


def _repo_prefix(organization: str, repository: str) -> str:
    return f"/repos/{quote(organization, safe='')}/{quote(repository, safe='')}"


class GitHubRestClient:
    """Concrete RemoteContentClient backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        api_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": _USER_AGENT,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_contents(
        self,
        organization: str,
        repository: str,
        path: str | None,
        ref: str | None = None,
    ) -> ContentsResult:
        """GET /repos/{owner}/{repo}/contents/{path} → [EntryDescriptor] or bytes."""
        # Repository paths may contain "#" or "?"; escape every segment.
        quoted = quote((path or "").strip("/"), safe="/")
        endpoint = f"{_repo_prefix(organization, repository)}/contents/{quoted}"
        params = {"ref": ref} if ref else None
        resp = await self._api_get(endpoint, params=params)
        data = resp.json()

        if isinstance(data, list):
            return [
                EntryDescriptor(
                    type=item.get("type", "file"),
                    name=item["name"],
                    path=item["path"],
                    size=item.get("size", 0),
                )
                for item in data
            ]

        return await self._decode_file(data)

    async def fetch_archive(
        self,
        organization: str,
        repository: str,
        format: str,
        ref: str | None = None,
    ) -> ArchiveReference:
        """GET /repos/{owner}/{repo}/{format}/{ref} → redirect target of the snapshot."""
        if format not in _ARCHIVE_FORMATS:
            raise UnsupportedArchiveFormatError(
                f"Unsupported archive format '{format}'. "
                f"Expected one of: {', '.join(sorted(_ARCHIVE_FORMATS))}"
            )
        endpoint = f"{_repo_prefix(organization, repository)}/{format}"
        if ref:
            endpoint = f"{endpoint}/{quote(ref, safe='/')}"

        resp = await self._api_get(endpoint, follow_redirects=False)
        location = resp.headers.get("location")
        if not location:
            raise TransportError(f"GitHub returned no archive location for {endpoint}")
        return ArchiveReference(format=format, ref=ref, url=location)

    # ── Helpers ─────────────────────────────────────────────────────────

    async def _decode_file(self, data: dict[str, Any]) -> bytes:
        """Extract file bytes from a single-file contents payload."""
        if data.get("encoding") == "base64" and data.get("content") is not None:
            return base64.b64decode(data["content"])

        # Files over 1 MB come back with encoding "none"; use the raw URL instead.
        download_url = data.get("download_url")
        if not download_url:
            raise TransportError(
                f"No content available for {data.get('path', '?')} (type {data.get('type')})"
            )
        logger.debug("Downloading raw content from %s", download_url)
        try:
            resp = await self._client.get(
                download_url, headers={"User-Agent": _USER_AGENT}, follow_redirects=True
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error fetching {download_url}: {exc}") from exc
        if resp.status_code != 200:
            self._raise_for_status(resp, download_url)
        return resp.content

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
        *,
        follow_redirects: bool = True,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._api_url}{endpoint}"
        try:
            resp = await self._client.get(
                url,
                headers=self._api_headers,
                params=params,
                follow_redirects=follow_redirects,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp
        if not follow_redirects and resp.status_code in (301, 302, 303, 307, 308):
            return resp

        self._raise_for_status(resp, url)

    @staticmethod
    def _raise_for_status(resp: httpx.Response, url: str) -> NoReturn:
        if resp.status_code == 404:
            raise RepositoryNotFoundError(f"Not found: {url}")

        if resp.status_code == 401:
            raise AuthenticationError("GitHub rejected the credentials of this connection.")

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                    "Configure a token for this connection to increase the limit."
                )
            raise RepositoryAccessDeniedError(
                "Access denied. The repository may be private."
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError("GitHub API rate limit exceeded (HTTP 429).")

        raise TransportError(f"GitHub API returned HTTP {resp.status_code} for {url}")


class GitHubConnectionManager:
    """ConnectionProvider that builds one :class:`GitHubRestClient` per named connection."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        tokens: dict[str, str | None],
        api_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._tokens = dict(tokens)
        self._api_url = api_url
        self._connections: dict[str, GitHubRestClient] = {}

    @property
    def names(self) -> list[str]:
        return sorted(self._tokens)

    def connection(self, name: str) -> GitHubRestClient:
        """Return the (cached) client for connection *name*."""
        if name not in self._tokens:
            raise UnknownConnectionError(
                f"Unknown connection '{name}'. Configured: {', '.join(self.names) or 'none'}"
            )
        if name not in self._connections:
            logger.debug("Creating GitHub client for connection %r", name)
            self._connections[name] = GitHubRestClient(
                self._client, token=self._tokens[name], api_url=self._api_url
            )
        return self._connections[name]
