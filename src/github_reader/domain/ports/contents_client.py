"""Port: remote content client — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from github_reader.domain.entities import ArchiveReference, EntryDescriptor

ContentsResult = list[EntryDescriptor] | bytes


class RemoteContentClient(Protocol):
    """Abstract contract for reading a hosted repository."""

    async def fetch_contents(
        self,
        organization: str,
        repository: str,
        path: str | None,
        ref: str | None = None,
    ) -> ContentsResult:
        """Return a directory listing, or the raw bytes when *path* is a file."""
        ...

    async def fetch_archive(
        self,
        organization: str,
        repository: str,
        format: str,
        ref: str | None = None,
    ) -> ArchiveReference:
        """Return a downloadable snapshot reference (``ref=None`` → default branch)."""
        ...


class ConnectionProvider(Protocol):
    """Resolves an opaque connection selector to an authenticated client."""

    def connection(self, name: str) -> RemoteContentClient:
        ...
