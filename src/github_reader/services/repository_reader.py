"""Repository reader — addresses one remote repository and opens its tree.

The reader keeps its configuration as an immutable :class:`RepositoryTarget`.
``configure()`` and the overrides given to ``read()`` replace that value (they
are sticky for the reader), but every tree returned by ``read()`` captures the
target as it was at that moment, so re-targeting the reader never changes a
tree that is already being traversed.
"""

from __future__ import annotations

import logging

from github_reader.domain.entities import ArchiveFormat, ArchiveReference
from github_reader.domain.ports.contents_client import ConnectionProvider, ContentsResult
from github_reader.domain.value_objects import DEFAULT_CONNECTION, RepositoryTarget
from github_reader.services.tree import DirectoryNode, fetch_path

logger = logging.getLogger(__name__)


def open_tree(provider: ConnectionProvider, target: RepositoryTarget) -> DirectoryNode:
    """Return the unloaded root directory of a fully specified *target*."""
    return DirectoryNode("", target.validate(), provider)


class RepositoryReader:
    """Factory for the root :class:`DirectoryNode` of a remote repository.

    Parameters
    ----------
    provider:
        Resolves the connection selector to an authenticated content client.
    target:
        Initial repository target; may be incomplete until ``read()``.
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        target: RepositoryTarget | None = None,
    ) -> None:
        self._provider = provider
        self._target = target or RepositoryTarget()

    @classmethod
    def for_repository(
        cls,
        provider: ConnectionProvider,
        repository: str,
        connection: str | None = None,
        ref: str | None = None,
    ) -> RepositoryReader:
        """Build a reader from ``org/name`` or a ``https://github.com/...`` URL."""
        return cls(provider, RepositoryTarget.from_string(repository, connection, ref))

    # ── Configuration ───────────────────────────────────────────────────

    def configure(
        self,
        organization: str,
        name: str,
        connection: str | None = None,
        ref: str | None = None,
    ) -> RepositoryReader:
        """Point the reader at *organization*/*name*.  Never validates."""
        self._target = RepositoryTarget(
            organization=organization,
            name=name,
            connection=connection or DEFAULT_CONNECTION,
            ref=ref,
        )
        return self

    @property
    def target(self) -> RepositoryTarget:
        return self._target

    @property
    def organization(self) -> str:
        return self._target.organization

    @property
    def name(self) -> str:
        return self._target.name

    @property
    def connection(self) -> str:
        return self._target.connection

    @property
    def ref(self) -> str | None:
        return self._target.ref

    # ── Reading ─────────────────────────────────────────────────────────

    def read(
        self,
        organization: str | None = None,
        name: str | None = None,
        connection: str | None = None,
    ) -> DirectoryNode:
        """Apply the overrides, validate, and return the unloaded root node."""
        self._target = self._target.with_overrides(
            organization=organization, name=name, connection=connection
        )
        logger.debug("Opening %s via connection %r", self._target.full_name, self.connection)
        return open_tree(self._provider, self._target)

    async def read_path(self, path: str | None = None) -> ContentsResult:
        """Fetch *path* directly: a listing for directories, bytes for files."""
        return await fetch_path(self._provider, self._target, path)

    async def extract_archive(
        self,
        format: str = ArchiveFormat.ZIPBALL.value,
        branch: str | None = None,
    ) -> ArchiveReference:
        """Return the snapshot reference for *branch* (default branch when ``None``)."""
        logger.debug("Requesting %s archive of %s@%s", format, self._target.full_name, branch)
        client = self._provider.connection(self._target.connection)
        return await client.fetch_archive(
            self._target.organization, self._target.name, format, branch
        )
