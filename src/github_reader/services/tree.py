"""Lazy repository tree — directories expand on first traversal.

A :class:`DirectoryNode` knows only its own path until :meth:`DirectoryNode.entries`
is awaited.  The first successful listing is memoized for the lifetime of the
node; a failed listing leaves the node unloaded so the next call fetches again.

File bodies are never cached: every :meth:`FileEntry.content` call is a fresh
request through the content client.

Concurrent tasks awaiting ``entries()`` on the same unloaded node may both
fetch; the last one to finish wins.  Callers that need a single fetch per node
must serialize access themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from github_reader.domain.entities import EntryDescriptor
from github_reader.domain.exceptions import EntryNotFoundError, InvalidListingError
from github_reader.domain.ports.contents_client import ConnectionProvider, ContentsResult
from github_reader.domain.value_objects import RepositoryTarget

logger = logging.getLogger(__name__)


async def fetch_path(
    provider: ConnectionProvider,
    target: RepositoryTarget,
    path: str | None,
) -> ContentsResult:
    """Delegate a contents lookup for *target* to its selected connection."""
    logger.debug(
        "Fetching contents of %s:%s via connection %r",
        target.full_name,
        path or "/",
        target.connection,
    )
    client = provider.connection(target.connection)
    return await client.fetch_contents(
        target.organization, target.name, path or None, target.ref
    )


@runtime_checkable
class RepositoryNode(Protocol):
    """Capability shared by every node of the tree."""

    @property
    def name(self) -> str: ...

    @property
    def path(self) -> str: ...


class FileEntry:
    """A leaf of the tree; content is fetched on demand."""

    __slots__ = ("_path", "_name", "_size", "_target", "_provider")

    def __init__(
        self,
        path: str,
        name: str,
        size: int,
        target: RepositoryTarget,
        provider: ConnectionProvider,
    ) -> None:
        self._path = path
        self._name = name
        self._size = size
        self._target = target
        self._provider = provider

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        return self._size

    @property
    def target(self) -> RepositoryTarget:
        return self._target

    async def content(self) -> bytes:
        """Fetch the raw file body (not cached)."""
        result = await fetch_path(self._provider, self._target, self._path)
        if not isinstance(result, bytes):
            raise InvalidListingError(
                f"Expected file content for '{self._path}' but received a directory listing."
            )
        return result

    async def text(self, encoding: str = "utf-8") -> str:
        return (await self.content()).decode(encoding)

    def __repr__(self) -> str:
        return f"FileEntry(path={self._path!r}, size={self._size})"


# ── Directory state ─────────────────────────────────────────────────────────


class _Unloaded:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<unloaded>"


_UNLOADED = _Unloaded()


@dataclass(frozen=True, slots=True)
class _Loaded:
    children: tuple[Node, ...]


class DirectoryNode:
    """One directory of the remote repository (``path == ""`` is the root)."""

    __slots__ = ("_path", "_target", "_provider", "_state")

    def __init__(
        self,
        path: str,
        target: RepositoryTarget,
        provider: ConnectionProvider,
    ) -> None:
        self._path = path
        self._target = target
        self._provider = provider
        self._state: _Unloaded | _Loaded = _UNLOADED

    @property
    def path(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._path.rsplit("/", 1)[-1]

    @property
    def target(self) -> RepositoryTarget:
        return self._target

    @property
    def loaded(self) -> bool:
        return isinstance(self._state, _Loaded)

    async def entries(self) -> tuple[Node, ...]:
        """Return the direct children, fetching them on first use.

        Order is exactly the order of the remote listing.  Errors from the
        content client propagate unchanged and leave the node unloaded.
        """
        state = self._state
        if isinstance(state, _Loaded):
            return state.children

        result = await fetch_path(self._provider, self._target, self._path)
        if isinstance(result, bytes):
            raise InvalidListingError(
                f"'{self._path}' in {self._target.full_name} is a file, not a directory."
            )

        children = tuple(self._classify(descriptor) for descriptor in result)
        self._state = _Loaded(children)
        logger.debug(
            "Loaded %d entries for %s:%s",
            len(children),
            self._target.full_name,
            self._path or "/",
        )
        return children

    async def find(self, name: str) -> Node:
        """Return the direct child called *name*."""
        for child in await self.entries():
            if child.name == name:
                return child
        raise EntryNotFoundError(
            f"No entry named '{name}' in '{self._path or '/'}' of {self._target.full_name}."
        )

    async def files(self) -> list[FileEntry]:
        return [child for child in await self.entries() if isinstance(child, FileEntry)]

    async def directories(self) -> list[DirectoryNode]:
        return [child for child in await self.entries() if isinstance(child, DirectoryNode)]

    def _classify(self, descriptor: EntryDescriptor) -> Node:
        if descriptor.is_dir:
            return DirectoryNode(descriptor.path, self._target, self._provider)
        return FileEntry(
            descriptor.path,
            descriptor.name,
            descriptor.size,
            self._target,
            self._provider,
        )

    def __repr__(self) -> str:
        return f"DirectoryNode(path={self._path!r}, state={self._state!r})"


Node = Union[FileEntry, DirectoryNode]
