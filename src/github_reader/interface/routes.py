"""API routes — thin read-only controllers over the repository tree."""

from __future__ import annotations

import posixpath

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from github_reader.domain.entities import EntryType
from github_reader.domain.exceptions import InvalidListingError
from github_reader.domain.ports.contents_client import ConnectionProvider
from github_reader.infrastructure.config import Settings, get_settings
from github_reader.interface.dependencies import get_connection_provider
from github_reader.interface.schemas import (
    ArchiveResponse,
    EntriesResponse,
    EntrySchema,
    TreeResponse,
)
from github_reader.services.repository_reader import RepositoryReader
from github_reader.services.tree import DirectoryNode, FileEntry
from github_reader.services.tree_walker import render_tree

router = APIRouter(prefix="/repos/{organization}/{name}")

_COMMON_RESPONSES: dict[int | str, dict[str, str]] = {
    401: {"description": "Connection credentials rejected"},
    403: {"description": "Repository is private"},
    404: {"description": "Repository or entry not found"},
    422: {"description": "Invalid repository, connection or archive format"},
    429: {"description": "GitHub API rate limit exceeded"},
    502: {"description": "GitHub API unreachable"},
}


def _open_directory(
    provider: ConnectionProvider,
    organization: str,
    name: str,
    path: str,
    connection: str | None,
    ref: str | None,
) -> DirectoryNode:
    reader = RepositoryReader.for_repository(provider, f"{organization}/{name}", connection, ref)
    root = reader.read()
    path = path.strip("/")
    if not path:
        return root
    return DirectoryNode(path, root.target, provider)


@router.get("/entries", response_model=EntriesResponse, responses=_COMMON_RESPONSES)
async def list_entries(
    organization: str,
    name: str,
    path: str = "",
    connection: str | None = None,
    ref: str | None = None,
    provider: ConnectionProvider = Depends(get_connection_provider),
) -> EntriesResponse:
    """List the direct children of a directory."""
    directory = _open_directory(provider, organization, name, path, connection, ref)
    entries = [
        EntrySchema(
            type=EntryType.DIR if isinstance(node, DirectoryNode) else EntryType.FILE,
            name=node.name,
            path=node.path,
            size=node.size if isinstance(node, FileEntry) else 0,
        )
        for node in await directory.entries()
    ]
    return EntriesResponse(
        repository=directory.target.full_name,
        path=directory.path,
        entries=entries,
    )


@router.get("/file", responses=_COMMON_RESPONSES)
async def read_file(
    organization: str,
    name: str,
    path: str,
    connection: str | None = None,
    ref: str | None = None,
    provider: ConnectionProvider = Depends(get_connection_provider),
) -> Response:
    """Return the raw bytes of a single file."""
    parent_path, file_name = posixpath.split(path.strip("/"))
    parent = _open_directory(provider, organization, name, parent_path, connection, ref)
    entry = await parent.find(file_name)
    if not isinstance(entry, FileEntry):
        raise InvalidListingError(f"'{entry.path}' is a directory, not a file.")
    return Response(
        content=await entry.content(),
        media_type="application/octet-stream",
        headers={"X-Entry-Size": str(entry.size)},
    )


@router.get("/tree", response_model=TreeResponse, responses=_COMMON_RESPONSES)
async def show_tree(
    organization: str,
    name: str,
    path: str = "",
    depth: int | None = Query(default=None, ge=0),
    connection: str | None = None,
    ref: str | None = None,
    provider: ConnectionProvider = Depends(get_connection_provider),
    settings: Settings = Depends(get_settings),
) -> TreeResponse:
    """Render the subtree below *path* as an indented listing."""
    directory = _open_directory(provider, organization, name, path, connection, ref)
    tree = await render_tree(
        directory,
        max_depth=settings.max_tree_depth if depth is None else depth,
        max_lines=settings.max_tree_lines,
    )
    return TreeResponse(repository=directory.target.full_name, tree=tree)


@router.get("/archive", response_model=ArchiveResponse, responses=_COMMON_RESPONSES)
async def archive(
    organization: str,
    name: str,
    format: str = "zipball",
    ref: str | None = None,
    connection: str | None = None,
    provider: ConnectionProvider = Depends(get_connection_provider),
) -> ArchiveResponse:
    """Resolve the download location of a repository snapshot."""
    reader = RepositoryReader.for_repository(provider, f"{organization}/{name}", connection)
    result = await reader.extract_archive(format, ref)
    return ArchiveResponse(format=result.format, ref=result.ref, url=result.url)
