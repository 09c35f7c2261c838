"""Pydantic response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel

from github_reader.domain.entities import EntryType


class EntrySchema(BaseModel):
    """One child of a directory listing."""

    type: EntryType
    name: str
    path: str
    size: int = 0


class EntriesResponse(BaseModel):
    """Successful response from ``GET /repos/{organization}/{name}/entries``."""

    repository: str
    path: str
    entries: list[EntrySchema]


class TreeResponse(BaseModel):
    """Rendered directory listing."""

    repository: str
    tree: str


class ArchiveResponse(BaseModel):
    """Downloadable snapshot reference."""

    format: str
    ref: str | None = None
    url: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
