"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EntryType(str, Enum):
    """Kind of a directory entry as reported by the contents endpoint."""

    FILE = "file"
    DIR = "dir"


class ArchiveFormat(str, Enum):
    """Snapshot packaging formats offered by the remote host."""

    ZIPBALL = "zipball"
    TARBALL = "tarball"


@dataclass(frozen=True, slots=True)
class EntryDescriptor:
    """One child of a remote directory listing."""

    type: str  # "file" or "dir" (symlink / submodule are treated as files)
    name: str
    path: str
    size: int = 0

    @property
    def is_dir(self) -> bool:
        return self.type == EntryType.DIR.value


@dataclass(frozen=True, slots=True)
class ArchiveReference:
    """A downloadable snapshot of the repository at a given ref."""

    format: str
    ref: str | None
    url: str
