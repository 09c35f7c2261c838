"""Shared fixtures: an in-memory content client and connection provider."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from github_reader.domain.entities import ArchiveReference, EntryDescriptor
from github_reader.domain.exceptions import RepositoryNotFoundError, UnknownConnectionError


class FakeContentClient:
    """Serves canned responses keyed by path and records every call.

    A response may be a list of descriptors, bytes, or an exception instance;
    a list of responses is consumed one item per call.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, ...]] = []

    async def fetch_contents(self, organization, repository, path, ref=None):
        self.calls.append(("contents", organization, repository, path, ref))
        # Suspend like a real request so concurrent callers interleave.
        await asyncio.sleep(0)
        key = path or ""
        if key not in self.responses:
            raise RepositoryNotFoundError(f"Not found: {key}")
        response = self.responses[key]
        if isinstance(response, tuple):
            response, *rest = response
            if rest:
                self.responses[key] = tuple(rest) if len(rest) > 1 else rest[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def fetch_archive(self, organization, repository, format, ref=None):
        self.calls.append(("archive", organization, repository, format, ref))
        return ArchiveReference(
            format=format,
            ref=ref,
            url=f"https://codeload.example/{organization}/{repository}/{format}/{ref or 'HEAD'}",
        )


class FakeProvider:
    def __init__(self, clients: dict[str, FakeContentClient]) -> None:
        self.clients = clients
        self.requested: list[str] = []

    def connection(self, name: str) -> FakeContentClient:
        self.requested.append(name)
        if name not in self.clients:
            raise UnknownConnectionError(f"Unknown connection '{name}'")
        return self.clients[name]


def descriptor(type_: str, path: str, size: int = 0) -> EntryDescriptor:
    return EntryDescriptor(type=type_, name=path.rsplit("/", 1)[-1], path=path, size=size)


WIDGETS_LISTINGS: dict[str, Any] = {
    "": [
        descriptor("dir", "src"),
        descriptor("file", "README.md", 120),
    ],
    "src": [
        descriptor("file", "src/main.py", 42),
        descriptor("dir", "src/pkg"),
    ],
    "src/pkg": [],
    "README.md": b"# Widgets\n",
    "src/main.py": b"print('hi')\n",
}


@pytest.fixture()
def content_client() -> FakeContentClient:
    return FakeContentClient(WIDGETS_LISTINGS)


@pytest.fixture()
def provider(content_client: FakeContentClient) -> FakeProvider:
    return FakeProvider({"app": content_client})
