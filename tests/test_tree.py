from __future__ import annotations

import asyncio

import pytest

from conftest import FakeContentClient, FakeProvider, descriptor
from github_reader.domain.exceptions import (
    EntryNotFoundError,
    InvalidListingError,
    TransportError,
)
from github_reader.domain.value_objects import RepositoryTarget
from github_reader.services.tree import DirectoryNode, FileEntry, RepositoryNode

TARGET = RepositoryTarget(organization="acme", name="widgets")


def _root(provider) -> DirectoryNode:
    return DirectoryNode("", TARGET, provider)


def test_root_entries_are_classified_in_remote_order(provider, content_client):
    root = _root(provider)
    assert not root.loaded

    entries = asyncio.run(root.entries())

    assert root.loaded
    assert [type(e) for e in entries] == [DirectoryNode, FileEntry]
    assert entries[0].path == "src"
    assert not entries[0].loaded
    assert entries[1].path == "README.md"
    assert entries[1].size == 120
    assert content_client.calls == [("contents", "acme", "widgets", None, None)]


def test_entries_are_fetched_once(provider, content_client):
    root = _root(provider)

    first = asyncio.run(root.entries())
    second = asyncio.run(root.entries())

    assert first is second
    assert len(content_client.calls) == 1


def test_failed_listing_leaves_node_unloaded_and_retries():
    client = FakeContentClient(
        {"": (TransportError("boom"), [descriptor("file", "a.txt", 1)])}
    )
    root = _root(FakeProvider({"app": client}))

    with pytest.raises(TransportError):
        asyncio.run(root.entries())
    assert not root.loaded

    entries = asyncio.run(root.entries())
    assert [e.name for e in entries] == ["a.txt"]
    assert root.loaded
    assert len(client.calls) == 2


def test_remote_order_is_not_resorted():
    listing = [
        descriptor("file", "zeta.txt"),
        descriptor("dir", "alpha"),
        descriptor("file", "Makefile"),
    ]
    root = _root(FakeProvider({"app": FakeContentClient({"": listing})}))

    entries = asyncio.run(root.entries())

    assert [e.name for e in entries] == ["zeta.txt", "alpha", "Makefile"]


def test_empty_directory_yields_empty_sequence(provider):
    pkg = DirectoryNode("src/pkg", TARGET, provider)

    assert asyncio.run(pkg.entries()) == ()
    assert pkg.loaded
    assert pkg.name == "pkg"


def test_find_returns_direct_child_only(provider):
    root = _root(provider)

    src = asyncio.run(root.find("src"))
    assert isinstance(src, DirectoryNode)

    with pytest.raises(EntryNotFoundError):
        asyncio.run(root.find("main.py"))

    main = asyncio.run(src.find("main.py"))
    assert isinstance(main, FileEntry)
    assert main.path == "src/main.py"


def test_files_and_directories_views(provider):
    root = _root(provider)

    assert [f.name for f in asyncio.run(root.files())] == ["README.md"]
    assert [d.name for d in asyncio.run(root.directories())] == ["src"]


def test_file_content_is_returned_unchanged_and_not_cached(provider, content_client):
    readme = asyncio.run(_root(provider).find("README.md"))

    assert asyncio.run(readme.content()) == b"# Widgets\n"
    assert asyncio.run(readme.text()) == "# Widgets\n"
    readme_calls = [c for c in content_client.calls if c[3] == "README.md"]
    assert len(readme_calls) == 2


def test_listing_a_file_path_raises(provider):
    node = DirectoryNode("README.md", TARGET, provider)

    with pytest.raises(InvalidListingError):
        asyncio.run(node.entries())
    assert not node.loaded


def test_content_of_a_directory_path_raises(provider):
    entry = FileEntry("src", "src", 0, TARGET, provider)

    with pytest.raises(InvalidListingError):
        asyncio.run(entry.content())


def test_ref_is_forwarded_to_client(content_client):
    target = RepositoryTarget(organization="acme", name="widgets", ref="v1.2")
    root = DirectoryNode("", target, FakeProvider({"app": content_client}))

    asyncio.run(root.entries())

    assert content_client.calls == [("contents", "acme", "widgets", None, "v1.2")]


def test_children_share_the_parent_target(provider):
    src = asyncio.run(_root(provider).find("src"))
    main = asyncio.run(src.find("main.py"))

    assert src.target is TARGET
    assert main.target is TARGET


def test_both_node_kinds_are_named_and_path_addressable(provider):
    entries = asyncio.run(_root(provider).entries())

    assert all(isinstance(node, RepositoryNode) for node in entries)
    assert [(node.name, node.path) for node in entries] == [
        ("src", "src"),
        ("README.md", "README.md"),
    ]


def test_concurrent_first_listings_both_fetch_and_agree(provider, content_client):
    root = _root(provider)

    async def _both():
        return await asyncio.gather(root.entries(), root.entries())

    first, second = asyncio.run(_both())

    assert root.loaded
    assert [e.path for e in first] == [e.path for e in second] == ["src", "README.md"]
    assert len(content_client.calls) == 2
    assert asyncio.run(root.entries()) is second
