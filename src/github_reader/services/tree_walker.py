"""Tree walking — depth-first traversal and compact text rendering."""

from __future__ import annotations

from collections.abc import AsyncIterator

from github_reader.services.tree import DirectoryNode, Node

SKIP_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        "venv",
        ".venv",
        "__pycache__",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        "vendor",
        ".idea",
        ".vscode",
        "coverage",
        "htmlcov",
        ".eggs",
        "target",           # Rust / Java
        "Pods",             # iOS
        ".gradle",
    }
)


async def walk(
    directory: DirectoryNode,
    max_depth: int | None = None,
    skip_dirs: frozenset[str] = SKIP_DIRS,
) -> AsyncIterator[tuple[int, Node]]:
    """Yield ``(depth, node)`` for every descendant of *directory*.

    Depth starts at 0 for direct children.  Directories named in *skip_dirs*
    are yielded but not expanded; nothing below *max_depth* is fetched.
    """
    for child in await directory.entries():
        yield 0, child
        if not isinstance(child, DirectoryNode) or child.name in skip_dirs:
            continue
        if max_depth is not None and max_depth <= 0:
            continue
        sub_depth = None if max_depth is None else max_depth - 1
        async for depth, node in walk(child, sub_depth, skip_dirs):
            yield depth + 1, node


async def render_tree(
    directory: DirectoryNode,
    max_depth: int | None = None,
    max_lines: int = 200,
) -> str:
    """Render the subtree as an indented listing (directories end in ``/``).

    Walking stops once *max_lines* entries are rendered, so directories past
    the cap are never fetched.
    """
    lines: list[str] = []
    async for depth, node in walk(directory, max_depth):
        if len(lines) >= max_lines:
            lines.append(f"… truncated after {max_lines} entries")
            break
        suffix = "/" if isinstance(node, DirectoryNode) else ""
        lines.append(f"{'  ' * depth}{node.name}{suffix}")
    return "\n".join(lines)
