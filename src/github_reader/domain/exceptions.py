"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
The tree core raises only the configuration and lookup errors; everything
under "Remote client errors" belongs to the content client and reaches the
caller untranslated.
"""

from __future__ import annotations


class GithubReaderError(Exception):
    """Base exception for the entire application."""


# ── Configuration ───────────────────────────────────────────────────────────


class ConfigurationError(GithubReaderError):
    """Organization or repository name is unset when a read is attempted."""


class UnknownConnectionError(GithubReaderError):
    """The connection selector does not name a configured connection."""


# ── Tree traversal ──────────────────────────────────────────────────────────


class EntryNotFoundError(GithubReaderError, LookupError):
    """No direct child of a directory carries the requested name."""


class InvalidListingError(GithubReaderError):
    """The contents endpoint returned a file where a listing was expected (or vice versa)."""


# ── Remote client errors ────────────────────────────────────────────────────


class TransportError(GithubReaderError):
    """Network failure or unexpected HTTP status from the remote host."""


class RepositoryNotFoundError(GithubReaderError):
    """The repository or path does not exist or is not visible (404)."""


class RepositoryAccessDeniedError(GithubReaderError):
    """Access to the repository was denied (403)."""


class AuthenticationError(GithubReaderError):
    """The credentials of the selected connection were rejected (401)."""


class GitHubRateLimitError(GithubReaderError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class UnsupportedArchiveFormatError(GithubReaderError):
    """The requested archive format is not offered by the remote host."""
