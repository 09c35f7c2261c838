"""Value objects — immutable domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

from github_reader.domain.exceptions import ConfigurationError

DEFAULT_CONNECTION = "app"

_REPOSITORY_RE = re.compile(
    r"^(?:https?://github\.com/)?(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True, slots=True)
class RepositoryTarget:
    """Identifies one remote repository and the connection used to reach it.

    Instances are never mutated: re-targeting produces a new value through
    :meth:`with_overrides`.  Validation is deferred to :meth:`validate` so a
    partially configured target can exist until a read is attempted.
    """

    organization: str = ""
    name: str = ""
    connection: str = DEFAULT_CONNECTION
    ref: str | None = None

    def __post_init__(self) -> None:
        # An unset selector always means the default connection.
        if not self.connection:
            object.__setattr__(self, "connection", DEFAULT_CONNECTION)

    @classmethod
    def from_string(
        cls,
        value: str,
        connection: str | None = None,
        ref: str | None = None,
    ) -> RepositoryTarget:
        """Parse ``org/name`` or ``https://github.com/org/name``."""
        value = value.strip()
        match = _REPOSITORY_RE.match(value)
        if not match:
            raise ConfigurationError(
                f"Invalid repository identifier: '{value}'. "
                "Expected <organization>/<name> or https://github.com/<organization>/<name>"
            )
        return cls(
            organization=match["owner"],
            name=match["repo"],
            connection=connection or DEFAULT_CONNECTION,
            ref=ref,
        )

    @property
    def full_name(self) -> str:
        return f"{self.organization}/{self.name}"

    def with_overrides(
        self,
        organization: str | None = None,
        name: str | None = None,
        connection: str | None = None,
        ref: str | None = None,
    ) -> RepositoryTarget:
        """Return a copy with every truthy override applied."""
        changes: dict[str, str] = {}
        if organization:
            changes["organization"] = organization
        if name:
            changes["name"] = name
        if connection:
            changes["connection"] = connection
        if ref:
            changes["ref"] = ref
        return replace(self, **changes) if changes else self

    def validate(self) -> RepositoryTarget:
        """Raise :class:`ConfigurationError` unless organization and name are set."""
        if not self.organization or not self.name:
            raise ConfigurationError("Organization name or repository name not set.")
        return self
