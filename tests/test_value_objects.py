from __future__ import annotations

import dataclasses

import pytest

from github_reader.domain.exceptions import ConfigurationError
from github_reader.domain.value_objects import RepositoryTarget


@pytest.mark.parametrize(
    "raw",
    [
        "acme/widgets",
        "https://github.com/acme/widgets",
        "https://github.com/acme/widgets.git",
        "  https://github.com/acme/widgets/ ",
    ],
)
def test_from_string_accepts_common_forms(raw):
    target = RepositoryTarget.from_string(raw)

    assert target.organization == "acme"
    assert target.name == "widgets"
    assert target.connection == "app"


@pytest.mark.parametrize("raw", ["", "acme", "https://gitlab.com/acme/widgets", "a/b/c"])
def test_from_string_rejects_garbage(raw):
    with pytest.raises(ConfigurationError):
        RepositoryTarget.from_string(raw)


def test_with_overrides_ignores_empty_values():
    target = RepositoryTarget(organization="acme", name="widgets", connection="bot")

    assert target.with_overrides("", None, "") is target
    updated = target.with_overrides(name="gadgets", ref="v2")
    assert updated == RepositoryTarget("acme", "gadgets", "bot", "v2")
    assert target.name == "widgets"


def test_target_is_immutable():
    target = RepositoryTarget(organization="acme", name="widgets")

    with pytest.raises(dataclasses.FrozenInstanceError):
        target.name = "other"  # type: ignore[misc]


def test_validate_returns_self_when_complete():
    target = RepositoryTarget(organization="acme", name="widgets")

    assert target.validate() is target
    with pytest.raises(ConfigurationError):
        RepositoryTarget(name="widgets").validate()


def test_empty_connection_is_normalized_to_default():
    assert RepositoryTarget(organization="acme", name="widgets", connection="").connection == "app"
    assert RepositoryTarget.from_string("acme/widgets", connection="").connection == "app"
