"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_reader.domain.value_objects import DEFAULT_CONNECTION


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    # Extra named connections, e.g. GITHUB_CONNECTIONS='{"bot": "ghp_..."}'
    github_connections: dict[str, SecretStr] = {}
    github_api_url: str = "https://api.github.com"
    http_timeout: float = 30.0
    max_tree_depth: int = 3
    max_tree_lines: int = 200
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def connection_tokens(self) -> dict[str, str | None]:
        """Map every configured connection name to its plain token."""
        tokens: dict[str, str | None] = {
            name: secret.get_secret_value()
            for name, secret in self.github_connections.items()
        }
        tokens.setdefault(
            DEFAULT_CONNECTION,
            self.github_token.get_secret_value() if self.github_token else None,
        )
        return tokens


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
