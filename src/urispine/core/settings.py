"""Environment-driven settings for uri-spine.

All fields can be set through ``URI_SERVICE_*`` environment variables
(``URI_SERVICE_SOLR_URL=http://localhost:8983/solr/uri_service``) or a
``.env`` file. Unknown variables are ignored.

The three collaborators a service needs (``local_uri_base``,
``database_url``, ``solr_url``) have no defaults; :meth:`require` raises
:class:`~urispine.core.errors.InvalidOptsError` naming the first one missing.

Examples:
    >>> settings = UriServiceSettings(
    ...     local_uri_base="http://id.example.org/term/",
    ...     database_url="sqlite:///uri_service.db",
    ...     solr_url="http://localhost:8983/solr/uri_service",
    ... )
    >>> settings.solr_pool_timeout_seconds
    5.0
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from urispine.core.errors import InvalidOptsError


class UriServiceSettings(BaseSettings):
    """uri-spine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="URI_SERVICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Local term minting ───────────────────────────────────────
    local_uri_base: str | None = Field(default=None, description="Base URI for locally minted terms")

    # ── Database ─────────────────────────────────────────────────
    database_url: str | None = Field(default=None)
    database_echo: bool = Field(default=False)
    database_pool_size: int | None = Field(default=None)

    # ── Solr ─────────────────────────────────────────────────────
    solr_url: str | None = Field(default=None)
    solr_pool_size: int = Field(default=5)
    solr_pool_timeout_ms: int = Field(default=5000)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="json or console")

    @property
    def solr_pool_timeout_seconds(self) -> float:
        return self.solr_pool_timeout_ms / 1000.0

    def require(self) -> UriServiceSettings:
        """Raise :class:`InvalidOptsError` unless every collaborator is configured."""
        for key in ("local_uri_base", "database_url", "solr_url"):
            if not getattr(self, key):
                raise InvalidOptsError(key)
        return self


@lru_cache(maxsize=1)
def get_settings() -> UriServiceSettings:
    """Process-wide settings, read once from the environment."""
    return UriServiceSettings()


__all__ = ["UriServiceSettings", "get_settings"]
