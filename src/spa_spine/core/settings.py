"""Process-wide settings for spa-spine.

``SpaSettings`` holds everything the pipeline needs (status policy,
trailing-slash policy, cache configuration, debug mode). The HTTP transport
extends it in :mod:`spa_spine.api.settings`.

Order of precedence (highest → lowest):
    1. Environment variables (``SPA_DEBUG``, ``SPA_TRAILING_SLASH``, ...)
    2. ``.env`` file
    3. Defaults below

Examples:
    >>> SpaSettings(trailing_slash="add").trailing_slash
    <TrailingSlashPolicy.ADD: 'add'>
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrailingSlashPolicy(str, Enum):
    """Which URL normalization stage (if any) the pipeline wires in."""

    NONE = "none"
    ADD = "add"
    REMOVE = "remove"


class SpaSettings(BaseSettings):
    """Settings shared by the pipeline, the API and the CLI.

    Fields
    ──────
    debug                  : Render HTML diagnostics for HTML-capable callers
    overwrite_status_codes : Send redirect/not-found responses as 200
    trailing_slash         : URL normalization policy
    default_culture        : Culture used when a domain does not declare one
    cache_*                : Page cache configuration
    site_file              : JSON site definition for the in-memory collaborators
    """

    model_config = SettingsConfigDict(
        env_prefix="SPA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    log_format: Literal["json", "console"] | None = None

    # ── Response policy ──────────────────────────────────────────
    overwrite_status_codes: bool = Field(
        default=True,
        description="Rewrite redirect/not-found status codes to 200 before sending",
    )
    trailing_slash: TrailingSlashPolicy = TrailingSlashPolicy.NONE
    default_culture: str = "en-US"

    # ── Cache ────────────────────────────────────────────────────
    cache_enabled: bool = True
    cache_backend: Literal["memory", "redis"] = "memory"
    cache_url: str = "redis://localhost:6379/0"
    cache_ttl_seconds: int | None = 300
    cache_max_size: int = 10_000

    # ── Content ──────────────────────────────────────────────────
    site_file: Path | None = Field(
        default=None,
        description="JSON file with domains, nodes and redirects",
    )
