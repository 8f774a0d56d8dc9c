"""
API-specific settings.

Extends :class:`~spa_spine.core.settings.SpaSettings` with parameters that
govern the HTTP transport (bind address, prefix, CORS).

Each field reads the matching ``SPA_``-prefixed environment variable
(``SPA_PORT``, ``SPA_API_PREFIX``, ``SPA_CORS_ORIGINS``, ...).
"""

from __future__ import annotations

from pydantic import Field

from spa_spine.core.settings import SpaSettings


class SpaAPISettings(SpaSettings):
    """Settings for the page-data API.

    Environment variables beat the ``.env`` file, which beats the defaults.
    """

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, description="Bind port")

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api", description="URL prefix for the page-data endpoint")
    api_title: str = Field(default="spa-spine API", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser",
    )
