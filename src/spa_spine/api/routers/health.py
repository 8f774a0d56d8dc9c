"""
Health router — liveness endpoint for container healthchecks.

Endpoints:
    GET /health   Service name, version, uptime and page cache status
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

_BOOTED_AT = time.monotonic()

router = APIRouter()


class HealthResponse(BaseModel):
    """Liveness envelope.

    ``status`` stays ``healthy`` for as long as the process answers at all.
    ``cache`` reports the configured page cache backend, or ``disabled``.
    """

    status: Literal["healthy"] = "healthy"
    service: str = "spa-spine"
    version: str = ""
    uptime_s: float = Field(default_factory=lambda: round(time.monotonic() - _BOOTED_AT, 1))
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    cache: str = "disabled"


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    settings = request.app.state.settings
    services = request.app.state.services
    return HealthResponse(
        version=settings.api_version,
        cache=settings.cache_backend if services.cache is not None else "disabled",
    )
