"""
FastAPI dependency injection — shared singletons.

Settings are loaded once per process. The pipeline and its services are
built by the app factory and stored on ``app.state``; routers reach them
through the aliases below.

Usage in routers::

    from spa_spine.api.deps import SpaPipeline, Settings

    @router.get("/spa")
    def get_page(pipeline: SpaPipeline, settings: Settings):
        ...
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from spa_spine.api.settings import SpaAPISettings
from spa_spine.pipeline.pipeline import Pipeline

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> SpaAPISettings:
    """Cached settings — loaded once per process."""
    return SpaAPISettings()


# ── Pipeline (built by the app factory) ──────────────────────────────────


def get_pipeline(request: Request) -> Pipeline:
    return request.app.state.pipeline


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[SpaAPISettings, Depends(get_settings)]
SpaPipeline = Annotated[Pipeline, Depends(get_pipeline)]
