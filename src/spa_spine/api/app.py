"""
FastAPI application factory.

``create_app()`` wires logging, the pipeline, middleware, routers and error
handlers into a single ``FastAPI`` instance. It is the composition root:
nothing else in the codebase touches ``FastAPI`` directly.

Run with uvicorn's factory mode::

    uvicorn spa_spine.api.app:create_app --factory
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spa_spine.api.deps import get_settings
from spa_spine.api.middleware import (
    RequestContextMiddleware,
    invalid_request_handler,
    unhandled_exception_handler,
)
from spa_spine.api.routers import health, pages
from spa_spine.api.settings import SpaAPISettings
from spa_spine.core.errors import InvalidRequestError
from spa_spine.core.logging import configure_logging, get_logger
from spa_spine.pipeline.builder import create_pipeline
from spa_spine.pipeline.groups import Stage, StageFunc
from spa_spine.pipeline.services import SpaServices


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup / shutdown hooks."""
    log = get_logger("spa_spine.api")
    log.info(
        "spa-spine API starting",
        version=app.version,
        groups=[group.name for group in app.state.pipeline.groups],
    )
    yield
    log.info("spa-spine API shutting down")


def create_app(
    *,
    settings: SpaAPISettings | None = None,
    services: SpaServices | None = None,
    custom_models: Iterable[Stage | StageFunc] = (),
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : SpaAPISettings | None
        Override settings (useful for testing). When ``None`` the cached
        singleton from :func:`get_settings` is used.
    services : SpaServices | None
        Collaborators for the pipeline. When ``None`` they are loaded from
        ``settings.site_file``.
    custom_models : stages
        Extra model stages run before the data model is assembled.
    """
    settings = settings or get_settings()
    json_format = None if settings.log_format is None else settings.log_format == "json"
    configure_logging(settings.log_level, json_format=json_format)

    services = services or SpaServices.from_settings(settings)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    app.state.settings = settings
    app.state.services = services
    app.state.pipeline = create_pipeline(settings, services, custom_models=custom_models)

    # Endpoints use the provided settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(InvalidRequestError, invalid_request_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    app.include_router(health.router, tags=["health"])
    app.include_router(pages.router, prefix=settings.api_prefix, tags=["pages"])

    return app
