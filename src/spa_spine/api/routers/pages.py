"""
Pages router — the page-data endpoint consumed by the SPA.

Endpoints:
    GET /spa   Resolve a URL into page data (or a redirect / not-found answer)

Query parameters:
    url          Page URL, absolute or relative (required)
    parts        Comma-separated sections: site, navigation, content (default: all)
    pageId       Look the page up by id instead of by URL
    preview      Preview mode (cached separately, no trailing-slash redirects)
    navLevels    Depth of the navigation model
    appHost      Host the SPA is served from (default: the request's host)
    appProtocol  Scheme the SPA is served from (default: the request's scheme)

The handler is a plain ``def`` so FastAPI runs the blocking pipeline in its
threadpool.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from spa_spine.api.deps import SpaPipeline, Settings
from spa_spine.pipeline.context import SpaApiPart, SpaRequest
from spa_spine.pipeline.responses import SpaResponse, apply_status_policy

router = APIRouter()


def build_spa_request(
    request: Request,
    *,
    url: str,
    parts: str | None,
    page_id: int | None,
    preview: bool,
    nav_levels: int,
    app_host: str | None,
    app_protocol: str | None,
) -> SpaRequest:
    accept = tuple(t.strip() for t in request.headers.get("accept", "").split(",") if t.strip())
    return SpaRequest(
        url=url,
        is_preview=preview,
        parts=SpaApiPart.parse(parts),
        host=(app_host or request.url.hostname or "").lower(),
        scheme=app_protocol or request.url.scheme,
        accept=accept,
        navigation_levels=nav_levels,
        page_id=page_id,
    )


def render(response: SpaResponse) -> Response:
    headers = None
    if response.location and 300 <= response.status_code < 400:
        headers = {"Location": response.location}

    if response.media_type == "text/html":
        return HTMLResponse(response.body, status_code=response.status_code, headers=headers)
    return JSONResponse(response.body, status_code=response.status_code, headers=headers)


@router.get("/spa")
def get_page(
    request: Request,
    pipeline: SpaPipeline,
    settings: Settings,
    url: str = Query(..., min_length=1, description="Page URL, absolute or relative"),
    parts: str | None = Query(None, description="Comma-separated parts: site, navigation, content"),
    page_id: int | None = Query(None, alias="pageId", ge=1, description="Look the page up by id"),
    preview: bool = Query(False, description="Preview mode"),
    nav_levels: int = Query(1, alias="navLevels", ge=1, le=10, description="Navigation depth"),
    app_host: str | None = Query(None, alias="appHost", description="Host the SPA is served from"),
    app_protocol: str | None = Query(
        None, alias="appProtocol", pattern="^https?$", description="Scheme the SPA is served from"
    ),
) -> Response:
    spa_request = build_spa_request(
        request,
        url=url,
        parts=parts,
        page_id=page_id,
        preview=preview,
        nav_levels=nav_levels,
        app_host=app_host,
        app_protocol=app_protocol,
    )
    response = pipeline.run(spa_request)
    return render(apply_status_policy(response, settings.overwrite_status_codes))
