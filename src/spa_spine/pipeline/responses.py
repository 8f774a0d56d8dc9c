"""
Terminal responses produced by stages and the pipeline.

A :class:`SpaResponse` is a tagged value: ``kind`` says *why* the pipeline
stopped (success, redirect, not found, error, diagnostic page), and
``status_code`` is the HTTP status the transport will send unless the
status policy rewrites it.

Setting a response on the request context is how stages end the pipeline
on purpose. Exceptions are reserved for real failures.
"""

from __future__ import annotations

import html
import traceback
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from spa_spine.core.errors import PipelineError

if TYPE_CHECKING:
    from spa_spine.models.data import SpaDataModel
    from spa_spine.pipeline.context import SpaRequest

FALLBACK_ERROR_MESSAGE = "The page data could not be built."

OVERWRITTEN_STATUS_CODES = frozenset({301, 302, 307, 308, 404})


class ResponseKind(str, Enum):
    OK = "ok"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"
    ERROR = "error"
    DIAGNOSTIC = "diagnostic"


@dataclass(frozen=True)
class SpaResponse:
    """Status code + body (+ redirect location) handed back to the transport."""

    kind: ResponseKind
    status_code: int
    body: Any
    location: str | None = None
    media_type: str = "application/json"

    @property
    def is_success(self) -> bool:
        return self.kind is ResponseKind.OK


def ok(data_model: SpaDataModel, status_code: int = 200) -> SpaResponse:
    return SpaResponse(ResponseKind.OK, status_code, data_model.to_json())


def redirect(url: str, *, permanent: bool = True) -> SpaResponse:
    status = 301 if permanent else 307
    body = {"meta": {"code": status}, "data": {"url": url, "permanent": permanent}}
    return SpaResponse(ResponseKind.REDIRECT, status, body, location=url)


def not_found(message: str = "Page not found") -> SpaResponse:
    return SpaResponse(ResponseKind.NOT_FOUND, 404, {"meta": {"code": 404, "error": message}})


def error(message: str = FALLBACK_ERROR_MESSAGE, status_code: int = 500) -> SpaResponse:
    return SpaResponse(ResponseKind.ERROR, status_code, {"meta": {"code": status_code, "error": message}})


def html_error(request: SpaRequest, exc: BaseException) -> SpaResponse:
    """Human-readable error page for developers."""
    where = ""
    if isinstance(exc, PipelineError):
        where = (
            f"<p>Failed in group <code>{html.escape(exc.group_name)}</code>, "
            f"stage <code>{html.escape(exc.stage_name)}</code>.</p>"
        )
        exc = exc.cause

    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    page = (
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\"><title>SPA request failed</title></head>"
        "<body>"
        f"<h1>{html.escape(type(exc).__name__)}: {html.escape(str(exc))}</h1>"
        f"<p>URL: <code>{html.escape(request.scheme)}://{html.escape(request.host)}"
        f"{html.escape(request.url)}</code></p>"
        f"{where}"
        f"<pre>{html.escape(trace)}</pre>"
        "</body></html>"
    )
    return SpaResponse(ResponseKind.DIAGNOSTIC, 500, page, media_type="text/html")


def apply_status_policy(response: SpaResponse, overwrite: bool) -> SpaResponse:
    """
    Rewrite redirect and not-found status codes to 200 when ``overwrite``.

    This covers served 404 pages as well as bare not-found responses.
    Redirect bodies keep the original code under ``meta.code``.
    """
    if overwrite and response.status_code in OVERWRITTEN_STATUS_CODES:
        return replace(response, status_code=200)
    return response
