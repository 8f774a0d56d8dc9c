"""
Exception handlers for failures that escape the pipeline.

Pipeline failures are normally turned into responses by ``ErrorReporter``.
What reaches these handlers is either bad input rejected while building
the ``SpaRequest`` or an error the reporter chose to re-raise. Both are
answered as ``application/problem+json`` (RFC 7807).
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from spa_spine.api.schemas import ErrorDetail, ProblemDetail
from spa_spine.core.errors import InvalidRequestError
from spa_spine.core.logging import get_logger

log = get_logger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    problem = ProblemDetail(
        status=status,
        title=title,
        detail=detail,
        instance=instance,
        errors=[ErrorDetail(**item) for item in (errors or [])],
    )
    return JSONResponse(problem.model_dump(), status_code=status, media_type=PROBLEM_MEDIA_TYPE)


async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    field_errors = (
        [{"code": "INVALID_PARAMETER", "message": exc.message, "field": exc.parameter}] if exc.parameter else []
    )
    return problem_response(
        status=400,
        title="Bad Request",
        detail=exc.message,
        instance=str(request.url),
        errors=field_errors,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 for anything else; the exception text is only exposed with ``debug`` on."""
    log.error("api.unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
    debug = request.app.state.settings.debug
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if debug else "An unexpected error occurred.",
        instance=str(request.url),
    )
