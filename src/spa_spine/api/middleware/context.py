"""Request-context middleware — request ID, log binding and timing headers.

Every response carries ``X-Request-ID`` (echoed from the caller or freshly
generated) and ``X-Process-Time-Ms``. The request ID is bound into the
structlog context for the lifetime of the request, so log lines written by
pipeline stages can be correlated with the HTTP exchange.
"""

from __future__ import annotations

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from spa_spine.core.logging import bind_context, unbind_context


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        bind_context(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            unbind_context("request_id")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time-Ms"] = str(round((time.perf_counter() - start) * 1000, 2))
        return response
