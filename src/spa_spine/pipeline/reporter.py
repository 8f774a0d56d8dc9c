"""
Error reporter — the last line of the pipeline's error handling.

Every failure is logged with the request's URL, host and scheme (plus the
failing group and stage for :class:`PipelineError`). A diagnostic HTML page
is returned only when debug mode is on *and* the caller accepts
``text/html``; in every other case ``handle`` returns ``None`` and the
pipeline re-raises.
"""

from __future__ import annotations

from spa_spine.core.errors import provenance
from spa_spine.core.logging import get_logger
from spa_spine.pipeline.context import SpaRequest
from spa_spine.pipeline.responses import SpaResponse, html_error

log = get_logger(__name__)


def accepts_html(request: SpaRequest) -> bool:
    return any("text/html" in media_type for media_type in request.accept)


class ErrorReporter:
    """Log pipeline failures and optionally render a diagnostic page."""

    def __init__(self, *, debug: bool = False):
        self.debug = debug

    def handle(self, request: SpaRequest, error: BaseException) -> SpaResponse | None:
        log.error(
            "spa.request_failed",
            url=request.url,
            host=request.host,
            scheme=request.scheme,
            error_type=type(error).__name__,
            exc_info=error,
            **provenance(error),
        )

        if self.debug and accepts_html(request):
            return html_error(request, error)

        return None
