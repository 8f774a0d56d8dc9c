"""HTTP middleware and exception handlers."""

from spa_spine.api.middleware.context import RequestContextMiddleware
from spa_spine.api.middleware.errors import invalid_request_handler, problem_response, unhandled_exception_handler

__all__ = [
    "RequestContextMiddleware",
    "invalid_request_handler",
    "problem_response",
    "unhandled_exception_handler",
]
