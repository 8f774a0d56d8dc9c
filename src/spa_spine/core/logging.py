"""
structlog setup for spa-spine.

``configure_logging`` is called once by each entry point (the API factory
and the ``page`` CLI command). Modules then grab a logger with
``get_logger(__name__)`` and emit dotted event names::

    log = get_logger(__name__)
    log.info("pipeline.completed", url="/about/", status=200, elapsed_ms=3.1)

When stdout is not a terminal, events are rendered as JSON lines using ECS
field names (``@timestamp``, ``log.level``, ``service.name``) so they can be
shipped to Elasticsearch unchanged. On a terminal the colored dev renderer
is used instead.

Per-request fields (request id, method, path) are attached by the HTTP
middleware through ``bind_context`` and flow into every event logged while
the request is being served.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# structlog key -> ECS key
_ECS_RENAMES = {
    "timestamp": "@timestamp",
    "level": "log.level",
}

_service = "spa-spine"


def _stamp_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service.name", _service)
    return event_dict


def _rename_for_ecs(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for source, target in _ECS_RENAMES.items():
        if source in event_dict:
            event_dict[target] = event_dict.pop(source)
    return event_dict


def _processor_chain(as_json: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _stamp_service,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if not as_json:
        chain.append(structlog.dev.ConsoleRenderer(colors=True))
        return chain
    chain.extend(
        [
            structlog.processors.format_exc_info,
            _rename_for_ecs,
            structlog.processors.JSONRenderer(),
        ]
    )
    return chain


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "spa-spine",
) -> None:
    """Install the structlog configuration for this process.

    Args:
        level: Minimum level name, e.g. ``"DEBUG"`` or ``"WARNING"``
        json_format: Force JSON (True) or console (False) rendering; None picks
            JSON whenever stdout is not a terminal
        service: Value written to ``service.name`` on every event
    """
    global _service
    _service = service

    as_json = (not sys.stdout.isatty()) if json_format is None else json_format
    threshold = logging.getLevelName(level.upper())
    if not isinstance(threshold, int):
        threshold = logging.INFO

    structlog.configure(
        processors=_processor_chain(as_json),
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    # Third-party libraries (uvicorn, httpx) still log through the stdlib.
    logging.basicConfig(stream=sys.stdout, format="%(message)s", level=threshold)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


def bind_context(**fields: Any) -> None:
    """Attach ``fields`` to every event logged from the current context."""
    structlog.contextvars.bind_contextvars(**fields)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Drop every field bound in the current context."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
]
