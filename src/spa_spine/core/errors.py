"""
Exceptions raised by spa-spine.

A page that cannot be resolved (unknown domain, missing node, redirect) is
an ordinary outcome carried as a terminal response on ``SpaRequest``. The
classes below are reserved for things that actually went wrong.

Hierarchy:
    ::

        SpaError
        ├── PipelineError        PIPELINE    a stage raised; knows group + stage
        ├── ContextStateError    INTERNAL    SpaRequest invariant violated
        ├── ConfigError          CONFIG      settings or site file unusable
        ├── InvalidRequestError  VALIDATION  query parameters rejected
        └── CacheError           CACHE       cache backend cannot be built

Every ``SpaError`` carries a category (used by the CLI and HTTP layer to
pick a status or exit message), an ``ErrorContext`` of loggable fields, and
optionally the exception it wraps.

Examples:
    >>> try:
    ...     raise KeyError("nodes")
    ... except KeyError as exc:
    ...     error = PipelineError("build", "content_lookup", exc)
    >>> error.group_name, error.stage_name
    ('build', 'content_lookup')
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    PIPELINE = "PIPELINE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    CACHE = "CACHE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Where a failure happened.

    Named slots cover the request and pipeline position; anything else
    goes to ``metadata``.
    """

    group: str | None = None
    stage: str | None = None
    url: str | None = None
    host: str | None = None
    scheme: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a log-friendly dict, skipping unset slots."""
        flat = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "metadata" and getattr(self, f.name) is not None
        }
        flat.update(self.metadata)
        return flat


_CONTEXT_SLOTS = frozenset(f.name for f in fields(ErrorContext)) - {"metadata"}


class SpaError(Exception):
    """Root of the spa-spine exception tree.

    ``category`` defaults to the subclass's ``default_category``. When
    ``cause`` is given it is exposed as ``self.cause`` and also set as
    ``__cause__`` so the traceback shows both.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category if category is not None else self.default_category
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **values: Any) -> SpaError:
        """Record extra fields and return ``self`` so it can be raised inline::

            raise ConfigError("unreadable").with_context(path="site.json")
        """
        for name, value in values.items():
            if name in _CONTEXT_SLOTS:
                setattr(self.context, name, value)
            else:
                self.context.metadata[name] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error_type": type(self).__name__,
            "category": self.category.value,
            "message": self.message,
        }
        where = self.context.to_dict()
        if where:
            payload["context"] = where
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


class PipelineError(SpaError):
    """Wraps whatever a stage raised, tagged with the group and stage names.

    Raised at most once per failure; the original exception is ``cause``.
    """

    default_category = ErrorCategory.PIPELINE

    def __init__(self, group_name: str, stage_name: str, cause: BaseException):
        self.group_name = group_name
        self.stage_name = stage_name
        super().__init__(
            f"{group_name}/{stage_name} raised {cause!r}",
            context=ErrorContext(group=group_name, stage=stage_name),
            cause=cause,
        )


class ContextStateError(SpaError):
    """Raised when SpaRequest refuses a write (frozen field, model already set)."""


class ConfigError(SpaError):
    default_category = ErrorCategory.CONFIG


class InvalidRequestError(SpaError):
    """Input from the caller is malformed; ``parameter`` names the offending field."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, parameter: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.parameter = parameter


class CacheError(SpaError):
    default_category = ErrorCategory.CACHE


def provenance(error: BaseException) -> dict[str, str]:
    """Group and stage of a ``PipelineError`` as log fields; empty for anything else."""
    if not isinstance(error, PipelineError):
        return {}
    return {"group": error.group_name, "stage": error.stage_name}


__all__ = [
    "CacheError",
    "ConfigError",
    "ContextStateError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidRequestError",
    "PipelineError",
    "SpaError",
    "provenance",
]
