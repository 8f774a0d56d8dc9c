"""
RFC 7807 error envelope.

Page data itself is returned exactly as the pipeline produced it; only
transport-level failures (bad parameters, unhandled exceptions) use
:class:`ProblemDetail`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Field-level error detail."""

    code: str = Field(description="Machine-readable error code (e.g. 'INVALID_PARAMETER')")
    message: str = Field(description="Human-readable error description")
    field: str | None = Field(default=None, description="Query parameter the error refers to")


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs»."""

    type: str = Field(default="about:blank", description="Problem type URI")
    title: str = Field(description="Short summary of the problem")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Explanation specific to this occurrence")
    instance: str = Field(default="", description="URI of the failing request")
    errors: list[ErrorDetail] = Field(default_factory=list)
