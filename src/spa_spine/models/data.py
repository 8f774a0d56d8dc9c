"""
The page-data JSON body returned to the SPA.

Field order on the wire is fixed: ``pageId``, ``siteId``, ``contentGuid``,
``executeTimeMs``, ``cached`` (only when true), then the ``site``,
``navigation`` and ``content`` sections, each present only when it was
requested and built. Absent sections are omitted, never ``null``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SpaDataModel(BaseModel):
    """Immutable page payload built once per cache miss."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_id: int = Field(default=-1, alias="pageId")
    site_id: int = Field(default=-1, alias="siteId")
    content_guid: str = Field(alias="contentGuid")
    execute_time_ms: int = Field(default=-1, alias="executeTimeMs")
    cached: bool = False

    site: dict[str, Any] | None = None
    navigation: list[dict[str, Any]] | None = None
    content: dict[str, Any] | None = None

    def to_json(self) -> dict[str, Any]:
        """Serialize for the response body."""
        body = self.model_dump(by_alias=True, exclude_none=True)
        if not self.cached:
            body.pop("cached")
        return body

    def to_cache(self) -> dict[str, Any]:
        """Serialize for a cache backend (no timing, no cached flag)."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"execute_time_ms", "cached"},
        )

    @classmethod
    def from_cache(cls, payload: dict[str, Any]) -> SpaDataModel:
        """Rebuild a model read back from the cache, marked as cached."""
        return cls.model_validate({**payload, "cached": True})

    def with_execute_time(self, elapsed_ms: int) -> SpaDataModel:
        return self.model_copy(update={"execute_time_ms": elapsed_ms})

    def with_content_guid(self, content_guid: str) -> SpaDataModel:
        return self.model_copy(update={"content_guid": content_guid})
