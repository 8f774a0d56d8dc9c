"""
Per-request state for one pipeline run.

Manifesto:
    A ``SpaRequest`` is created by the transport, owned by exactly one
    pipeline run and discarded afterwards. Stages communicate only through
    it. Its invariants are enforced on assignment so a misbehaving stage
    fails fast instead of producing a half-consistent page:

    - once a terminal response is set, resolution fields are frozen
    - the data model is set once and never after a terminal response

Architecture:
    ::

        SpaRequest
          ├── inbound      url, is_preview, parts, host, scheme, accept, page_id
          ├── resolution   domain_id, site_id, culture, site, content, content_id
          ├── models       site_model, navigation_model, content_model
          ├── outcome      response (terminal), data_model (payload)
          └── derived      cache_key (computed once), elapsed_ms()

Tags:
    spa-spine, pipeline, request-context, state
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from spa_spine.core.errors import ContextStateError, InvalidRequestError
from spa_spine.core.hashing import compute_hash
from spa_spine.core.memo import Memo
from spa_spine.core.urls import normalize_path

if TYPE_CHECKING:
    from spa_spine.collaborators.protocols import ContentNode
    from spa_spine.models.data import SpaDataModel
    from spa_spine.pipeline.responses import SpaResponse


class SpaApiPart(str, Enum):
    """Sections of the page-data body a caller can ask for."""

    SITE = "site"
    NAVIGATION = "navigation"
    CONTENT = "content"

    @classmethod
    def parse(cls, value: str | Iterable[str] | None) -> frozenset[SpaApiPart]:
        """
        Parse a comma-separated list (or iterable) of part names.

        Empty input means "everything". Unknown names raise
        :class:`InvalidRequestError`.
        """
        if value is None:
            return ALL_PARTS
        names = value.split(",") if isinstance(value, str) else list(value)
        names = [name.strip().lower() for name in names if name and name.strip()]
        if not names:
            return ALL_PARTS

        parts = set()
        for name in names:
            try:
                parts.add(cls(name))
            except ValueError:
                raise InvalidRequestError(f"Unknown part: {name!r}", parameter="parts") from None
        return frozenset(parts)


ALL_PARTS: frozenset[SpaApiPart] = frozenset(SpaApiPart)

# Fields that may not change once a terminal response exists.
_RESOLUTION_FIELDS = frozenset({"page_id", "domain_id", "site_id", "content_id", "culture", "site", "content"})


@dataclass(eq=False)
class SpaRequest:
    """Mutable state container for one page-data request."""

    # Inbound
    url: str
    is_preview: bool = False
    parts: frozenset[SpaApiPart] = ALL_PARTS
    host: str = ""
    scheme: str = "https"
    accept: tuple[str, ...] = ()
    navigation_levels: int = 1
    page_id: int | None = None

    # Resolution
    domain_id: str | None = None
    site_id: int | None = None
    content_id: int | None = None
    culture: str | None = None
    site: ContentNode | None = None
    content: ContentNode | None = None

    # Model fragments
    site_model: dict[str, Any] | None = None
    navigation_model: list[dict[str, Any]] | None = None
    content_model: dict[str, Any] | None = None

    # Status used when the pipeline wraps the data model (404 pages use 404)
    response_status_code: int = 200
    started_at: float = field(default_factory=time.perf_counter)

    _response: SpaResponse | None = field(default=None, init=False, repr=False)
    _data_model: SpaDataModel | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.cache_key: Memo[str] = Memo(self._derive_cache_key)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _RESOLUTION_FIELDS and self.__dict__.get("_response") is not None:
            raise ContextStateError(f"Cannot change {name!r} after a terminal response was set")
        super().__setattr__(name, value)

    # -- terminal response ------------------------------------------------

    @property
    def response(self) -> SpaResponse | None:
        return self._response

    @response.setter
    def response(self, value: SpaResponse | None) -> None:
        self._response = value

    def has_response(self) -> bool:
        return self._response is not None

    # -- data model -------------------------------------------------------

    @property
    def data_model(self) -> SpaDataModel | None:
        return self._data_model

    @data_model.setter
    def data_model(self, value: SpaDataModel) -> None:
        if self._response is not None:
            raise ContextStateError("Cannot set the data model after a terminal response was set")
        if self._data_model is not None:
            raise ContextStateError("The data model has already been built")
        self._data_model = value

    # -- helpers ----------------------------------------------------------

    def is_part_requested(self, part: SpaApiPart) -> bool:
        return part in self.parts

    @property
    def path(self) -> str:
        """Normalized path of the requested URL."""
        return normalize_path(self.url)

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}" if self.host else ""

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)

    def _derive_cache_key(self) -> str:
        parts = ",".join(sorted(part.value for part in self.parts))
        identity = compute_hash(
            self.scheme,
            self.domain_id or self.host.lower(),
            self.path,
            self.culture,
            self.is_preview,
            self.page_id,
            parts,
        )
        return f"spa:page:{identity}"
