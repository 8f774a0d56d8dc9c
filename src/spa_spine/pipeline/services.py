"""Resolved services handed explicitly to every stage."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field

from spa_spine.collaborators.memory import InMemorySite
from spa_spine.collaborators.protocols import ContentResolver, DomainResolver, RedirectsService
from spa_spine.core.errors import ConfigError
from spa_spine.core.settings import SpaSettings
from spa_spine.models.builders import ModelBuilders
from spa_spine.pipeline.cache import PageCache, create_page_cache


class ContentToken:
    """
    Process-wide token that changes whenever published content changes.

    Written into every data model as ``contentGuid`` so the frontend can
    tell when its own caches are stale.
    """

    def __init__(self, value: str | None = None):
        self._value = value or str(uuid.uuid4())
        self._lock = threading.Lock()

    @property
    def value(self) -> str:
        return self._value

    def bump(self) -> str:
        with self._lock:
            self._value = str(uuid.uuid4())
            return self._value


@dataclass
class SpaServices:
    domains: DomainResolver
    content: ContentResolver
    redirects: RedirectsService
    builders: ModelBuilders = field(default_factory=ModelBuilders)
    cache: PageCache | None = None
    token: ContentToken = field(default_factory=ContentToken)

    @classmethod
    def from_site(cls, site: InMemorySite, *, cache: PageCache | None = None) -> SpaServices:
        return cls(domains=site, content=site, redirects=site, cache=cache)

    @classmethod
    def from_settings(cls, settings: SpaSettings) -> SpaServices:
        """Wire the in-memory collaborators from ``settings.site_file``."""
        if settings.site_file is None:
            raise ConfigError("No site file configured (set SPA_SITE_FILE)")
        site = InMemorySite.from_file(settings.site_file)
        return cls.from_site(site, cache=create_page_cache(settings))
