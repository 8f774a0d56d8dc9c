"""
Page cache port — read-through / write-back of built data models.

The setup group calls :meth:`PageCache.try_get` with the request's derived
key; a hit becomes the request's data model (flagged ``cached``) and the
build group's guard turns false. The finalize group calls
:meth:`PageCache.set` after a first-time build.

There is no locking or build coalescing: two concurrent misses for the same
key both build and both write, and the last write wins.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from spa_spine.core.cache import CacheBackend, InMemoryCache, RedisCache
from spa_spine.core.logging import get_logger
from spa_spine.core.settings import SpaSettings
from spa_spine.models.data import SpaDataModel

log = get_logger(__name__)


class PageCache:
    """Stores :class:`SpaDataModel` payloads in a :class:`CacheBackend`."""

    def __init__(self, backend: CacheBackend, *, ttl_seconds: int | None = None):
        self.backend = backend
        self.ttl_seconds = ttl_seconds

    def try_get(self, key: str) -> SpaDataModel | None:
        payload = self.backend.get(key)
        if payload is None:
            return None
        try:
            return SpaDataModel.from_cache(payload)
        except PydanticValidationError:
            log.warning("pipeline.cache_entry_invalid", key=key)
            self.backend.delete(key)
            return None

    def set(self, key: str, model: SpaDataModel) -> None:
        self.backend.set(key, model.to_cache(), ttl_seconds=self.ttl_seconds)


def create_page_cache(settings: SpaSettings) -> PageCache | None:
    """Build the page cache described by ``settings`` (``None`` when disabled)."""
    if not settings.cache_enabled:
        return None

    if settings.cache_backend == "redis":
        backend: CacheBackend = RedisCache(settings.cache_url, default_ttl_seconds=settings.cache_ttl_seconds)
    else:
        backend = InMemoryCache(
            max_size=settings.cache_max_size,
            default_ttl_seconds=settings.cache_ttl_seconds,
        )

    log.debug("page_cache.created", backend=settings.cache_backend)
    return PageCache(backend, ttl_seconds=settings.cache_ttl_seconds)
