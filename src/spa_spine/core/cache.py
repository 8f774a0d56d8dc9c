"""
Storage backends behind the page cache.

Pipeline stages only see :class:`spa_spine.pipeline.cache.PageCache`, which
owns key derivation and data-model (de)serialization. The classes here are
plain key/value stores for JSON-compatible values.

Backends:
    ::

        CacheBackend (Protocol)
        ├── InMemoryCache  per process, LRU bounded, thread safe
        └── RedisCache     shared by every worker (``redis`` extra)

Two runs building the same page may both write it; whichever write lands
last is kept. Nothing here coordinates builds.
"""

from __future__ import annotations

import json
import threading
import time
from collections import OrderedDict
from typing import Any, Protocol, runtime_checkable

from spa_spine.core.errors import CacheError

# (value, absolute expiry in epoch seconds or None for "never")
_Entry = tuple[Any, float | None]


@runtime_checkable
class CacheBackend(Protocol):
    """What ``PageCache`` needs from a store.

    Calls may arrive from several pipeline runs at once.
    """

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None: ...

    def delete(self, key: str) -> None: ...

    def exists(self, key: str) -> bool: ...

    def clear(self) -> None: ...


def _resolve_ttl(ttl_seconds: int | None, default: int | None) -> int | None:
    """Per-call TTL wins over the backend default; 0 and None mean no expiry."""
    ttl = default if ttl_seconds is None else ttl_seconds
    return ttl or None


class InMemoryCache:
    """Process-local store with expiry and least-recently-used eviction.

    Reads refresh an entry's recency. Once ``max_size`` keys are held,
    storing a new key drops the stalest one. A single lock guards the
    ordered dict.
    """

    def __init__(
        self,
        *,
        max_size: int = 10_000,
        default_ttl_seconds: int | None = 300,
    ):
        self._store: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()
        self._max_size = max_size
        self._default_ttl = default_ttl_seconds

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._fresh(key)
            if entry is None:
                return None
            self._store.move_to_end(key)
            return entry[0]

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        ttl = _resolve_ttl(ttl_seconds, self._default_ttl)
        entry: _Entry = (value, None if ttl is None else time.time() + ttl)
        with self._lock:
            is_new = key not in self._store
            if is_new and len(self._store) >= self._max_size:
                self._store.popitem(last=False)
            self._store[key] = entry
            self._store.move_to_end(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def exists(self, key: str) -> bool:
        with self._lock:
            return self._fresh(key) is not None

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def size(self) -> int:
        """Number of stored keys, including any that expired but were not read since."""
        with self._lock:
            return len(self._store)

    def _fresh(self, key: str) -> _Entry | None:
        # lock must be held
        entry = self._store.get(key)
        if entry is not None and entry[1] is not None and entry[1] < time.time():
            del self._store[key]
            return None
        return entry


class RedisCache:
    """Store pages in Redis so every worker process shares one cache.

    Values are written as JSON text. Pass ``client`` to reuse an existing
    connection; otherwise one is opened from ``url``.

    Raises:
        CacheError: ``client`` was not given and the ``redis`` package is missing.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        default_ttl_seconds: int | None = 300,
        client: Any | None = None,
    ):
        self._client = client if client is not None else self._connect(url)
        self._default_ttl = default_ttl_seconds

    @staticmethod
    def _connect(url: str) -> Any:
        try:
            import redis
        except ImportError as exc:
            raise CacheError(
                "cache_backend=redis needs the redis client: pip install 'spa-spine[redis]'",
                cause=exc,
            ) from exc
        return redis.from_url(url)

    def get(self, key: str) -> Any | None:
        raw = self._client.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        payload = json.dumps(value)
        ttl = _resolve_ttl(ttl_seconds, self._default_ttl)
        if ttl is None:
            self._client.set(key, payload)
        else:
            self._client.setex(key, ttl, payload)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def exists(self, key: str) -> bool:
        return self._client.exists(key) > 0

    def clear(self) -> None:
        """Flush the selected Redis database, not just spa-spine keys."""
        self._client.flushdb()


__all__ = [
    "CacheBackend",
    "InMemoryCache",
    "RedisCache",
]
