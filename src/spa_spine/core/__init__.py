"""spa-spine core -- errors, cache backends, hashing, logging and settings.

Architecture::

    errors.py     Structured error hierarchy (SpaError, PipelineError)
    cache.py      CacheBackend protocol, InMemoryCache, RedisCache
    hashing.py    Deterministic hashing for cache identities
    memo.py       Compute-once cells for derived values
    logging.py    structlog configuration and context binding
    settings.py   pydantic-settings based configuration

Nothing in ``core`` imports from the pipeline, models or transport layers.
"""

from spa_spine.core.cache import CacheBackend, InMemoryCache, RedisCache
from spa_spine.core.errors import (
    CacheError,
    ConfigError,
    ContextStateError,
    ErrorCategory,
    ErrorContext,
    InvalidRequestError,
    PipelineError,
    SpaError,
)
from spa_spine.core.memo import Memo

__all__ = [
    "CacheBackend",
    "CacheError",
    "ConfigError",
    "ContextStateError",
    "ErrorCategory",
    "ErrorContext",
    "InMemoryCache",
    "InvalidRequestError",
    "Memo",
    "PipelineError",
    "RedisCache",
    "SpaError",
]
