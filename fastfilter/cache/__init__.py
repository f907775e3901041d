"""Versioned cache.

Provides the generation-counter cache front and its storage backends.
"""

from fastfilter.cache.stores import (
    CacheStore,
    DatabaseCacheStore,
    DatabaseVersionStore,
    InMemoryCacheStore,
    InMemoryVersionStore,
    VersionStore,
)
from fastfilter.cache.versioned import AGGREGATE_KEYS, CacheConfig, CacheWarmer, VersionedCache

__all__ = [
    # Stores
    "CacheStore",
    "DatabaseCacheStore",
    "DatabaseVersionStore",
    "InMemoryCacheStore",
    "InMemoryVersionStore",
    "VersionStore",
    # Cache
    "AGGREGATE_KEYS",
    "CacheConfig",
    "CacheWarmer",
    "VersionedCache",
]
