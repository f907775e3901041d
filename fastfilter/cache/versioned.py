"""Versioned cache.

Cache invalidation works through a generation counter instead of
deleting entries one by one:
- Every entry is written under `<namespace>_v<version>_<key>`.
- `flush()` bumps the version, so every entry written before becomes
  unreachable in O(1) and is left to expire in the storage layer.
- The four catalog aggregates live under unversioned keys and are
  deleted explicitly on flush, so they are recomputed on the next read.

A `VersionedCache` memoizes the version on first use and keeps it for
its own lifetime. Instances are created per request; a flush performed
elsewhere becomes visible to the next instance.
"""

import json
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

from fastfilter.cache.stores import CacheStore, VersionStore
from fastfilter.domain.exceptions import CacheStorageError, CacheVersionError

logger = structlog.get_logger()

AGGREGATE_KEYS = (
    "categories_hier",
    "categories_flat",
    "attributes",
    "price_range",
)


@dataclass(frozen=True)
class CacheConfig:
    """Cache capabilities, resolved once at startup.

    Attributes:
        caching_enabled: Whether versioned result entries are read and written.
        invalidation_enabled: Whether catalog events flush the cache.
        warming_enabled: Whether a flush is followed by `warm()`.
        ttl_seconds: Default entry lifetime.
        namespace: Prefix of every storage key.
    """

    caching_enabled: bool = True
    invalidation_enabled: bool = True
    warming_enabled: bool = False
    ttl_seconds: int = 3600
    namespace: str = "ff"


class CacheWarmer(Protocol):
    """Recomputes the aggregate entries."""

    async def refresh(self, cache: "VersionedCache") -> None:
        """Recompute every aggregate and store it in `cache`."""
        ...


class VersionedCache:
    """Cache front for product-query results and catalog aggregates.

    Example usage:
        cache = VersionedCache(InMemoryCacheStore(), InMemoryVersionStore())
        if (payload := await cache.get(key)) is None:
            payload = await compute()
            await cache.set(key, payload)
    """

    def __init__(
        self,
        store: CacheStore,
        versions: VersionStore,
        config: CacheConfig | None = None,
        warmer: CacheWarmer | None = None,
    ) -> None:
        """Initialize cache.

        Args:
            store: Entry storage.
            versions: Version counter storage.
            config: Cache capabilities.
            warmer: Aggregate recomputation used by `warm()`.
        """
        self.store = store
        self.versions = versions
        self.config = config or CacheConfig()
        self.warmer = warmer
        self._version: int | None = None

    async def get_version(self) -> int:
        """Get the current cache version, loading it on first use.

        Returns:
            Cache version number.

        Raises:
            CacheVersionError: If the version cannot be read.
        """
        if self._version is None:
            self._version = await self.versions.get(self.config.namespace)
        return self._version

    async def _storage_key(self, key: str, versioned: bool) -> str:
        if not versioned:
            return f"{self.config.namespace}_{key}"
        version = await self.get_version()
        return f"{self.config.namespace}_v{version}_{key}"

    def _bypassed(self, versioned: bool) -> bool:
        return versioned and not self.config.caching_enabled

    async def get(self, key: str, versioned: bool = True) -> Any | None:
        """Get a cached value.

        Args:
            key: Cache key without version prefix.
            versioned: False for aggregate keys.

        Returns:
            Cached value, or None on a miss of any kind.
        """
        if self._bypassed(versioned):
            return None

        try:
            storage_key = await self._storage_key(key, versioned)
            raw = await self.store.get(storage_key)
        except (CacheStorageError, CacheVersionError) as e:
            logger.warning("Cache read failed, treating as miss", key=key, error=e.message)
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry", key=key)
            return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        versioned: bool = True,
    ) -> bool:
        """Set a cached value.

        Args:
            key: Cache key without version prefix.
            value: JSON-serializable value.
            ttl: Lifetime in seconds; the configured default when omitted.
            versioned: False for aggregate keys.

        Returns:
            True if the value was stored.
        """
        if self._bypassed(versioned):
            return False

        try:
            storage_key = await self._storage_key(key, versioned)
            await self.store.set(
                storage_key,
                json.dumps(value, separators=(",", ":")),
                ttl or self.config.ttl_seconds,
            )
        except (CacheStorageError, CacheVersionError) as e:
            logger.warning("Cache write failed", key=key, error=e.message)
            return False

        return True

    async def delete(self, key: str, versioned: bool = True) -> bool:
        """Delete a specific cache entry.

        Args:
            key: Cache key without version prefix.
            versioned: False for aggregate keys.

        Returns:
            True if an entry was deleted.
        """
        try:
            storage_key = await self._storage_key(key, versioned)
            return await self.store.delete(storage_key)
        except (CacheStorageError, CacheVersionError) as e:
            logger.warning("Cache delete failed", key=key, error=e.message)
            return False

    async def flush(self) -> int:
        """Invalidate every versioned entry by bumping the version.

        Also deletes the aggregate entries so they are recomputed on the
        next read instead of at natural expiry.

        Returns:
            The new version.

        Raises:
            CacheVersionError: If the new version could not be persisted.
        """
        previous = self._version
        self._version = await self.versions.increment(self.config.namespace)

        for key in AGGREGATE_KEYS:
            await self.delete(key, versioned=False)

        logger.info(
            "Cache flushed",
            namespace=self.config.namespace,
            previous_version=previous,
            version=self._version,
        )
        return self._version

    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Version, live entry count of the current version, default TTL
            and storage backend.
        """
        version = await self.get_version()
        try:
            entry_count = await self.store.count(f"{self.config.namespace}_v{version}_")
        except CacheStorageError as e:
            logger.warning("Cache entry count failed", error=e.message)
            entry_count = 0

        return {
            "version": version,
            "entry_count": entry_count,
            "ttl_seconds": self.config.ttl_seconds,
            "storage_kind": self.store.kind,
        }

    async def warm(self) -> None:
        """Recompute the aggregate entries.

        Safe to call at any time, including right after `flush()`.
        """
        if self.warmer is None:
            return

        await self.warmer.refresh(self)
        logger.info("Cache warmed", namespace=self.config.namespace)
