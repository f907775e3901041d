"""Tests for the versioned cache."""

from datetime import datetime, timedelta, timezone

import pytest

from fastfilter.cache.stores import InMemoryCacheStore, InMemoryVersionStore
from fastfilter.cache.versioned import AGGREGATE_KEYS, CacheConfig, VersionedCache
from fastfilter.domain.exceptions import CacheStorageError, CacheVersionError


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class BrokenCacheStore(InMemoryCacheStore):
    """Cache store whose every operation fails."""

    async def get(self, key: str) -> str | None:
        raise CacheStorageError("get", key, "timeout")

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        raise CacheStorageError("set", key, "timeout")

    async def delete(self, key: str) -> bool:
        raise CacheStorageError("delete", key, "timeout")

    async def count(self, prefix: str) -> int:
        raise CacheStorageError("count", prefix, "timeout")


class BrokenVersionStore(InMemoryVersionStore):
    """Version store that can be read but not bumped."""

    async def increment(self, name: str) -> int:
        raise CacheVersionError(name, "read-only replica")


class UnreadableVersionStore(InMemoryVersionStore):
    """Version store that cannot even be read."""

    async def get(self, name: str) -> int:
        raise CacheVersionError(name, "connection refused")


# ============================================================================
# Get / Set / Delete
# ============================================================================


class TestGetSet:
    """Tests for reading and writing entries."""

    @pytest.mark.asyncio
    async def test_roundtrip(self, cache: VersionedCache) -> None:
        """Stored values are returned as JSON-decoded structures."""
        value = {"products": [{"id": 1}], "pagination": {"total": 1}}
        assert await cache.set("products_abc", value)
        assert await cache.get("products_abc") == value

    @pytest.mark.asyncio
    async def test_missing(self, cache: VersionedCache) -> None:
        """Unknown keys are a miss."""
        assert await cache.get("products_nope") is None

    @pytest.mark.asyncio
    async def test_storage_key_format(self, cache: VersionedCache, cache_store: InMemoryCacheStore) -> None:
        """Versioned keys embed namespace and version; aggregates only the namespace."""
        await cache.set("products_abc", [1])
        await cache.set("attributes", [2], versioned=False)
        assert cache_store.contains("ff_v1_products_abc")
        assert cache_store.contains("ff_attributes")

    @pytest.mark.asyncio
    async def test_expiry(self, version_store: InMemoryVersionStore) -> None:
        """Entries expire after their TTL."""
        clock = FakeClock()
        cache = VersionedCache(InMemoryCacheStore(clock), version_store)

        await cache.set("products_abc", [1], ttl=60)
        clock.advance(59)
        assert await cache.get("products_abc") == [1]
        clock.advance(1)
        assert await cache.get("products_abc") is None

    @pytest.mark.asyncio
    async def test_default_ttl(self, version_store: InMemoryVersionStore) -> None:
        """The configured TTL applies when none is given."""
        clock = FakeClock()
        cache = VersionedCache(InMemoryCacheStore(clock), version_store, CacheConfig(ttl_seconds=3600))

        await cache.set("products_abc", [1])
        clock.advance(3599)
        assert await cache.get("products_abc") == [1]
        clock.advance(1)
        assert await cache.get("products_abc") is None

    @pytest.mark.asyncio
    async def test_delete(self, cache: VersionedCache) -> None:
        """Deleted entries are gone."""
        await cache.set("products_abc", [1])
        assert await cache.delete("products_abc")
        assert await cache.get("products_abc") is None
        assert not await cache.delete("products_abc")

    @pytest.mark.asyncio
    async def test_undecodable_entry_is_miss(self, cache: VersionedCache, cache_store: InMemoryCacheStore) -> None:
        """Corrupt stored values read as a miss."""
        await cache_store.set("ff_v1_products_abc", "{not json", 60)
        assert await cache.get("products_abc") is None


class TestCachingDisabled:
    """Tests for the caching_enabled flag."""

    @pytest.fixture
    def disabled(self, cache_store, version_store) -> VersionedCache:
        """Cache with result caching turned off."""
        return VersionedCache(cache_store, version_store, CacheConfig(caching_enabled=False))

    @pytest.mark.asyncio
    async def test_versioned_entries_bypassed(self, disabled: VersionedCache, cache_store) -> None:
        """Result entries are neither written nor read."""
        assert not await disabled.set("products_abc", [1])
        assert not cache_store.contains("ff_v1_products_abc")
        assert await disabled.get("products_abc") is None

    @pytest.mark.asyncio
    async def test_aggregates_still_cached(self, disabled: VersionedCache) -> None:
        """Aggregate entries are cached regardless."""
        assert await disabled.set("price_range", {"min": 1, "max": 2}, versioned=False)
        assert await disabled.get("price_range", versioned=False) == {"min": 1, "max": 2}


class TestStorageFailures:
    """Storage errors degrade instead of raising."""

    @pytest.fixture
    def broken(self, version_store) -> VersionedCache:
        """Cache over a failing store."""
        return VersionedCache(BrokenCacheStore(), version_store)

    @pytest.mark.asyncio
    async def test_get_is_miss(self, broken: VersionedCache) -> None:
        """Failed reads are misses."""
        assert await broken.get("products_abc") is None

    @pytest.mark.asyncio
    async def test_set_reports_failure(self, broken: VersionedCache) -> None:
        """Failed writes return False."""
        assert not await broken.set("products_abc", [1])

    @pytest.mark.asyncio
    async def test_delete_reports_failure(self, broken: VersionedCache) -> None:
        """Failed deletes return False."""
        assert not await broken.delete("products_abc")

    @pytest.mark.asyncio
    async def test_unreadable_version_is_miss(self, cache_store) -> None:
        """A version that cannot be loaded makes reads miss."""
        cache = VersionedCache(cache_store, UnreadableVersionStore())
        assert await cache.get("products_abc") is None
        assert not await cache.set("products_abc", [1])


# ============================================================================
# Flush
# ============================================================================


class TestFlush:
    """Tests for version-based invalidation."""

    @pytest.mark.asyncio
    async def test_flush_bumps_version(self, cache: VersionedCache) -> None:
        """Each flush increments the version by one."""
        assert await cache.get_version() == 1
        assert await cache.flush() == 2
        assert await cache.flush() == 3
        assert await cache.get_version() == 3

    @pytest.mark.asyncio
    async def test_flush_makes_entries_unreachable(
        self,
        cache: VersionedCache,
        cache_store: InMemoryCacheStore,
    ) -> None:
        """Old entries miss after a flush while still physically stored."""
        await cache.set("products_abc", [1])
        await cache.flush()

        assert await cache.get("products_abc") is None
        assert cache_store.contains("ff_v1_products_abc")

    @pytest.mark.asyncio
    async def test_flush_visible_to_new_instances(
        self,
        cache: VersionedCache,
        cache_store: InMemoryCacheStore,
        version_store: InMemoryVersionStore,
    ) -> None:
        """A cache created after a flush elsewhere sees the new version."""
        stale = VersionedCache(cache_store, version_store)
        await stale.set("products_abc", [1])

        await cache.flush()

        fresh = VersionedCache(cache_store, version_store)
        assert await fresh.get_version() == 2
        assert await fresh.get("products_abc") is None

    @pytest.mark.asyncio
    async def test_flush_deletes_aggregates(self, cache: VersionedCache, cache_store: InMemoryCacheStore) -> None:
        """The aggregate entries are physically deleted."""
        for key in AGGREGATE_KEYS:
            await cache.set(key, [key], versioned=False)

        await cache.flush()

        for key in AGGREGATE_KEYS:
            assert not cache_store.contains(f"ff_{key}")

    @pytest.mark.asyncio
    async def test_orphaned_generations_are_reclaimed(self, version_store: InMemoryVersionStore) -> None:
        """Entries left behind by flushes are freed once their TTL passes."""
        clock = FakeClock()
        store = InMemoryCacheStore(clock, sweep_every=50)
        cache = VersionedCache(store, version_store)

        for _ in range(5):
            for i in range(200):
                await cache.set(f"products_{i}", [i], ttl=60)
            clock.advance(3600)
            await cache.flush()

        assert store.size() == 200
        assert await store.count("ff_v5_") == 0

    @pytest.mark.asyncio
    async def test_flush_failure_raises(self, cache_store) -> None:
        """A version bump that cannot be persisted raises."""
        cache = VersionedCache(cache_store, BrokenVersionStore())
        with pytest.raises(CacheVersionError):
            await cache.flush()

    @pytest.mark.asyncio
    async def test_namespaces_are_independent(self, cache_store, version_store) -> None:
        """Flushing one namespace leaves another untouched."""
        shop = VersionedCache(cache_store, version_store, CacheConfig(namespace="shop"))
        other = VersionedCache(cache_store, version_store, CacheConfig(namespace="other"))
        await other.set("products_abc", [1])

        await shop.flush()

        assert await other.get("products_abc") == [1]


# ============================================================================
# Stats / Warm
# ============================================================================


class TestStats:
    """Tests for get_stats."""

    @pytest.mark.asyncio
    async def test_stats(self, cache: VersionedCache) -> None:
        """Stats count only live entries of the current version."""
        await cache.set("products_a", [1])
        await cache.set("products_b", [2])
        await cache.set("attributes", [], versioned=False)

        assert await cache.get_stats() == {
            "version": 1,
            "entry_count": 2,
            "ttl_seconds": 3600,
            "storage_kind": "memory",
        }

        await cache.flush()
        stats = await cache.get_stats()
        assert stats["version"] == 2
        assert stats["entry_count"] == 0

    @pytest.mark.asyncio
    async def test_stats_survive_count_failure(self, version_store) -> None:
        """A failing count reports zero entries."""
        stats = await VersionedCache(BrokenCacheStore(), version_store).get_stats()
        assert stats["entry_count"] == 0


class TestWarm:
    """Tests for warm."""

    @pytest.mark.asyncio
    async def test_warm_populates_aggregates(self, cache: VersionedCache) -> None:
        """Warming stores all four aggregates."""
        await cache.warm()
        for key in AGGREGATE_KEYS:
            assert await cache.get(key, versioned=False) is not None

    @pytest.mark.asyncio
    async def test_warm_after_flush(self, cache: VersionedCache) -> None:
        """Warming right after a flush restores the aggregates."""
        await cache.warm()
        await cache.flush()
        await cache.warm()
        assert await cache.get("price_range", versioned=False) == {"min": 20.0, "max": 100.0}

    @pytest.mark.asyncio
    async def test_warm_is_idempotent(self, cache: VersionedCache) -> None:
        """Warming twice gives the same entries."""
        await cache.warm()
        first = await cache.get("categories_hier", versioned=False)
        await cache.warm()
        assert await cache.get("categories_hier", versioned=False) == first

    @pytest.mark.asyncio
    async def test_warm_without_warmer(self, cache_store, version_store) -> None:
        """Without a warmer, warming does nothing."""
        cache = VersionedCache(cache_store, version_store)
        await cache.warm()
        assert await cache.get("attributes", versioned=False) is None
