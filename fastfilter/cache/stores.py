"""Storage backends for the versioned cache.

Two concerns are kept apart:
- `CacheStore` holds the JSON-encoded entries with an expiry.
- `VersionStore` holds the generation counter per namespace and must
  increment atomically.

Each has an in-memory implementation (single process, tests, demos)
and a PostgreSQL implementation.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fastfilter.cache.models import CacheEntryRecord, CacheVersionRecord
from fastfilter.domain.exceptions import CacheStorageError, CacheVersionError
from fastfilter.infrastructure.database import session_scope

logger = structlog.get_logger()

INITIAL_VERSION = 1

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


class CacheStore(Protocol):
    """Key/value storage with per-entry expiry."""

    kind: str

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent or expired."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value for `ttl_seconds`."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove a value; True if something was removed."""
        ...

    async def count(self, prefix: str) -> int:
        """Count live entries whose key starts with `prefix`."""
        ...

    async def purge_expired(self) -> int:
        """Physically remove expired entries; returns how many."""
        ...


class VersionStore(Protocol):
    """Persistent generation counters."""

    async def get(self, name: str) -> int:
        """Return the current version (INITIAL_VERSION if never bumped)."""
        ...

    async def increment(self, name: str) -> int:
        """Atomically bump the version and return the new value."""
        ...


# ============================================================================
# In-memory backends
# ============================================================================


@dataclass
class _MemoryEntry:
    value: str
    expires_at: datetime


class InMemoryCacheStore:
    """In-memory cache store.

    Expired entries are dropped lazily on read, and every `sweep_every`
    writes the whole store is swept so entries orphaned by a version bump
    are reclaimed once their TTL passes.
    """

    kind = "memory"

    def __init__(self, clock: Clock = utcnow, sweep_every: int = 100) -> None:
        """Initialize store.

        Args:
            clock: Source of the current time.
            sweep_every: Number of writes between expiry sweeps.
        """
        self._entries: dict[str, _MemoryEntry] = {}
        self._clock = clock
        self.sweep_every = max(1, sweep_every)
        self._writes = 0

    def size(self) -> int:
        """Number of physically stored entries, expired or not."""
        return len(self._entries)

    def contains(self, key: str) -> bool:
        """Whether an entry is physically present, expired or not."""
        return key in self._entries

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None

        return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = _MemoryEntry(
            value=value,
            expires_at=self._clock() + timedelta(seconds=ttl_seconds),
        )

        self._writes += 1
        if self._writes % self.sweep_every == 0:
            purged = await self.purge_expired()
            if purged:
                logger.debug("Expired cache entries swept", purged=purged, remaining=len(self._entries))

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def count(self, prefix: str) -> int:
        now = self._clock()
        return sum(
            1
            for key, entry in self._entries.items()
            if key.startswith(prefix) and entry.expires_at > now
        )

    async def purge_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)


class InMemoryVersionStore:
    """In-memory version counters, serialized by an asyncio lock."""

    def __init__(self) -> None:
        """Initialize store."""
        self._versions: dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def get(self, name: str) -> int:
        return self._versions.get(name, INITIAL_VERSION)

    async def increment(self, name: str) -> int:
        async with self._lock:
            version = self._versions.get(name, INITIAL_VERSION) + 1
            self._versions[name] = version
            return version


# ============================================================================
# PostgreSQL backends
# ============================================================================


class DatabaseCacheStore:
    """Cache entries kept in the `cache_entries` table.

    Expired rows stay in place until `purge_expired` runs; reads ignore
    them.
    """

    kind = "database"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock = utcnow,
    ) -> None:
        """Initialize store.

        Args:
            session_factory: Async session factory.
            clock: Source of the current time.
        """
        self._session_factory = session_factory
        self._clock = clock

    async def get(self, key: str) -> str | None:
        query = select(CacheEntryRecord.value).where(
            CacheEntryRecord.key == key,
            CacheEntryRecord.expires_at > self._clock(),
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(query)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise CacheStorageError("get", key, str(e)) from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        statement = insert(CacheEntryRecord).values(
            key=key,
            value=value,
            expires_at=expires_at,
        )
        statement = statement.on_conflict_do_update(
            index_elements=[CacheEntryRecord.key],
            set_={"value": statement.excluded.value, "expires_at": statement.excluded.expires_at},
        )
        try:
            async with session_scope(self._session_factory) as session:
                await session.execute(statement)
        except SQLAlchemyError as e:
            raise CacheStorageError("set", key, str(e)) from e

    async def delete(self, key: str) -> bool:
        statement = delete(CacheEntryRecord).where(CacheEntryRecord.key == key)
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(statement)
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise CacheStorageError("delete", key, str(e)) from e

    async def count(self, prefix: str) -> int:
        query = select(func.count()).select_from(CacheEntryRecord).where(
            CacheEntryRecord.key.startswith(prefix, autoescape=True),
            CacheEntryRecord.expires_at > self._clock(),
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(query)
                return result.scalar_one()
        except SQLAlchemyError as e:
            raise CacheStorageError("count", prefix, str(e)) from e

    async def purge_expired(self) -> int:
        statement = delete(CacheEntryRecord).where(
            CacheEntryRecord.expires_at <= self._clock()
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(statement)
                return result.rowcount
        except SQLAlchemyError as e:
            raise CacheStorageError("purge", "*", str(e)) from e


class DatabaseVersionStore:
    """Version counters kept in the `cache_versions` table.

    The bump is one upsert statement, so concurrent flushes from any
    number of workers never lose an increment.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store.

        Args:
            session_factory: Async session factory.
        """
        self._session_factory = session_factory

    async def get(self, name: str) -> int:
        query = select(CacheVersionRecord.version).where(CacheVersionRecord.name == name)
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(query)
                version = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise CacheVersionError(name, str(e)) from e

        return INITIAL_VERSION if version is None else version

    async def increment(self, name: str) -> int:
        statement = (
            insert(CacheVersionRecord)
            .values(name=name, version=INITIAL_VERSION + 1)
            .on_conflict_do_update(
                index_elements=[CacheVersionRecord.name],
                set_={"version": CacheVersionRecord.version + 1},
            )
            .returning(CacheVersionRecord.version)
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(statement)
                version = result.scalar_one()
        except SQLAlchemyError as e:
            raise CacheVersionError(name, str(e)) from e

        logger.info("Cache version bumped", namespace=name, version=version)
        return version
