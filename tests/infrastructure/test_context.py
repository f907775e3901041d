"""Tests for the application context."""

from dataclasses import replace

import pytest

from fastfilter.cache.stores import InMemoryCacheStore, InMemoryVersionStore
from fastfilter.catalog.memory import InMemoryCatalogStore
from fastfilter.catalog.repository import SqlCatalogStore
from fastfilter.catalog.store import ProductFormatter
from fastfilter.infrastructure.config import Settings
from fastfilter.infrastructure.context import AppContext, build_context


class RecordingEngine:
    """Engine stand-in counting disposals."""

    def __init__(self) -> None:
        self.disposed = 0

    async def dispose(self) -> None:
        self.disposed += 1


class UnusableSessionFactory:
    """Session factory that must never be called."""

    def __call__(self):
        raise AssertionError("no session expected")


class TestBuildContext:
    """Tests for build_context."""

    def test_memory_backends(self) -> None:
        """Memory backends need no engine and load the demo catalog."""
        context = build_context(Settings(catalog_backend="memory", cache_backend="memory"))

        assert context.engine is None
        assert isinstance(context.catalog, InMemoryCatalogStore)
        assert isinstance(context.cache_store, InMemoryCacheStore)
        assert isinstance(context.version_store, InMemoryVersionStore)

    @pytest.mark.asyncio
    async def test_memory_backends_ready(self) -> None:
        """Without a database the context is always ready."""
        context = build_context(Settings(catalog_backend="memory", cache_backend="memory"))
        assert await context.is_ready()


class TestClose:
    """Tests for releasing resources."""

    @pytest.mark.asyncio
    async def test_engine_disposed_once(self, context: AppContext) -> None:
        """The context disposes the shared engine; the SQL store leaves it alone."""
        engine = RecordingEngine()
        store = SqlCatalogStore(UnusableSessionFactory(), ProductFormatter("https://shop.test"))
        owned = replace(context, catalog=store, engine=engine)

        await owned.close()

        assert engine.disposed == 1

    @pytest.mark.asyncio
    async def test_without_engine(self, context: AppContext) -> None:
        """Closing a context without a database is a no-op."""
        await context.close()
        assert context.engine is None
