"""Application context.

Everything a request needs is built once at startup and held by an
`AppContext`: settings, cache capabilities, the catalog store, the cache
stores and the shared database engine. Request handlers receive it
through FastAPI dependencies instead of reaching for module globals.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from fastfilter.application.filter_service import FilterService
from fastfilter.application.invalidation import CatalogInvalidator, EventSignatureVerifier
from fastfilter.cache.stores import (
    CacheStore,
    DatabaseCacheStore,
    DatabaseVersionStore,
    InMemoryCacheStore,
    InMemoryVersionStore,
    VersionStore,
)
from fastfilter.cache.versioned import CacheConfig, VersionedCache
from fastfilter.catalog.aggregates import CatalogAggregates
from fastfilter.catalog.generator import CatalogGenerator, GeneratorConfig
from fastfilter.catalog.memory import InMemoryCatalogStore
from fastfilter.catalog.repository import SqlCatalogStore
from fastfilter.catalog.store import CatalogStore, ProductFormatter
from fastfilter.infrastructure.config import Settings
from fastfilter.infrastructure.database import create_engine, create_session_factory

logger = structlog.get_logger()


def cache_config_from(settings: Settings) -> CacheConfig:
    """Resolve the cache feature flags once.

    Args:
        settings: Application settings.

    Returns:
        Cache capabilities.
    """
    return CacheConfig(
        caching_enabled=settings.caching_enabled,
        invalidation_enabled=settings.invalidation_enabled,
        warming_enabled=settings.cache_warming_enabled,
        ttl_seconds=settings.cache_ttl_seconds,
        namespace=settings.cache_namespace,
    )


@dataclass
class AppContext:
    """Process-wide dependencies.

    Attributes:
        settings: Application settings.
        cache_config: Resolved cache capabilities.
        catalog: Catalog store.
        cache_store: Cache entry storage.
        version_store: Cache version storage.
        aggregates: Cached catalog aggregates.
        verifier: Catalog event signature verifier.
        engine: Database engine when any backend uses PostgreSQL.
    """

    settings: Settings
    cache_config: CacheConfig
    catalog: CatalogStore
    cache_store: CacheStore
    version_store: VersionStore
    aggregates: CatalogAggregates
    verifier: EventSignatureVerifier
    engine: AsyncEngine | None = None

    def new_cache(self) -> VersionedCache:
        """Create the versioned cache of one request."""
        return VersionedCache(
            self.cache_store,
            self.version_store,
            config=self.cache_config,
            warmer=self.aggregates,
        )

    def new_filter_service(self) -> FilterService:
        """Create the filter service of one request."""
        return FilterService(self.new_cache(), self.catalog, self.aggregates)

    def new_invalidator(self) -> CatalogInvalidator:
        """Create the catalog event handler."""
        return CatalogInvalidator(self.new_cache, self.cache_config)

    async def is_ready(self) -> bool:
        """Check that the database, if used, answers.

        Returns:
            True if every backend can serve requests.
        """
        if self.engine is None:
            return True

        try:
            async with self.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database readiness check failed", error=str(e))
            return False
        return True

    async def close(self) -> None:
        """Release the catalog store and the database engine."""
        await self.catalog.close()
        if self.engine is not None:
            await self.engine.dispose()


def build_context(settings: Settings) -> AppContext:
    """Build the application context for the configured backends.

    The memory catalog backend is seeded with the deterministic demo
    catalog.

    Args:
        settings: Application settings.

    Returns:
        Application context.
    """
    formatter = ProductFormatter(settings.storefront_url, settings.currency_symbol)

    engine = None
    session_factory = None
    if "database" in (settings.catalog_backend, settings.cache_backend):
        engine = create_engine(settings)
        session_factory = create_session_factory(engine)

    catalog: CatalogStore
    if settings.catalog_backend == "memory":
        seed = CatalogGenerator(
            GeneratorConfig(
                seed=settings.demo_seed,
                products_per_category=settings.demo_products_per_category,
            )
        ).generate()
        catalog = seed.load_into(InMemoryCatalogStore(formatter))
        logger.info("Demo catalog loaded", products=len(seed.products), seed=settings.demo_seed)
    else:
        catalog = SqlCatalogStore(session_factory, formatter)

    cache_store: CacheStore
    version_store: VersionStore
    if settings.cache_backend == "memory":
        cache_store = InMemoryCacheStore()
        version_store = InMemoryVersionStore()
    else:
        cache_store = DatabaseCacheStore(session_factory)
        version_store = DatabaseVersionStore(session_factory)

    return AppContext(
        settings=settings,
        cache_config=cache_config_from(settings),
        catalog=catalog,
        cache_store=cache_store,
        version_store=version_store,
        aggregates=CatalogAggregates(catalog),
        verifier=EventSignatureVerifier(settings.catalog_event_secret),
        engine=engine,
    )
