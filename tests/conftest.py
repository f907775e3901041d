"""Shared fixtures.

Every test runs against in-process stores and a small hand-built
catalog:

    Clothing (1)            Shoes (4)          Gift Cards (5, empty)
      Shirts (2)
      Pants (3)

    id   name          categories  color       size   price          menu  sales  rating
    101  Alpha Shirt   1, 2        Red         Small  20.00          1     5      4.5
    102  Beta Shirt    1, 2        Blue        Medium 30.00 -> 25.00 0     50     3.0
    103  Gamma Pants   1, 3        Red, Blue   Medium 50.00          0     10     5.0
    104  Delta Boots   4           Red         -      100.00         2     1      0.0
    105  Draft Shirt   1, 2        Green       -      10.00 (draft)
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fastfilter.application.invalidation import EventSignatureVerifier
from fastfilter.cache.stores import InMemoryCacheStore, InMemoryVersionStore
from fastfilter.cache.versioned import CacheConfig, VersionedCache
from fastfilter.catalog.aggregates import CatalogAggregates
from fastfilter.catalog.memory import CatalogProduct, CatalogTerm, InMemoryCatalogStore
from fastfilter.catalog.store import AttributeInfo, ProductFormatter
from fastfilter.infrastructure.config import Settings
from fastfilter.infrastructure.context import AppContext, cache_config_from
from fastfilter.main import create_app

EVENT_SECRET = "test-catalog-secret"
STOREFRONT_URL = "https://shop.test"

CLOTHING, SHIRTS, PANTS, SHOES, GIFT_CARDS = 1, 2, 3, 4, 5
RED, BLUE, GREEN = 10, 11, 12
SMALL, MEDIUM = 20, 21
COTTON = 30


# ============================================================================
# Catalog Fixtures
# ============================================================================


def _created(day: int) -> datetime:
    return datetime(2025, 1, day, tzinfo=timezone.utc)


def build_catalog() -> InMemoryCatalogStore:
    """Build the sample catalog described in the module docstring."""
    store = InMemoryCatalogStore(ProductFormatter(STOREFRONT_URL))

    for term in [
        CatalogTerm(CLOTHING, "product_cat", "Clothing", "clothing"),
        CatalogTerm(SHIRTS, "product_cat", "Shirts", "shirts", parent_id=CLOTHING),
        CatalogTerm(PANTS, "product_cat", "Pants", "pants", parent_id=CLOTHING),
        CatalogTerm(SHOES, "product_cat", "Shoes", "shoes"),
        CatalogTerm(GIFT_CARDS, "product_cat", "Gift Cards", "gift-cards"),
        CatalogTerm(RED, "pa_color", "Red", "red"),
        CatalogTerm(BLUE, "pa_color", "Blue", "blue"),
        CatalogTerm(GREEN, "pa_color", "Green", "green"),
        CatalogTerm(SMALL, "pa_size", "Small", "small"),
        CatalogTerm(MEDIUM, "pa_size", "Medium", "medium"),
        CatalogTerm(COTTON, "pa_material", "Cotton", "cotton"),
    ]:
        store.add_term(term)

    store.add_attribute(AttributeInfo(id=1, name="color", label="Color", type="select"))
    store.add_attribute(AttributeInfo(id=2, name="size", label="Size", type="select"))
    store.add_attribute(AttributeInfo(id=3, name="material", label="Material", type="select"))

    store.add_product(
        CatalogProduct(
            id=101,
            name="Alpha Shirt",
            slug="alpha-shirt",
            regular_price=Decimal("20.00"),
            menu_order=1,
            total_sales=5,
            average_rating=Decimal("4.5"),
            rating_count=4,
            image_src="https://img.test/alpha.jpg",
            image_alt="Alpha Shirt",
            created_at=_created(1),
            terms={
                "product_cat": frozenset({CLOTHING, SHIRTS}),
                "pa_color": frozenset({RED}),
                "pa_size": frozenset({SMALL}),
            },
        )
    )
    store.add_product(
        CatalogProduct(
            id=102,
            name="Beta Shirt",
            slug="beta-shirt",
            regular_price=Decimal("30.00"),
            sale_price=Decimal("25.00"),
            menu_order=0,
            total_sales=50,
            average_rating=Decimal("3.0"),
            rating_count=2,
            created_at=_created(2),
            terms={
                "product_cat": frozenset({CLOTHING, SHIRTS}),
                "pa_color": frozenset({BLUE}),
                "pa_size": frozenset({MEDIUM}),
            },
        )
    )
    store.add_product(
        CatalogProduct(
            id=103,
            name="Gamma Pants",
            slug="gamma-pants",
            regular_price=Decimal("50.00"),
            menu_order=0,
            total_sales=10,
            average_rating=Decimal("5.0"),
            rating_count=1,
            created_at=_created(3),
            terms={
                "product_cat": frozenset({CLOTHING, PANTS}),
                "pa_color": frozenset({RED, BLUE}),
                "pa_size": frozenset({MEDIUM}),
            },
        )
    )
    store.add_product(
        CatalogProduct(
            id=104,
            name="Delta Boots",
            slug="delta-boots",
            regular_price=Decimal("100.00"),
            menu_order=2,
            total_sales=1,
            in_stock=False,
            created_at=_created(4),
            terms={
                "product_cat": frozenset({SHOES}),
                "pa_color": frozenset({RED}),
            },
        )
    )
    store.add_product(
        CatalogProduct(
            id=105,
            name="Draft Shirt",
            slug="draft-shirt",
            regular_price=Decimal("10.00"),
            status="draft",
            created_at=_created(5),
            terms={
                "product_cat": frozenset({CLOTHING, SHIRTS}),
                "pa_color": frozenset({GREEN}),
            },
        )
    )

    return store


@pytest.fixture
def catalog() -> InMemoryCatalogStore:
    """Sample in-memory catalog."""
    return build_catalog()


@pytest.fixture
def aggregates(catalog: InMemoryCatalogStore) -> CatalogAggregates:
    """Aggregates over the sample catalog."""
    return CatalogAggregates(catalog)


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    """Empty in-memory cache store."""
    return InMemoryCacheStore()


@pytest.fixture
def version_store() -> InMemoryVersionStore:
    """Fresh in-memory version store."""
    return InMemoryVersionStore()


@pytest.fixture
def cache(
    cache_store: InMemoryCacheStore,
    version_store: InMemoryVersionStore,
    aggregates: CatalogAggregates,
) -> VersionedCache:
    """Versioned cache over the in-memory stores."""
    return VersionedCache(cache_store, version_store, CacheConfig(), warmer=aggregates)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings for an all-in-memory application."""
    return Settings(
        catalog_backend="memory",
        cache_backend="memory",
        catalog_event_secret=EVENT_SECRET,
        storefront_url=STOREFRONT_URL,
    )


@pytest.fixture
def context(
    settings: Settings,
    catalog: InMemoryCatalogStore,
    cache_store: InMemoryCacheStore,
    version_store: InMemoryVersionStore,
    aggregates: CatalogAggregates,
) -> AppContext:
    """Application context over the sample catalog."""
    return AppContext(
        settings=settings,
        cache_config=cache_config_from(settings),
        catalog=catalog,
        cache_store=cache_store,
        version_store=version_store,
        aggregates=aggregates,
        verifier=EventSignatureVerifier(EVENT_SECRET),
    )


@pytest.fixture
def app(context: AppContext) -> FastAPI:
    """Application bound to the test context."""
    return create_app(context=context)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


def product_ids(response_or_payload) -> list[int]:
    """IDs of the products in a `/products` response or payload."""
    payload = response_or_payload if isinstance(response_or_payload, dict) else response_or_payload.json()
    return [product["id"] for product in payload["products"]]
