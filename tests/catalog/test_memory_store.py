"""Tests for the in-memory catalog store."""

from decimal import Decimal

import pytest

from conftest import RED, SHIRTS
from fastfilter.catalog.memory import CatalogProduct, InMemoryCatalogStore
from fastfilter.domain.query import CatalogQuery, FacetGroup, PageWindow, SortField, SortKey


def query(*groups: FacetGroup, limit: int = 12, offset: int = 0) -> CatalogQuery:
    """Catalog query sorted by ID."""
    return CatalogQuery(
        facet_groups=groups,
        price=None,
        sort=(SortKey(SortField.ID),),
        window=PageWindow(limit=limit, offset=offset),
    )


class TestCatalogProduct:
    """Tests for CatalogProduct."""

    def test_active_price(self) -> None:
        """The sale price is active only when lower than the regular price."""
        product = CatalogProduct(id=1, name="A", slug="a", regular_price=Decimal("10"))
        assert product.price == Decimal("10")
        product.sale_price = Decimal("8")
        assert product.price == Decimal("8")
        product.sale_price = Decimal("12")
        assert product.price == Decimal("10")


class TestInMemoryCatalogStore:
    """Tests for InMemoryCatalogStore."""

    @pytest.mark.asyncio
    async def test_fetch_page(self, catalog: InMemoryCatalogStore) -> None:
        """Pages are windows over the matching products."""
        page = await catalog.fetch_page(query(limit=2, offset=1))
        assert [p.id for p in page.products] == [102, 103]
        assert page.total == 4

    @pytest.mark.asyncio
    async def test_facet_group(self, catalog: InMemoryCatalogStore) -> None:
        """A group matches products with any of its terms."""
        page = await catalog.fetch_page(query(FacetGroup("pa_color", (RED,))))
        assert [p.id for p in page.products] == [101, 103, 104]

    @pytest.mark.asyncio
    async def test_group_taxonomy_must_match(self, catalog: InMemoryCatalogStore) -> None:
        """Term IDs only match within their taxonomy."""
        page = await catalog.fetch_page(query(FacetGroup("pa_size", (SHIRTS,))))
        assert page.total == 0

    @pytest.mark.asyncio
    async def test_summaries(self, catalog: InMemoryCatalogStore) -> None:
        """Products are returned as formatted summaries."""
        page = await catalog.fetch_page(query())
        beta = next(p for p in page.products if p.id == 102)
        assert beta.permalink == "https://shop.test/product/beta-shirt/"
        assert beta.on_sale
        assert beta.price.regular == "30.00"
        assert beta.price.sale == "25.00"
        assert beta.price.display == "$25.00"
        assert beta.image is None

        alpha = next(p for p in page.products if p.id == 101)
        assert not alpha.on_sale
        assert alpha.price.sale is None
        assert alpha.image.src == "https://img.test/alpha.jpg"
        assert alpha.rating.average == 4.5

    @pytest.mark.asyncio
    async def test_term_counts(self, catalog: InMemoryCatalogStore) -> None:
        """Every term of a taxonomy is listed, used or not."""
        counts = await catalog.term_counts("pa_color")
        assert [(t.name, t.count) for t in counts] == [("Blue", 2), ("Green", 0), ("Red", 3)]

    @pytest.mark.asyncio
    async def test_remove_product(self, catalog: InMemoryCatalogStore) -> None:
        """Removed products no longer match."""
        assert catalog.remove_product(101)
        assert not catalog.remove_product(101)
        assert catalog.get_product(101) is None
        assert (await catalog.fetch_page(query())).total == 3
