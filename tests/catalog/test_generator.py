"""Tests for the demo catalog generator."""

import pytest

from fastfilter.catalog.generator import CATEGORY_TREE, CatalogGenerator, GeneratorConfig, slugify
from fastfilter.catalog.memory import InMemoryCatalogStore
from fastfilter.catalog.seeding import to_records
from fastfilter.catalog.store import ProductFormatter
from fastfilter.domain.filters import CATEGORY_TAXONOMY


class TestSlugify:
    """Tests for slugify."""

    def test_slugify(self) -> None:
        """Names become lower-case, hyphen-separated slugs."""
        assert slugify("Running Shoes") == "running-shoes"
        assert slugify("  X-Large!! ") == "x-large"


class TestCatalogGenerator:
    """Tests for CatalogGenerator."""

    @pytest.fixture
    def generator(self) -> CatalogGenerator:
        """Generator with a small catalog."""
        return CatalogGenerator(GeneratorConfig(seed=42, products_per_category=3))

    def test_product_count(self, generator: CatalogGenerator) -> None:
        """Each leaf category gets the configured number of products."""
        leaves = sum(len(children) for _, children in CATEGORY_TREE)
        assert len(generator.generate().products) == leaves * 3

    def test_deterministic_generation(self) -> None:
        """Same seed produces same products."""
        first = CatalogGenerator(GeneratorConfig(seed=7, products_per_category=2)).generate()
        second = CatalogGenerator(GeneratorConfig(seed=7, products_per_category=2)).generate()
        assert first.products == second.products
        assert first.terms == second.terms

    def test_different_seeds_differ(self) -> None:
        """Different seeds produce different products."""
        a = CatalogGenerator(GeneratorConfig(seed=1, products_per_category=2)).generate()
        b = CatalogGenerator(GeneratorConfig(seed=2, products_per_category=2)).generate()
        assert [p.name for p in a.products] != [p.name for p in b.products]

    def test_unique_ids_and_slugs(self, generator: CatalogGenerator) -> None:
        """Product IDs, slugs and term IDs are unique."""
        seed = generator.generate()
        assert len({p.id for p in seed.products}) == len(seed.products)
        assert len({p.slug for p in seed.products}) == len(seed.products)
        assert len({t.id for t in seed.terms}) == len(seed.terms)

    def test_products_reference_known_terms(self, generator: CatalogGenerator) -> None:
        """Products are assigned to generated terms of matching taxonomies."""
        seed = generator.generate()
        terms = {t.id: t for t in seed.terms}
        for product in seed.products:
            for taxonomy, ids in product.terms.items():
                assert all(terms[i].taxonomy == taxonomy for i in ids)

    def test_products_listed_under_parent(self, generator: CatalogGenerator) -> None:
        """Each product belongs to a leaf category and its parent."""
        seed = generator.generate()
        terms = {t.id: t for t in seed.terms}
        for product in seed.products:
            categories = [terms[i] for i in product.terms[CATEGORY_TAXONOMY]]
            assert len(categories) == 2
            child = next(t for t in categories if t.parent_id is not None)
            assert child.parent_id in product.terms[CATEGORY_TAXONOMY]

    def test_sale_prices_lower(self, generator: CatalogGenerator) -> None:
        """Sale prices always undercut the regular price."""
        for product in generator.generate().products:
            if product.sale_price is not None:
                assert product.sale_price < product.regular_price

    @pytest.mark.asyncio
    async def test_load_into_store(self, generator: CatalogGenerator) -> None:
        """A loaded seed exposes attributes and a price range."""
        store = generator.generate().load_into(InMemoryCatalogStore(ProductFormatter("https://shop.test")))

        attributes = await store.attribute_taxonomies()
        price_range = await store.price_range()

        assert [a.taxonomy for a in attributes] == ["pa_color", "pa_size"]
        assert 0 < price_range.min <= price_range.max


class TestToRecords:
    """Tests for converting a seed into ORM rows."""

    def test_records(self) -> None:
        """Rows mirror the seed with the active price stored."""
        seed = CatalogGenerator(GeneratorConfig(seed=3, products_per_category=2)).generate()

        terms, attributes, products = to_records(seed)

        assert len(terms) == len(seed.terms)
        assert [a.name for a in attributes] == ["color", "size"]
        for record, source in zip(products, seed.products):
            assert record.price == source.price
            assert {t.id for t in record.terms} == {i for ids in source.terms.values() for i in ids}
