"""In-memory catalog store.

Holds plain product records and evaluates `CatalogQuery` objects in
process. Used for development, demos and tests.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from fastfilter.catalog.models import PUBLISHED
from fastfilter.catalog.store import AttributeInfo, ProductFormatter, TermCount
from fastfilter.domain.filters import SortOrder
from fastfilter.domain.query import CatalogQuery, FacetGroup, SortField, SortKey
from fastfilter.domain.results import CatalogPage, PriceRange


@dataclass
class CatalogTerm:
    """A taxonomy term record."""

    id: int
    taxonomy: str
    name: str
    slug: str
    parent_id: int | None = None


@dataclass
class CatalogProduct:
    """A product record with its term assignments.

    Attributes:
        terms: Taxonomy name -> assigned term IDs.
    """

    id: int
    name: str
    slug: str
    regular_price: Decimal
    sale_price: Decimal | None = None
    status: str = PUBLISHED
    menu_order: int = 0
    total_sales: int = 0
    average_rating: Decimal = Decimal("0")
    rating_count: int = 0
    in_stock: bool = True
    image_src: str | None = None
    image_srcset: str | None = None
    image_alt: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    terms: dict[str, frozenset[int]] = field(default_factory=dict)

    @property
    def price(self) -> Decimal:
        """Active price: the sale price when it undercuts the regular one."""
        if self.sale_price is not None and self.sale_price < self.regular_price:
            return self.sale_price
        return self.regular_price


def _sort_value(product: CatalogProduct, sort_field: SortField) -> Any:
    if sort_field == SortField.TITLE:
        return product.name
    return getattr(product, sort_field.value)


class InMemoryCatalogStore:
    """Catalog store over in-process records.

    Example usage:
        store = InMemoryCatalogStore(ProductFormatter("https://shop.test"))
        store.add_term(CatalogTerm(id=1, taxonomy="product_cat", name="Shoes", slug="shoes"))
        store.add_product(CatalogProduct(id=10, name="Runner", slug="runner",
                                         regular_price=Decimal("59.00"),
                                         terms={"product_cat": frozenset({1})}))
    """

    def __init__(self, formatter: ProductFormatter) -> None:
        """Initialize empty store.

        Args:
            formatter: Product projection.
        """
        self.formatter = formatter
        self._terms: dict[int, CatalogTerm] = {}
        self._attributes: dict[str, AttributeInfo] = {}
        self._products: dict[int, CatalogProduct] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def add_term(self, term: CatalogTerm) -> CatalogTerm:
        self._terms[term.id] = term
        return term

    def add_attribute(self, attribute: AttributeInfo) -> AttributeInfo:
        self._attributes[attribute.taxonomy] = attribute
        return attribute

    def add_product(self, product: CatalogProduct) -> CatalogProduct:
        self._products[product.id] = product
        return product

    def remove_product(self, product_id: int) -> bool:
        return self._products.pop(product_id, None) is not None

    def get_product(self, product_id: int) -> CatalogProduct | None:
        return self._products.get(product_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _published(self) -> list[CatalogProduct]:
        return [p for p in self._products.values() if p.status == PUBLISHED]

    @staticmethod
    def _in_group(product: CatalogProduct, group: FacetGroup) -> bool:
        assigned = product.terms.get(group.taxonomy, frozenset())
        return not assigned.isdisjoint(group.term_ids)

    def _matches(self, product: CatalogProduct, query: CatalogQuery) -> bool:
        if not all(self._in_group(product, group) for group in query.facet_groups):
            return False
        if query.price is not None and not query.price.contains(float(product.price)):
            return False
        return True

    @staticmethod
    def _sorted(products: list[CatalogProduct], sort: tuple[SortKey, ...]) -> list[CatalogProduct]:
        ordered = list(products)
        # Stable sorts applied from the least significant key up.
        for key in reversed(sort):
            ordered.sort(
                key=lambda p: _sort_value(p, key.field),
                reverse=key.direction == SortOrder.DESC,
            )
        return ordered

    async def fetch_page(self, query: CatalogQuery) -> CatalogPage:
        matching = [p for p in self._published() if self._matches(p, query)]
        ordered = self._sorted(matching, query.sort)
        start = query.window.offset
        window = ordered[start:start + query.window.limit]
        return CatalogPage(
            products=[self.formatter.summarize(p) for p in window],
            total=len(matching),
        )

    async def term_counts(self, taxonomy: str) -> list[TermCount]:
        usage: Counter[int] = Counter()
        for product in self._published():
            usage.update(product.terms.get(taxonomy, frozenset()))

        terms = sorted(
            (t for t in self._terms.values() if t.taxonomy == taxonomy),
            key=lambda t: (t.name, t.id),
        )
        return [
            TermCount(
                id=t.id,
                name=t.name,
                slug=t.slug,
                parent_id=t.parent_id,
                count=usage[t.id],
            )
            for t in terms
        ]

    async def attribute_taxonomies(self) -> list[AttributeInfo]:
        return sorted(self._attributes.values(), key=lambda a: a.label)

    async def price_range(self) -> PriceRange:
        prices = [float(p.price) for p in self._published()]
        if not prices:
            return PriceRange()
        return PriceRange(min=min(prices), max=max(prices))

    async def close(self) -> None:
        return None
