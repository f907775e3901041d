"""Catalog store interface.

A catalog store answers structured `CatalogQuery` objects and the few
aggregate lookups the filter options need. Stores own the projection of
their products into `ProductSummary`.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from fastfilter.domain.query import CatalogQuery
from fastfilter.domain.results import (
    CatalogPage,
    PriceRange,
    ProductImage,
    ProductPrice,
    ProductRating,
    ProductSummary,
)


@dataclass(frozen=True)
class TermCount:
    """A taxonomy term with the number of published products using it."""

    id: int
    name: str
    slug: str
    parent_id: int | None
    count: int


@dataclass(frozen=True)
class AttributeInfo:
    """A registered attribute taxonomy."""

    id: int
    name: str
    label: str
    type: str

    @property
    def taxonomy(self) -> str:
        """Taxonomy name of this attribute's terms."""
        return f"pa_{self.name}"


class CatalogStore(Protocol):
    """Queryable product catalog."""

    async def fetch_page(self, query: CatalogQuery) -> CatalogPage:
        """Return the requested page and the total match count.

        Both must come from the same facet and price predicate.
        """
        ...

    async def term_counts(self, taxonomy: str) -> list[TermCount]:
        """List every term of a taxonomy, ordered by name."""
        ...

    async def attribute_taxonomies(self) -> list[AttributeInfo]:
        """List registered attributes, ordered by label."""
        ...

    async def price_range(self) -> PriceRange:
        """Lowest and highest active price of published products."""
        ...

    async def close(self) -> None:
        """Release store resources."""
        ...


def _decimal_str(value: Decimal | float | None) -> str | None:
    if value is None:
        return None
    return f"{Decimal(str(value)):.2f}"


class ProductFormatter:
    """Projects stored products into `ProductSummary`.

    Works with any object exposing the product columns (ORM rows and
    in-memory records alike).
    """

    def __init__(self, storefront_url: str, currency_symbol: str = "$") -> None:
        """Initialize formatter.

        Args:
            storefront_url: Base URL product permalinks hang off.
            currency_symbol: Symbol used in display prices.
        """
        self.storefront_url = storefront_url.rstrip("/")
        self.currency_symbol = currency_symbol

    def permalink(self, slug: str) -> str:
        """Build the public URL of a product."""
        return f"{self.storefront_url}/product/{slug}/"

    def summarize(self, product: Any) -> ProductSummary:
        """Project a product.

        Args:
            product: Object with product columns.

        Returns:
            Product summary.
        """
        regular = _decimal_str(product.regular_price) or "0.00"
        sale = _decimal_str(product.sale_price)
        on_sale = sale is not None and Decimal(sale) < Decimal(regular)
        active = _decimal_str(product.price) or regular

        image = None
        if product.image_src:
            image = ProductImage(
                src=product.image_src,
                srcset=product.image_srcset,
                alt=product.image_alt or "",
            )

        return ProductSummary(
            id=product.id,
            name=product.name,
            slug=product.slug,
            permalink=self.permalink(product.slug),
            price=ProductPrice(
                regular=regular,
                sale=sale if on_sale else None,
                display=f"{self.currency_symbol}{active}",
            ),
            image=image,
            rating=ProductRating(
                average=float(product.average_rating or 0),
                count=int(product.rating_count or 0),
            ),
            on_sale=on_sale,
            in_stock=bool(product.in_stock),
        )
