"""Read models returned by the filter core.

All of these serialize to the JSON shapes served by the API and stored
in the cache.
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class ProductPrice:
    """Price block of a product summary.

    Attributes:
        regular: Regular price as a decimal string.
        sale: Sale price as a decimal string, or None.
        display: Formatted active price.
    """

    regular: str
    sale: str | None
    display: str


@dataclass(frozen=True)
class ProductImage:
    """Thumbnail image of a product."""

    src: str
    srcset: str | None = None
    alt: str = ""


@dataclass(frozen=True)
class ProductRating:
    """Review aggregate of a product."""

    average: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class ProductSummary:
    """Minimal projection of a catalog product.

    Attributes:
        id: Product ID.
        name: Product name.
        slug: URL slug.
        permalink: Absolute product URL.
        price: Price block.
        image: Thumbnail, if the product has one.
        rating: Review aggregate.
        on_sale: Whether a sale price is active.
        in_stock: Stock availability.
    """

    id: int
    name: str
    slug: str
    permalink: str
    price: ProductPrice
    image: ProductImage | None
    rating: ProductRating
    on_sale: bool
    in_stock: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return asdict(self)


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata of a result page."""

    total: int
    current_page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages (0 when nothing matched)."""
        return math.ceil(self.total / self.per_page) if self.total else 0

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "total": self.total,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
            "per_page": self.per_page,
        }


@dataclass(frozen=True)
class CatalogPage:
    """Raw answer of a catalog store: one page plus the total match count."""

    products: list[ProductSummary]
    total: int


@dataclass(frozen=True)
class QueryResult:
    """Products of one page with pagination metadata."""

    products: list[ProductSummary]
    pagination: Pagination

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "products": [product.to_dict() for product in self.products],
            "pagination": self.pagination.to_dict(),
        }


# ============================================================================
# Filter Options
# ============================================================================


@dataclass(frozen=True)
class TermOption:
    """A selectable taxonomy term with its product count."""

    id: int
    name: str
    slug: str
    count: int
    children: list["TermOption"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting `children` when empty."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "count": self.count,
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class AttributeOption:
    """An attribute taxonomy with its selectable terms."""

    id: int
    name: str
    slug: str
    taxonomy: str
    type: str
    terms: list[TermOption]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "taxonomy": self.taxonomy,
            "type": self.type,
            "terms": [term.to_dict() for term in self.terms],
        }


@dataclass(frozen=True)
class PriceRange:
    """Lowest and highest active price across published products."""

    min: float = 0.0
    max: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {"min": self.min, "max": self.max}
