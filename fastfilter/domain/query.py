"""Structured catalog query.

The query builder produces a `CatalogQuery`; catalog stores translate it
into their own query language. Nothing upstream of a store ever builds
raw query fragments.
"""

from dataclasses import dataclass
from enum import Enum

from fastfilter.domain.filters import SortOrder


class SortField(str, Enum):
    """Product fields a catalog store must be able to order by."""

    PRICE = "price"
    TOTAL_SALES = "total_sales"
    AVERAGE_RATING = "average_rating"
    CREATED_AT = "created_at"
    TITLE = "title"
    MENU_ORDER = "menu_order"
    ID = "id"


@dataclass(frozen=True)
class FacetGroup:
    """Terms of one taxonomy, matched with OR semantics.

    Attributes:
        taxonomy: Taxonomy name (e.g. "product_cat", "pa_color").
        term_ids: Term IDs; a product matches if it has any of them.
    """

    taxonomy: str
    term_ids: tuple[int, ...]


@dataclass(frozen=True)
class PriceBounds:
    """Inclusive bounds on the active product price.

    Inverted bounds are kept as given and match nothing.
    """

    min_price: float | None = None
    max_price: float | None = None

    def contains(self, price: float | None) -> bool:
        """Check whether a price satisfies both bounds."""
        if price is None:
            return False
        if self.min_price is not None and price < self.min_price:
            return False
        if self.max_price is not None and price > self.max_price:
            return False
        return True


@dataclass(frozen=True)
class SortKey:
    """One ordering term."""

    field: SortField
    direction: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class PageWindow:
    """Limit/offset window over the matching products."""

    limit: int
    offset: int = 0


@dataclass(frozen=True)
class CatalogQuery:
    """Product query handed to a catalog store.

    Attributes:
        facet_groups: Groups combined with AND semantics.
        price: Optional inclusive price bounds.
        sort: Ordering terms, most significant first.
        window: Page to return.
    """

    facet_groups: tuple[FacetGroup, ...]
    price: PriceBounds | None
    sort: tuple[SortKey, ...]
    window: PageWindow
