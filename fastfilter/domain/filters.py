"""Filter parameter value objects.

`FilterParams` is the typed form of a product search request. It is
produced once per request by the sanitizer and never mutated afterwards.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

CATEGORY_TAXONOMY = "product_cat"

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 12
MIN_PER_PAGE = 1
MAX_PER_PAGE = 100


class OrderBy(str, Enum):
    """Supported sort fields."""

    DATE = "date"
    PRICE = "price"
    POPULARITY = "popularity"
    RATING = "rating"
    TITLE = "title"
    MENU_ORDER = "menu_order"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "ASC"
    DESC = "DESC"


def _freeze_attributes(
    attributes: Mapping[str, Iterable[int]],
) -> Mapping[str, frozenset[int]]:
    """Copy attribute groups into a read-only, name-ordered mapping.

    Groups without terms are dropped so that an empty group and an
    absent group are the same value.
    """
    groups = ((name, frozenset(terms)) for name, terms in sorted(attributes.items()))
    return MappingProxyType({name: terms for name, terms in groups if terms})


@dataclass(frozen=True)
class FilterParams:
    """Sanitized product filter request.

    Attributes:
        categories: Selected category term IDs (OR semantics).
        attributes: Attribute taxonomy name -> selected term IDs.
        min_price: Inclusive lower price bound.
        max_price: Inclusive upper price bound.
        page: 1-indexed page number.
        per_page: Page size, 1-100.
        orderby: Sort field.
        order: Sort direction (ignored by some sort fields).
    """

    categories: frozenset[int] = frozenset()
    attributes: Mapping[str, frozenset[int]] = field(default_factory=dict)
    min_price: float | None = None
    max_price: float | None = None
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    orderby: OrderBy = OrderBy.MENU_ORDER
    order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", frozenset(self.categories))
        object.__setattr__(self, "attributes", _freeze_attributes(self.attributes))

    def _identity(self) -> tuple:
        return (
            self.categories,
            tuple(self.attributes.items()),
            self.min_price,
            self.max_price,
            self.page,
            self.per_page,
            self.orderby,
            self.order,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterParams):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.per_page

    @property
    def has_price_filter(self) -> bool:
        """Whether any price bound is set."""
        return self.min_price is not None or self.max_price is not None
