"""Domain layer.

Value objects, read models and exceptions shared by every other layer.
"""

from fastfilter.domain.exceptions import (
    CacheError,
    CacheStorageError,
    CacheVersionError,
    CatalogError,
    CatalogUnavailableError,
    FastFilterError,
)
from fastfilter.domain.filters import (
    CATEGORY_TAXONOMY,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    FilterParams,
    OrderBy,
    SortOrder,
)
from fastfilter.domain.query import (
    CatalogQuery,
    FacetGroup,
    PageWindow,
    PriceBounds,
    SortField,
    SortKey,
)
from fastfilter.domain.results import (
    AttributeOption,
    CatalogPage,
    Pagination,
    PriceRange,
    ProductImage,
    ProductPrice,
    ProductRating,
    ProductSummary,
    QueryResult,
    TermOption,
)

__all__ = [
    # Exceptions
    "CacheError",
    "CacheStorageError",
    "CacheVersionError",
    "CatalogError",
    "CatalogUnavailableError",
    "FastFilterError",
    # Filters
    "CATEGORY_TAXONOMY",
    "DEFAULT_PER_PAGE",
    "MAX_PER_PAGE",
    "FilterParams",
    "OrderBy",
    "SortOrder",
    # Query
    "CatalogQuery",
    "FacetGroup",
    "PageWindow",
    "PriceBounds",
    "SortField",
    "SortKey",
    # Results
    "AttributeOption",
    "CatalogPage",
    "Pagination",
    "PriceRange",
    "ProductImage",
    "ProductPrice",
    "ProductRating",
    "ProductSummary",
    "QueryResult",
    "TermOption",
]
