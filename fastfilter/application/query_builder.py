"""Query builder.

Translates `FilterParams` into a `CatalogQuery` and runs it:
- One facet group per selected taxonomy, OR among its terms.
- AND between groups: category AND every selected attribute.
- Inclusive price bounds on the active price.
- Sorting mapped from the request's orderby/order, with the product ID
  as the last tie-breaker so pages never overlap.
"""

import structlog

from fastfilter.catalog.store import CatalogStore
from fastfilter.domain.filters import CATEGORY_TAXONOMY, FilterParams, OrderBy, SortOrder
from fastfilter.domain.query import (
    CatalogQuery,
    FacetGroup,
    PageWindow,
    PriceBounds,
    SortField,
    SortKey,
)
from fastfilter.domain.results import Pagination, QueryResult

logger = structlog.get_logger()


def build_facet_groups(params: FilterParams) -> tuple[FacetGroup, ...]:
    """Facet groups of the request; empty selections are omitted."""
    groups: list[FacetGroup] = []

    if params.categories:
        groups.append(FacetGroup(CATEGORY_TAXONOMY, tuple(sorted(params.categories))))

    for taxonomy, terms in params.attributes.items():
        if terms:
            groups.append(FacetGroup(taxonomy, tuple(sorted(terms))))

    return tuple(groups)


def build_price_bounds(params: FilterParams) -> PriceBounds | None:
    """Price bounds as given; inverted bounds are not corrected."""
    if not params.has_price_filter:
        return None
    return PriceBounds(min_price=params.min_price, max_price=params.max_price)


def build_sort(orderby: OrderBy, order: SortOrder) -> tuple[SortKey, ...]:
    """Map a request sort onto catalog sort keys.

    `popularity` and `rating` always sort descending and `menu_order`
    always ascending, whatever `order` says.
    """
    match orderby:
        case OrderBy.PRICE:
            keys = [SortKey(SortField.PRICE, order)]
        case OrderBy.POPULARITY:
            keys = [SortKey(SortField.TOTAL_SALES, SortOrder.DESC)]
        case OrderBy.RATING:
            keys = [SortKey(SortField.AVERAGE_RATING, SortOrder.DESC)]
        case OrderBy.DATE:
            keys = [SortKey(SortField.CREATED_AT, order)]
        case OrderBy.TITLE:
            keys = [SortKey(SortField.TITLE, order)]
        case _:
            keys = [
                SortKey(SortField.MENU_ORDER, SortOrder.ASC),
                SortKey(SortField.TITLE, SortOrder.ASC),
            ]

    keys.append(SortKey(SortField.ID, SortOrder.ASC))
    return tuple(keys)


class QueryBuilder:
    """Builds and executes catalog queries.

    Example usage:
        builder = QueryBuilder(catalog)
        result = await builder.run(params)
    """

    def __init__(self, catalog: CatalogStore) -> None:
        """Initialize builder.

        Args:
            catalog: Catalog store to query.
        """
        self.catalog = catalog

    def build(self, params: FilterParams) -> CatalogQuery:
        """Build the catalog query for filter parameters.

        Args:
            params: Sanitized filter parameters.

        Returns:
            Structured catalog query.
        """
        return CatalogQuery(
            facet_groups=build_facet_groups(params),
            price=build_price_bounds(params),
            sort=build_sort(params.orderby, params.order),
            window=PageWindow(limit=params.per_page, offset=params.offset),
        )

    async def execute(self, query: CatalogQuery) -> QueryResult:
        """Execute a catalog query.

        Catalog errors propagate unchanged.

        Args:
            query: Catalog query.

        Returns:
            Products of the page with pagination metadata.
        """
        page = await self.catalog.fetch_page(query)
        per_page = query.window.limit

        logger.debug(
            "Catalog query executed",
            facet_groups=len(query.facet_groups),
            has_price_filter=query.price is not None,
            total=page.total,
            returned=len(page.products),
        )

        return QueryResult(
            products=page.products,
            pagination=Pagination(
                total=page.total,
                current_page=query.window.offset // per_page + 1,
                per_page=per_page,
            ),
        )

    async def run(self, params: FilterParams) -> QueryResult:
        """Build and execute in one step."""
        return await self.execute(self.build(params))
