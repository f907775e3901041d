"""PostgreSQL catalog store.

Translates `CatalogQuery` objects into SQLAlchemy statements over the
catalog tables.
"""

from typing import Any

import structlog
from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fastfilter.catalog.models import PUBLISHED, AttributeTaxonomy, Product, Term, product_terms
from fastfilter.catalog.store import AttributeInfo, ProductFormatter, TermCount
from fastfilter.domain.exceptions import CatalogUnavailableError
from fastfilter.domain.filters import SortOrder
from fastfilter.domain.query import CatalogQuery, FacetGroup, PriceBounds, SortField, SortKey
from fastfilter.domain.results import CatalogPage, PriceRange
from fastfilter.infrastructure.database import session_scope

logger = structlog.get_logger()

SORT_COLUMNS: dict[SortField, Any] = {
    SortField.PRICE: Product.price,
    SortField.TOTAL_SALES: Product.total_sales,
    SortField.AVERAGE_RATING: Product.average_rating,
    SortField.CREATED_AT: Product.created_at,
    SortField.TITLE: Product.name,
    SortField.MENU_ORDER: Product.menu_order,
    SortField.ID: Product.id,
}


def facet_condition(group: FacetGroup) -> ColumnElement[bool]:
    """Products carrying any term of the group."""
    tagged = (
        select(product_terms.c.product_id)
        .join(Term, Term.id == product_terms.c.term_id)
        .where(
            Term.taxonomy == group.taxonomy,
            product_terms.c.term_id.in_(group.term_ids),
        )
    )
    return Product.id.in_(tagged)


def price_conditions(bounds: PriceBounds) -> list[ColumnElement[bool]]:
    """Inclusive bounds on the active price."""
    conditions = []
    if bounds.min_price is not None:
        conditions.append(Product.price >= bounds.min_price)
    if bounds.max_price is not None:
        conditions.append(Product.price <= bounds.max_price)
    return conditions


def build_conditions(query: CatalogQuery) -> list[ColumnElement[bool]]:
    """Filter predicate shared by the page and the count statements.

    Args:
        query: Catalog query.

    Returns:
        Conditions to combine with AND.
    """
    conditions: list[ColumnElement[bool]] = [Product.status == PUBLISHED]

    for group in query.facet_groups:
        conditions.append(facet_condition(group))

    if query.price is not None:
        conditions.extend(price_conditions(query.price))

    return conditions


def order_clauses(sort: tuple[SortKey, ...]) -> list[Any]:
    """SQL ordering for sort keys."""
    clauses = []
    for key in sort:
        column = SORT_COLUMNS[key.field]
        clauses.append(column.desc() if key.direction == SortOrder.DESC else column.asc())
    return clauses


def page_statement(query: CatalogQuery) -> Select:
    """Statement selecting one page of matching products."""
    return (
        select(Product)
        .where(*build_conditions(query))
        .order_by(*order_clauses(query.sort))
        .limit(query.window.limit)
        .offset(query.window.offset)
    )


def count_statement(query: CatalogQuery) -> Select:
    """Statement counting every matching product, ignoring the window."""
    return select(func.count(Product.id)).where(*build_conditions(query))


class SqlCatalogStore:
    """Catalog store backed by the PostgreSQL catalog tables.

    Example usage:
        store = SqlCatalogStore(session_factory, formatter)
        page = await store.fetch_page(query)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        formatter: ProductFormatter,
    ) -> None:
        """Initialize store.

        Args:
            session_factory: Async session factory.
            formatter: Product projection.
        """
        self._session_factory = session_factory
        self.formatter = formatter

    async def fetch_page(self, query: CatalogQuery) -> CatalogPage:
        try:
            async with session_scope(self._session_factory) as session:
                total = (await session.execute(count_statement(query))).scalar_one()
                if total == 0 or query.window.offset >= total:
                    products = []
                else:
                    result = await session.execute(page_statement(query))
                    products = [self.formatter.summarize(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Catalog query failed", error=str(e))
            raise CatalogUnavailableError("fetch_page", str(e)) from e

        return CatalogPage(products=products, total=total)

    async def term_counts(self, taxonomy: str) -> list[TermCount]:
        published = (
            select(product_terms.c.term_id, func.count().label("product_count"))
            .join(Product, Product.id == product_terms.c.product_id)
            .where(Product.status == PUBLISHED)
            .group_by(product_terms.c.term_id)
            .subquery()
        )
        query = (
            select(
                Term.id,
                Term.name,
                Term.slug,
                Term.parent_id,
                func.coalesce(published.c.product_count, 0).label("product_count"),
            )
            .outerjoin(published, published.c.term_id == Term.id)
            .where(Term.taxonomy == taxonomy)
            .order_by(Term.name, Term.id)
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(query)
                rows = result.all()
        except SQLAlchemyError as e:
            raise CatalogUnavailableError("term_counts", str(e)) from e

        return [
            TermCount(
                id=row.id,
                name=row.name,
                slug=row.slug,
                parent_id=row.parent_id,
                count=row.product_count,
            )
            for row in rows
        ]

    async def attribute_taxonomies(self) -> list[AttributeInfo]:
        query = select(AttributeTaxonomy).order_by(AttributeTaxonomy.label)
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(query)
                attributes = result.scalars().all()
        except SQLAlchemyError as e:
            raise CatalogUnavailableError("attribute_taxonomies", str(e)) from e

        return [
            AttributeInfo(id=a.id, name=a.name, label=a.label, type=a.type)
            for a in attributes
        ]

    async def price_range(self) -> PriceRange:
        query = select(func.min(Product.price), func.max(Product.price)).where(
            Product.status == PUBLISHED
        )
        try:
            async with session_scope(self._session_factory) as session:
                low, high = (await session.execute(query)).one()
        except SQLAlchemyError as e:
            raise CatalogUnavailableError("price_range", str(e)) from e

        return PriceRange(
            min=float(low) if low is not None else 0.0,
            max=float(high) if high is not None else 0.0,
        )

    async def close(self) -> None:
        # Sessions close per call; the engine is disposed by its owner.
        return None
