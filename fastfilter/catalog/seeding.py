"""Database seeding from a generated catalog."""

from typing import Any

import structlog
from sqlalchemy import delete, text
from sqlalchemy.ext.asyncio import AsyncSession

from fastfilter.catalog.generator import CatalogSeed
from fastfilter.catalog.models import AttributeTaxonomy, Product, Term, product_terms

logger = structlog.get_logger()


def to_records(seed: CatalogSeed) -> tuple[list[Term], list[AttributeTaxonomy], list[Product]]:
    """Convert generated catalog content into ORM rows.

    Product term assignments are resolved into `Product.terms`; the
    stored `price` is the active price.

    Args:
        seed: Generated catalog.

    Returns:
        Terms, attribute taxonomies and products.
    """
    terms = {
        t.id: Term(id=t.id, taxonomy=t.taxonomy, name=t.name, slug=t.slug, parent_id=t.parent_id)
        for t in seed.terms
    }
    attributes = [
        AttributeTaxonomy(id=a.id, name=a.name, label=a.label, type=a.type)
        for a in seed.attributes
    ]

    products = []
    for p in seed.products:
        assigned = sorted(term_id for ids in p.terms.values() for term_id in ids)
        products.append(
            Product(
                id=p.id,
                name=p.name,
                slug=p.slug,
                status=p.status,
                menu_order=p.menu_order,
                regular_price=p.regular_price,
                sale_price=p.sale_price,
                price=p.price,
                total_sales=p.total_sales,
                average_rating=p.average_rating,
                rating_count=p.rating_count,
                in_stock=p.in_stock,
                image_src=p.image_src,
                image_srcset=p.image_srcset,
                image_alt=p.image_alt,
                created_at=p.created_at,
                updated_at=p.created_at,
                terms=[terms[term_id] for term_id in assigned],
            )
        )

    return list(terms.values()), attributes, products


class CatalogSeeder:
    """Writes a generated catalog into the catalog tables."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize seeder.

        Args:
            session: Database session; committed by the caller.
        """
        self.session = session

    async def clear(self) -> None:
        """Delete every catalog row."""
        await self.session.execute(delete(product_terms))
        await self.session.execute(delete(Product))
        await self.session.execute(delete(AttributeTaxonomy))
        await self.session.execute(delete(Term))

    async def seed(self, seed: CatalogSeed, clear_existing: bool = True) -> dict[str, Any]:
        """Seed the catalog tables.

        Args:
            seed: Generated catalog.
            clear_existing: Whether to delete existing rows first.

        Returns:
            Seeding result with counts.
        """
        if clear_existing:
            await self.clear()

        terms, attributes, products = to_records(seed)

        # Parents before children for the self-referencing foreign key
        self.session.add_all(sorted(terms, key=lambda t: (t.parent_id is not None, t.id)))
        await self.session.flush()
        self.session.add_all(attributes)
        self.session.add_all(products)
        await self.session.flush()

        # Explicit IDs were inserted; move the sequences past them
        for table in ("terms", "attribute_taxonomies", "products"):
            await self.session.execute(
                text(
                    f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                    f"COALESCE((SELECT MAX(id) FROM {table}), 1))"
                )
            )

        logger.info(
            "Catalog seeded",
            terms=len(terms),
            attributes=len(attributes),
            products=len(products),
        )

        return {
            "terms_created": len(terms),
            "attributes_created": len(attributes),
            "products_created": len(products),
            "cleared": clear_existing,
        }
