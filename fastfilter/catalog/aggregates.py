"""Catalog aggregates behind the filter options.

Categories, attributes and the price range are expensive to compute and
change rarely. Each is cached under a fixed unversioned key that
`VersionedCache.flush()` deletes and `refresh()` recomputes.
"""

import structlog

from fastfilter.cache.versioned import VersionedCache
from fastfilter.catalog.store import CatalogStore, TermCount
from fastfilter.domain.filters import CATEGORY_TAXONOMY
from fastfilter.domain.results import AttributeOption, PriceRange, TermOption

logger = structlog.get_logger()


def _option(term: TermCount, children: list[TermOption] | None = None) -> TermOption:
    return TermOption(
        id=term.id,
        name=term.name,
        slug=term.slug,
        count=term.count,
        children=children or [],
    )


class CatalogAggregates:
    """Cached catalog-wide aggregates.

    Only terms used by at least one published product are listed.
    """

    def __init__(self, catalog: CatalogStore) -> None:
        """Initialize aggregates.

        Args:
            catalog: Catalog store to compute from.
        """
        self.catalog = catalog

    async def _compute_categories(self, hierarchical: bool) -> list[dict]:
        terms = [t for t in await self.catalog.term_counts(CATEGORY_TAXONOMY) if t.count > 0]

        if not hierarchical:
            return [_option(t).to_dict() for t in terms]

        children: dict[int, list[TermOption]] = {}
        for term in terms:
            if term.parent_id is not None:
                children.setdefault(term.parent_id, []).append(_option(term))

        return [
            _option(t, children.get(t.id)).to_dict()
            for t in terms
            if t.parent_id is None
        ]

    async def _compute_attributes(self) -> list[dict]:
        attributes = []
        for attribute in await self.catalog.attribute_taxonomies():
            terms = [
                _option(t)
                for t in await self.catalog.term_counts(attribute.taxonomy)
                if t.count > 0
            ]
            if not terms:
                continue

            attributes.append(
                AttributeOption(
                    id=attribute.id,
                    name=attribute.label,
                    slug=attribute.name,
                    taxonomy=attribute.taxonomy,
                    type=attribute.type,
                    terms=terms,
                ).to_dict()
            )
        return attributes

    async def _compute_price_range(self) -> dict:
        price_range: PriceRange = await self.catalog.price_range()
        return price_range.to_dict()

    async def get_categories(self, cache: VersionedCache, hierarchical: bool = True) -> list[dict]:
        """Get categories that have products.

        Args:
            cache: Cache to read through.
            hierarchical: Top-level categories with their children when
                True, every category in one flat list otherwise.

        Returns:
            Category option dicts ordered by name.
        """
        key = "categories_hier" if hierarchical else "categories_flat"
        cached = await cache.get(key, versioned=False)
        if cached is not None:
            return cached

        categories = await self._compute_categories(hierarchical)
        await cache.set(key, categories, versioned=False)
        return categories

    async def get_attributes(self, cache: VersionedCache) -> list[dict]:
        """Get attributes with their used terms.

        Args:
            cache: Cache to read through.

        Returns:
            Attribute option dicts.
        """
        cached = await cache.get("attributes", versioned=False)
        if cached is not None:
            return cached

        attributes = await self._compute_attributes()
        await cache.set("attributes", attributes, versioned=False)
        return attributes

    async def get_price_range(self, cache: VersionedCache) -> dict:
        """Get the `{min, max}` active price range.

        Args:
            cache: Cache to read through.

        Returns:
            Price range dict.
        """
        cached = await cache.get("price_range", versioned=False)
        if cached is not None:
            return cached

        price_range = await self._compute_price_range()
        await cache.set("price_range", price_range, versioned=False)
        return price_range

    async def get_known_taxonomies(self, cache: VersionedCache) -> frozenset[str]:
        """Attribute taxonomies a request may filter on."""
        return frozenset(a["taxonomy"] for a in await self.get_attributes(cache))

    async def refresh(self, cache: VersionedCache) -> None:
        """Recompute and store all four aggregates."""
        await cache.set("categories_hier", await self._compute_categories(True), versioned=False)
        await cache.set("categories_flat", await self._compute_categories(False), versioned=False)
        await cache.set("attributes", await self._compute_attributes(), versioned=False)
        await cache.set("price_range", await self._compute_price_range(), versioned=False)
        logger.debug("Catalog aggregates refreshed")
