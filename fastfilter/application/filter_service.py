"""Request orchestration.

Handles the two read paths of the storefront filter:
- Filter options (categories, attributes, price range)
- Product queries: sanitize -> derive key -> cache lookup -> on miss
  build and execute the catalog query, store the payload

Cache failures degrade to a MISS. Catalog failures propagate.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

import structlog

from fastfilter.application.cache_keys import FILTER_OPTIONS_KEY, derive_key
from fastfilter.application.query_builder import QueryBuilder
from fastfilter.application.sanitizer import sanitize
from fastfilter.cache.versioned import VersionedCache
from fastfilter.catalog.aggregates import CatalogAggregates
from fastfilter.catalog.store import CatalogStore

logger = structlog.get_logger()


class CacheStatus(str, Enum):
    """Whether a response was served from the cache."""

    HIT = "HIT"
    MISS = "MISS"


class FilterService:
    """Service answering filter option and product queries.

    Created per request together with its `VersionedCache`.
    """

    def __init__(
        self,
        cache: VersionedCache,
        catalog: CatalogStore,
        aggregates: CatalogAggregates | None = None,
    ) -> None:
        """Initialize filter service.

        Args:
            cache: Versioned cache of this request.
            catalog: Catalog store.
            aggregates: Cached catalog aggregates.
        """
        self.cache = cache
        self.catalog = catalog
        self.aggregates = aggregates or CatalogAggregates(catalog)
        self.query_builder = QueryBuilder(catalog)

    async def get_filters(self) -> tuple[dict[str, Any], CacheStatus]:
        """Get the filter options shown next to the product grid.

        Returns:
            Tuple of options payload and cache status.
        """
        cached = await self.cache.get(FILTER_OPTIONS_KEY)
        if cached is not None:
            return cached, CacheStatus.HIT

        options = {
            "categories": await self.aggregates.get_categories(self.cache, hierarchical=True),
            "attributes": await self.aggregates.get_attributes(self.cache),
            "price_range": await self.aggregates.get_price_range(self.cache),
        }
        await self.cache.set(FILTER_OPTIONS_KEY, options)
        return options, CacheStatus.MISS

    async def get_products(self, raw: Mapping[str, Any]) -> tuple[dict[str, Any], CacheStatus]:
        """Get one page of products matching the request parameters.

        Args:
            raw: Untrusted request parameters.

        Returns:
            Tuple of `{products, pagination}` payload and cache status.

        Raises:
            CatalogError: If the catalog store cannot answer.
        """
        known_taxonomies = await self.aggregates.get_known_taxonomies(self.cache)
        params = sanitize(raw, known_taxonomies)
        key = derive_key(params)

        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug("Product query served from cache", cache_key=key)
            return cached, CacheStatus.HIT

        result = await self.query_builder.run(params)
        payload = result.to_dict()
        await self.cache.set(key, payload)

        logger.debug(
            "Product query executed",
            cache_key=key,
            total=result.pagination.total,
            page=params.page,
        )
        return payload, CacheStatus.MISS
