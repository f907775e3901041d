"""Product Catalog.

Provides the catalog store interface, its PostgreSQL and in-memory
implementations, cached aggregates, the demo catalog generator and database seeding.
"""

from fastfilter.catalog.aggregates import CatalogAggregates
from fastfilter.catalog.generator import CatalogGenerator, CatalogSeed, GeneratorConfig
from fastfilter.catalog.memory import CatalogProduct, CatalogTerm, InMemoryCatalogStore
from fastfilter.catalog.models import AttributeTaxonomy, Product, Term
from fastfilter.catalog.repository import SqlCatalogStore
from fastfilter.catalog.seeding import CatalogSeeder, to_records
from fastfilter.catalog.store import AttributeInfo, CatalogStore, ProductFormatter, TermCount

__all__ = [
    # Store
    "AttributeInfo",
    "CatalogStore",
    "ProductFormatter",
    "TermCount",
    # Models
    "AttributeTaxonomy",
    "Product",
    "Term",
    # Implementations
    "InMemoryCatalogStore",
    "CatalogProduct",
    "CatalogTerm",
    "SqlCatalogStore",
    # Aggregates
    "CatalogAggregates",
    # Generator
    "CatalogGenerator",
    "CatalogSeed",
    "GeneratorConfig",
    # Seeding
    "CatalogSeeder",
    "to_records",
]
