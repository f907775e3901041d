#!/usr/bin/env python3
"""Seed product catalog script.

Creates the catalog and cache tables and fills the catalog with the
deterministic demo catalog.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --seed 7 --per-category 20
    python scripts/seed_catalog.py --no-clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import fastfilter.cache.models  # noqa: F401  (registers cache tables)
from fastfilter.cache.stores import DatabaseVersionStore
from fastfilter.catalog.generator import CatalogGenerator, GeneratorConfig
from fastfilter.catalog.seeding import CatalogSeeder
from fastfilter.infrastructure.config import settings
from fastfilter.infrastructure.database import (
    Base,
    create_engine,
    create_session_factory,
    session_scope,
)


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the demo product catalog",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.demo_seed,
        help=f"Random seed (default: {settings.demo_seed})",
    )
    parser.add_argument(
        "--per-category",
        type=int,
        default=settings.demo_products_per_category,
        help="Products per leaf category",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing catalog rows before seeding",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("fastfilter Catalog Seeder")
    print("=" * 60)
    print(f"Seed: {args.seed}")
    print(f"Products per category: {args.per_category}")
    print(f"Clear existing: {not args.no_clear}")
    print()

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        print("Creating database tables...")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("Tables ready.")
        print()

        seed = CatalogGenerator(
            GeneratorConfig(seed=args.seed, products_per_category=args.per_category)
        ).generate()

        async with session_scope(session_factory) as session:
            result = await CatalogSeeder(session).seed(seed, clear_existing=not args.no_clear)

        # Cached results describe the previous catalog
        version = await DatabaseVersionStore(session_factory).increment(settings.cache_namespace)

        print(f"  ✓ Terms: {result['terms_created']}")
        print(f"  ✓ Attributes: {result['attributes_created']}")
        print(f"  ✓ Products: {result['products_created']}")
        print(f"  ✓ Cache version: {version}")
        print()
    finally:
        await engine.dispose()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
