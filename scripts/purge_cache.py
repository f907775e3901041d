#!/usr/bin/env python3
"""Purge expired cache entries.

Entries of older cache versions become unreachable on flush but stay
in `cache_entries` until they expire. Run this periodically to delete
them.

Usage:
    python scripts/purge_cache.py
    python scripts/purge_cache.py --flush
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastfilter.cache.stores import DatabaseCacheStore, DatabaseVersionStore
from fastfilter.cache.versioned import VersionedCache
from fastfilter.infrastructure.config import settings
from fastfilter.infrastructure.context import cache_config_from
from fastfilter.infrastructure.database import create_engine, create_session_factory


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Delete expired cache entries",
    )
    parser.add_argument(
        "--flush",
        action="store_true",
        help="Bump the cache version first, invalidating every entry",
    )

    args = parser.parse_args()

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    try:
        cache = VersionedCache(
            DatabaseCacheStore(session_factory),
            DatabaseVersionStore(session_factory),
            config=cache_config_from(settings),
        )

        if args.flush:
            version = await cache.flush()
            print(f"Cache flushed, now at version {version}")

        purged = await cache.store.purge_expired()
        stats = await cache.get_stats()
        print(f"Purged {purged} expired entries")
        print(f"Version {stats['version']}: {stats['entry_count']} live entries")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
