"""Cache inspection endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from fastfilter.api.dependencies import get_context
from fastfilter.api.schemas import CacheStatsResponse
from fastfilter.infrastructure.context import AppContext

router = APIRouter(prefix="/cache", tags=["Cache"])


@router.get(
    "/stats",
    response_model=CacheStatsResponse,
    summary="Get cache statistics",
)
async def get_cache_stats(
    context: Annotated[AppContext, Depends(get_context)],
) -> CacheStatsResponse:
    """Get version, entry count and configuration of the cache.

    Args:
        context: Application context.

    Returns:
        Cache statistics.
    """
    stats = await context.new_cache().get_stats()
    config = context.cache_config
    return CacheStatsResponse(
        **stats,
        caching_enabled=config.caching_enabled,
        invalidation_enabled=config.invalidation_enabled,
        warming_enabled=config.warming_enabled,
    )
