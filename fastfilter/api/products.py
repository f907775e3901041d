"""Product filter endpoints.

Provides:
- GET /filters — filter options (categories, attributes, price range)
- GET /products — filtered, sorted and paginated products

Both report whether they were served from the cache in `X-FF-Cache`.
"""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from fastfilter.api.dependencies import get_filter_service
from fastfilter.api.params import parse_query_params
from fastfilter.api.schemas import ErrorResponse, FilterOptionsResponse, ProductListResponse
from fastfilter.application.filter_service import CacheStatus, FilterService

logger = structlog.get_logger()

router = APIRouter(tags=["Products"])

CACHE_HEADER = "X-FF-Cache"
TOTAL_HEADER = "X-FF-Total"
TOTAL_PAGES_HEADER = "X-FF-Total-Pages"


def _json(payload: dict[str, Any], headers: dict[str, str]) -> Response:
    # Cached payloads are already in response shape; skip re-validation.
    return JSONResponse(content=payload, headers=headers)


@router.get(
    "/filters",
    response_model=FilterOptionsResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Get filter options",
    description="Categories, attributes and price range that products can be filtered by.",
)
async def get_filters(
    service: Annotated[FilterService, Depends(get_filter_service)],
) -> Response:
    """Get the available filter options.

    Args:
        service: Filter service.

    Returns:
        Filter options with the cache status header.
    """
    options, cache_status = await service.get_filters()
    return _json(options, {CACHE_HEADER: cache_status.value})


@router.get(
    "/products",
    response_model=ProductListResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Filter products",
    description=(
        "Products matching `categories[]`, `attributes[<taxonomy>][]` and "
        "`min_price`/`max_price`, sorted by `orderby`/`order` and paginated by "
        "`page`/`per_page`. Invalid values are dropped or replaced by defaults."
    ),
)
async def get_products(
    request: Request,
    service: Annotated[FilterService, Depends(get_filter_service)],
) -> Response:
    """Get one page of filtered products.

    Args:
        request: The incoming request.
        service: Filter service.

    Returns:
        Products and pagination with cache and total headers.
    """
    raw = parse_query_params(request.query_params.multi_items())
    payload, cache_status = await service.get_products(raw)

    pagination = payload["pagination"]
    if cache_status == CacheStatus.MISS:
        logger.info(
            "Products queried",
            total=pagination["total"],
            page=pagination["current_page"],
        )

    return _json(
        payload,
        {
            CACHE_HEADER: cache_status.value,
            TOTAL_HEADER: str(pagination["total"]),
            TOTAL_PAGES_HEADER: str(pagination["total_pages"]),
        },
    )
