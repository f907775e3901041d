"""Catalog event receiver.

Provides:
- POST /events/catalog — receive catalog change events
- HMAC signature verification
- Cache flush (and optional warm) on every supported event
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from fastfilter.api.dependencies import get_context
from fastfilter.api.schemas import CatalogEventPayload, CatalogEventResponse, ErrorResponse
from fastfilter.application.invalidation import CatalogEvent, CatalogEventType
from fastfilter.domain.exceptions import CacheVersionError
from fastfilter.infrastructure.context import AppContext

logger = structlog.get_logger()

router = APIRouter(prefix="/events", tags=["Events"])


@router.post(
    "/catalog",
    response_model=CatalogEventResponse,
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Receive catalog event",
    description="Invalidate the product cache after a catalog change. Requires an HMAC signature.",
)
async def receive_catalog_event(
    request: Request,
    payload: CatalogEventPayload,
    context: Annotated[AppContext, Depends(get_context)],
    x_catalog_signature: Annotated[str | None, Header()] = None,
) -> CatalogEventResponse:
    """Receive and handle a catalog change event.

    The request must carry `X-Catalog-Signature: sha256=<hex>`, the
    HMAC-SHA256 of the raw body with the shared event secret.

    Args:
        request: The incoming request.
        payload: Event payload.
        context: Application context.
        x_catalog_signature: HMAC signature header.

    Returns:
        CatalogEventResponse with the handling result.

    Raises:
        HTTPException: If the signature is invalid or the flush failed.
    """
    logger.info(
        "Received catalog event",
        event_id=payload.event_id,
        event_type=payload.event_type,
    )

    body = await request.body()
    if not context.verifier.verify(body, x_catalog_signature):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error_code": "INVALID_SIGNATURE",
                "message": "Catalog event signature verification failed",
                "details": {"event_id": payload.event_id},
            },
        )

    try:
        event_type = CatalogEventType(payload.event_type)
    except ValueError:
        logger.warning(
            "Unknown catalog event type",
            event_type=payload.event_type,
            event_id=payload.event_id,
        )
        return CatalogEventResponse(
            success=True,
            event_id=payload.event_id,
            status="ignored",
            message=f"Unknown event type: {payload.event_type}",
        )

    event = CatalogEvent(
        event_id=payload.event_id,
        event_type=event_type,
        timestamp=payload.timestamp,
        data=payload.data,
    )

    try:
        result = await context.new_invalidator().handle(event)
    except CacheVersionError as e:
        logger.error(
            "Cache flush failed",
            event_id=event.event_id,
            error=e.message,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error_code": "CACHE_FLUSH_FAILED",
                "message": "Cache version could not be persisted",
                "details": e.details,
            },
        ) from e

    return CatalogEventResponse(
        success=result.success,
        event_id=result.event_id,
        status=result.status.value,
        message=result.message,
    )
