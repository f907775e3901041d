"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fastfilter.api.dependencies import get_context
from fastfilter.infrastructure.context import AppContext

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    context: Annotated[AppContext, Depends(get_context)],
) -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="fastfilter",
        version=context.settings.api_version,
    )


@router.get("/ready")
async def readiness_check(
    context: Annotated[AppContext, Depends(get_context)],
) -> JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status; 503 while the database is unreachable.
    """
    if await context.is_ready():
        return JSONResponse(content={"status": "ready"})
    return JSONResponse(status_code=503, content={"status": "unavailable"})
