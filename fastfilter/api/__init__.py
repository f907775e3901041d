"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from fastfilter.api.cache import router as cache_router
from fastfilter.api.events import router as events_router
from fastfilter.api.health import router as health_router
from fastfilter.api.products import router as products_router

__all__ = [
    "cache_router",
    "events_router",
    "health_router",
    "products_router",
]
