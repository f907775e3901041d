"""API schemas for fastfilter.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Product Schemas
# ============================================================================


class PriceSchema(BaseModel):
    """Price block of a product."""

    regular: str = Field(..., description="Regular price as decimal string")
    sale: str | None = Field(default=None, description="Sale price when on sale")
    display: str = Field(..., description="Formatted active price")


class ImageSchema(BaseModel):
    """Product thumbnail."""

    src: str
    srcset: str | None = None
    alt: str = ""


class RatingSchema(BaseModel):
    """Review aggregate."""

    average: float = Field(default=0.0, ge=0, le=5)
    count: int = Field(default=0, ge=0)


class ProductSchema(BaseModel):
    """Product summary as listed in the product grid."""

    id: int
    name: str
    slug: str
    permalink: str
    price: PriceSchema
    image: ImageSchema | None = None
    rating: RatingSchema
    on_sale: bool
    in_stock: bool


class PaginationSchema(BaseModel):
    """Pagination metadata."""

    total: int = Field(..., ge=0, description="Number of matching products")
    total_pages: int = Field(..., ge=0, description="Number of pages")
    current_page: int = Field(..., ge=1, description="Page number (1-based)")
    per_page: int = Field(..., ge=1, le=100, description="Products per page")


class ProductListResponse(BaseModel):
    """Response for a product query."""

    products: list[ProductSchema]
    pagination: PaginationSchema


# ============================================================================
# Filter Option Schemas
# ============================================================================


class TermOptionSchema(BaseModel):
    """Selectable taxonomy term."""

    id: int
    name: str
    slug: str
    count: int = Field(..., ge=0, description="Published products using the term")
    children: list["TermOptionSchema"] = Field(default_factory=list)


class AttributeOptionSchema(BaseModel):
    """Attribute taxonomy with its terms."""

    id: int
    name: str
    slug: str
    taxonomy: str = Field(..., description="Taxonomy name used in product queries")
    type: str
    terms: list[TermOptionSchema]


class PriceRangeSchema(BaseModel):
    """Active price range of the catalog."""

    min: float
    max: float


class FilterOptionsResponse(BaseModel):
    """Response for the filter options."""

    categories: list[TermOptionSchema]
    attributes: list[AttributeOptionSchema]
    price_range: PriceRangeSchema


# ============================================================================
# Cache Schemas
# ============================================================================


class CacheStatsResponse(BaseModel):
    """Cache statistics."""

    version: int = Field(..., ge=1, description="Current cache version")
    entry_count: int = Field(..., ge=0, description="Live entries of the current version")
    ttl_seconds: int = Field(..., description="Default entry lifetime")
    storage_kind: str = Field(..., description="Storage backend (memory, database)")
    caching_enabled: bool
    invalidation_enabled: bool
    warming_enabled: bool


# ============================================================================
# Catalog Event Schemas
# ============================================================================


class CatalogEventPayload(BaseModel):
    """Incoming catalog change event."""

    event_id: str = Field(..., description="Unique event identifier")
    event_type: str = Field(..., description="Event type (e.g., product.updated)")
    timestamp: datetime = Field(..., description="Event timestamp")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


class CatalogEventResponse(BaseModel):
    """Response to catalog event delivery."""

    success: bool = Field(..., description="Whether event was accepted")
    event_id: str = Field(..., description="Event ID")
    status: str = Field(..., description="Outcome (flushed, warmed, ignored)")
    message: str = Field(..., description="Status message")
