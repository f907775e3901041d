"""Catalog change handling.

Catalog changes arrive as signed events:
- HMAC-SHA256 signature verification
- Any product, category or attribute change flushes the cache
- Optional warming of the catalog aggregates right after the flush
"""

import hashlib
import hmac
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import structlog

from fastfilter.cache.versioned import CacheConfig, VersionedCache
from fastfilter.domain.exceptions import CatalogError

logger = structlog.get_logger()


class CatalogEventType(str, Enum):
    """Types of catalog change events."""

    PRODUCT_CREATED = "product.created"
    PRODUCT_UPDATED = "product.updated"
    PRODUCT_DELETED = "product.deleted"
    CATEGORY_CREATED = "category.created"
    CATEGORY_UPDATED = "category.updated"
    CATEGORY_DELETED = "category.deleted"
    ATTRIBUTE_CREATED = "attribute.created"
    ATTRIBUTE_UPDATED = "attribute.updated"
    ATTRIBUTE_DELETED = "attribute.deleted"


class InvalidationStatus(str, Enum):
    """Outcome of handling a catalog event."""

    FLUSHED = "flushed"
    WARMED = "warmed"
    IGNORED = "ignored"


@dataclass
class CatalogEvent:
    """A catalog change event.

    Attributes:
        event_id: Unique event identifier.
        event_type: Type of change.
        timestamp: When the change happened.
        data: Event-specific data (product_id, term_id, ...).
    """

    event_id: str
    event_type: CatalogEventType
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class InvalidationResult:
    """Result of handling a catalog event."""

    success: bool
    event_id: str
    status: InvalidationStatus
    message: str
    version: int | None = None


class EventSignatureVerifier:
    """Verifies HMAC-SHA256 signatures on catalog event payloads."""

    def __init__(self, secret: str) -> None:
        """Initialize verifier.

        Args:
            secret: Shared HMAC secret.
        """
        self.secret = secret

    def sign(self, payload: bytes) -> str:
        """Compute the signature header value for a payload.

        Args:
            payload: Raw request body.

        Returns:
            Signature in `sha256=<hex>` format.
        """
        digest = hmac.new(self.secret.encode(), payload, hashlib.sha256).hexdigest()
        return f"sha256={digest}"

    def verify(self, payload: bytes, signature: str | None) -> bool:
        """Verify the signature of a catalog event payload.

        Args:
            payload: Raw request body.
            signature: Signature header value (format: sha256=<hex>).

        Returns:
            True if signature is valid.
        """
        if not signature:
            logger.warning("Missing catalog event signature")
            return False

        # Parse signature format: sha256=<hex_digest>
        scheme, _, received = signature.partition("=")
        if scheme != "sha256" or not received:
            logger.warning("Invalid signature format", signature_prefix=signature[:20])
            return False

        expected = self.sign(payload).partition("=")[2]

        # Constant-time comparison
        if not hmac.compare_digest(expected, received):
            logger.warning("Catalog event signature mismatch")
            return False

        return True


class CatalogInvalidator:
    """Turns catalog change events into cache flushes.

    Every supported event type invalidates everything: a single product
    change can move it in or out of any cached result page.
    """

    def __init__(
        self,
        cache_factory: Callable[[], VersionedCache],
        config: CacheConfig,
    ) -> None:
        """Initialize invalidator.

        Args:
            cache_factory: Creates a fresh versioned cache.
            config: Cache capabilities.
        """
        self.cache_factory = cache_factory
        self.config = config

    async def handle(self, event: CatalogEvent) -> InvalidationResult:
        """Handle a catalog change event.

        Args:
            event: The catalog event.

        Returns:
            Handling result.

        Raises:
            CacheVersionError: If the version bump could not be persisted.
        """
        if not self.config.invalidation_enabled:
            logger.info(
                "Cache invalidation disabled, event ignored",
                event_id=event.event_id,
                event_type=event.event_type.value,
            )
            return InvalidationResult(
                success=True,
                event_id=event.event_id,
                status=InvalidationStatus.IGNORED,
                message="Cache invalidation is disabled",
            )

        cache = self.cache_factory()
        version = await cache.flush()
        status = InvalidationStatus.FLUSHED

        if self.config.warming_enabled:
            try:
                await cache.warm()
            except CatalogError as e:
                # The flush stands; aggregates are recomputed on the next read.
                logger.warning(
                    "Cache warming failed after flush",
                    event_id=event.event_id,
                    version=version,
                    error=e.message,
                )
            else:
                status = InvalidationStatus.WARMED

        logger.info(
            "Catalog event handled",
            event_id=event.event_id,
            event_type=event.event_type.value,
            version=version,
            status=status.value,
        )

        return InvalidationResult(
            success=True,
            event_id=event.event_id,
            status=status,
            message=f"Cache invalidated, now at version {version}",
            version=version,
        )
