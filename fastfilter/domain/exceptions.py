"""Domain exceptions.

Errors raised by the filter core. Read-path problems (bad input, cache
storage hiccups) are absorbed where they occur; only the errors below
ever cross a layer boundary.
"""

from typing import Any


class FastFilterError(Exception):
    """Base class for all fastfilter exceptions.

    All errors should inherit from this class to allow catching
    service-specific errors at the transport layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(FastFilterError):
    """Base class for catalog store errors."""

    pass


class CatalogUnavailableError(CatalogError):
    """Raised when the catalog store cannot answer a query."""

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize catalog unavailable error.

        Args:
            operation: Store operation that failed.
            reason: Underlying failure description.
        """
        super().__init__(
            f"Catalog store failed during '{operation}': {reason}",
            details={"operation": operation, "reason": reason},
        )


# ============================================================================
# Cache Errors
# ============================================================================


class CacheError(FastFilterError):
    """Base class for cache errors."""

    pass


class CacheStorageError(CacheError):
    """Raised by cache stores when the backing storage fails.

    The versioned cache converts these into misses; they never reach
    request handlers.
    """

    def __init__(self, operation: str, key: str, reason: str) -> None:
        """Initialize cache storage error.

        Args:
            operation: Store operation (get, set, delete, count).
            key: Storage key involved.
            reason: Underlying failure description.
        """
        super().__init__(
            f"Cache {operation} failed for '{key}': {reason}",
            details={"operation": operation, "key": key, "reason": reason},
        )


class CacheVersionError(CacheError):
    """Raised when the cache version cannot be read or bumped.

    A failed bump would leave stale entries visible, so this one is
    always surfaced.
    """

    def __init__(self, namespace: str, reason: str) -> None:
        """Initialize cache version error.

        Args:
            namespace: Cache namespace whose counter failed.
            reason: Underlying failure description.
        """
        super().__init__(
            f"Cache version for '{namespace}' could not be persisted: {reason}",
            details={"namespace": namespace, "reason": reason},
        )
