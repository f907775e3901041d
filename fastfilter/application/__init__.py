"""Application layer module.

Contains the request-facing use cases: parameter sanitization, cache
key derivation, query building, request orchestration and catalog
invalidation.
"""

from fastfilter.application.cache_keys import FILTER_OPTIONS_KEY, derive_key
from fastfilter.application.filter_service import CacheStatus, FilterService
from fastfilter.application.invalidation import (
    CatalogEvent,
    CatalogEventType,
    CatalogInvalidator,
    EventSignatureVerifier,
    InvalidationResult,
    InvalidationStatus,
)
from fastfilter.application.query_builder import QueryBuilder
from fastfilter.application.sanitizer import sanitize

__all__ = [
    "CacheStatus",
    "FilterService",
    "QueryBuilder",
    "sanitize",
    "derive_key",
    "FILTER_OPTIONS_KEY",
    # Invalidation
    "CatalogEvent",
    "CatalogEventType",
    "CatalogInvalidator",
    "EventSignatureVerifier",
    "InvalidationResult",
    "InvalidationStatus",
]
