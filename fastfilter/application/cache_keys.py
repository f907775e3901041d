"""Cache key derivation for product queries."""

import hashlib
import json
from typing import Any

from fastfilter.domain.filters import FilterParams

PRODUCTS_KEY_PREFIX = "products_"
FILTER_OPTIONS_KEY = "filter_options"


def canonical_params(params: FilterParams) -> dict[str, Any]:
    """Order-independent structure of the parameters.

    Category IDs and term IDs are sorted, attribute groups are keyed by
    taxonomy name and unset price bounds are left out.
    """
    canonical: dict[str, Any] = {
        "page": params.page,
        "per_page": params.per_page,
        "orderby": params.orderby.value,
        "order": params.order.value,
    }
    if params.categories:
        canonical["categories"] = sorted(params.categories)
    if params.attributes:
        canonical["attributes"] = {
            taxonomy: sorted(terms) for taxonomy, terms in params.attributes.items() if terms
        }
    if params.min_price is not None:
        canonical["min_price"] = params.min_price
    if params.max_price is not None:
        canonical["max_price"] = params.max_price
    return canonical


def derive_key(params: FilterParams) -> str:
    """Derive the cache key of a product query.

    Args:
        params: Sanitized filter parameters.

    Returns:
        `products_<md5 of canonical JSON>`.
    """
    payload = json.dumps(canonical_params(params), sort_keys=True, separators=(",", ":"))
    return PRODUCTS_KEY_PREFIX + hashlib.md5(payload.encode()).hexdigest()
