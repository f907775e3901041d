"""Request parameter sanitization.

`sanitize()` is the single boundary where untyped request input becomes
`FilterParams`. It never raises: malformed values are dropped or fall
back to defaults, out-of-range values are clamped.
"""

import math
import re
from collections.abc import Collection, Iterable, Mapping
from typing import Any

from fastfilter.domain.filters import (
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    MIN_PER_PAGE,
    FilterParams,
    OrderBy,
    SortOrder,
)

_KEY_CHARS = re.compile(r"[^a-z0-9_\-]")


def sanitize_key(value: Any) -> str:
    """Lower-case a key and strip everything but `[a-z0-9_-]`."""
    return _KEY_CHARS.sub("", str(value).lower())


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value if isinstance(value, (int, float)) else str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _as_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        number = _as_float(value)
        return None if number is None else int(number)


def _flatten(value: Any) -> Iterable[Any]:
    """Yield scalar items of a list, a scalar, or a comma-separated string."""
    if value is None:
        return
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        yield from (part for part in value.split(",") if part.strip())
        return
    if isinstance(value, Mapping):
        for item in value.values():
            yield from _flatten(item)
        return
    if isinstance(value, Iterable):
        for item in value:
            yield from _flatten(item)
        return
    yield value


def sanitize_ids(value: Any) -> frozenset[int]:
    """Collect positive integer term IDs; anything else is dropped."""
    ids = (_as_int(item) for item in _flatten(value))
    return frozenset(i for i in ids if i is not None and i > 0)


def sanitize_attributes(
    value: Any,
    known_taxonomies: Collection[str],
) -> dict[str, frozenset[int]]:
    """Keep attribute groups of known taxonomies that still have terms."""
    if not isinstance(value, Mapping):
        return {}

    attributes: dict[str, frozenset[int]] = {}
    for raw_taxonomy, raw_terms in value.items():
        taxonomy = sanitize_key(raw_taxonomy)
        if taxonomy not in known_taxonomies:
            continue
        terms = sanitize_ids(raw_terms) | attributes.get(taxonomy, frozenset())
        if terms:
            attributes[taxonomy] = terms
    return attributes


def sanitize_price(value: Any) -> float | None:
    """Non-negative float, or None when absent or not a number."""
    number = _as_float(value)
    if number is None:
        return None
    return max(0.0, number)


def sanitize_page(value: Any) -> int:
    number = _as_int(value)
    return DEFAULT_PAGE if number is None else max(1, number)


def sanitize_per_page(value: Any) -> int:
    number = _as_int(value)
    if number is None:
        return DEFAULT_PER_PAGE
    return min(MAX_PER_PAGE, max(MIN_PER_PAGE, number))


def sanitize_orderby(value: Any) -> OrderBy:
    try:
        return OrderBy(value)
    except ValueError:
        return OrderBy.MENU_ORDER


def sanitize_order(value: Any) -> SortOrder:
    if isinstance(value, str) and value.strip().upper() == SortOrder.DESC.value:
        return SortOrder.DESC
    return SortOrder.ASC


def _scalar(value: Any) -> Any:
    """Last item of a repeated parameter."""
    if isinstance(value, (list, tuple)):
        return value[-1] if value else None
    return value


def sanitize(raw: Mapping[str, Any], known_taxonomies: Collection[str]) -> FilterParams:
    """Normalize untrusted request parameters.

    Args:
        raw: Parameters as parsed from the request.
        known_taxonomies: Attribute taxonomies that exist in the catalog.

    Returns:
        Sanitized filter parameters.
    """
    return FilterParams(
        categories=sanitize_ids(raw.get("categories")),
        attributes=sanitize_attributes(raw.get("attributes"), known_taxonomies),
        min_price=sanitize_price(_scalar(raw.get("min_price"))),
        max_price=sanitize_price(_scalar(raw.get("max_price"))),
        page=sanitize_page(_scalar(raw.get("page"))),
        per_page=sanitize_per_page(_scalar(raw.get("per_page"))),
        orderby=sanitize_orderby(_scalar(raw.get("orderby"))),
        order=sanitize_order(_scalar(raw.get("order"))),
    )
