"""Query string parsing for product requests.

Storefront widgets send PHP-style bracket parameters:
    categories[]=12&categories[]=15
    attributes[pa_color][]=3&attributes[pa_size][]=8
Plain repeated keys (`categories=12&categories=15`) and comma-separated
lists (`categories=12,15`) are accepted as well. Parsing only groups
values; all validation happens in the sanitizer.
"""

import re
from collections.abc import Iterable
from typing import Any

_ATTRIBUTE_KEY = re.compile(r"^attributes\[([^\]]*)\](?:\[\d*\])?$")
_LIST_SUFFIX = re.compile(r"\[\d*\]$")


def parse_query_params(items: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Group raw query string pairs into sanitizer input.

    Args:
        items: Query string pairs in request order.

    Returns:
        Mapping of parameter name to a list of values, with
        `attributes` mapping taxonomy names to lists of values.
    """
    raw: dict[str, Any] = {}
    attributes: dict[str, list[str]] = {}

    for key, value in items:
        match = _ATTRIBUTE_KEY.match(key)
        if match:
            attributes.setdefault(match.group(1), []).append(value)
            continue

        name = _LIST_SUFFIX.sub("", key)
        raw.setdefault(name, []).append(value)

    if attributes:
        raw["attributes"] = attributes

    return raw
