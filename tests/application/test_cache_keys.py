"""Tests for product query cache keys."""

import hashlib
import json

from fastfilter.application.cache_keys import PRODUCTS_KEY_PREFIX, canonical_params, derive_key
from fastfilter.application.sanitizer import sanitize
from fastfilter.domain import FilterParams, OrderBy, SortOrder

KNOWN = frozenset({"pa_color", "pa_size"})


class TestDeriveKey:
    """Tests for derive_key."""

    def test_prefix_and_digest(self) -> None:
        """Keys are the prefix followed by an MD5 hex digest."""
        key = derive_key(FilterParams())
        assert key.startswith(PRODUCTS_KEY_PREFIX)
        assert len(key) == len(PRODUCTS_KEY_PREFIX) + 32

    def test_digest_of_canonical_json(self) -> None:
        """The digest covers compact, key-sorted canonical JSON."""
        params = FilterParams(categories={2, 1}, min_price=5.0)
        payload = json.dumps(canonical_params(params), sort_keys=True, separators=(",", ":"))
        assert derive_key(params) == PRODUCTS_KEY_PREFIX + hashlib.md5(payload.encode()).hexdigest()

    def test_order_independent(self) -> None:
        """Permuted selections give the same key."""
        a = sanitize(
            {"categories": ["3", "1"], "attributes": {"pa_size": ["2", "1"], "pa_color": ["5"]}},
            KNOWN,
        )
        b = sanitize(
            {"attributes": {"pa_color": ["5"], "pa_size": ["1", "2"]}, "categories": "1,3"},
            KNOWN,
        )
        assert derive_key(a) == derive_key(b)

    def test_empty_group_same_as_absent(self) -> None:
        """An attribute group with no valid terms does not change the key."""
        with_empty = sanitize({"categories": ["1"], "attributes": {"pa_color": ["abc"]}}, KNOWN)
        without = sanitize({"categories": ["1"]}, KNOWN)
        assert derive_key(with_empty) == derive_key(without)

    def test_unknown_taxonomy_same_as_absent(self) -> None:
        """Attribute groups of unknown taxonomies do not change the key."""
        with_unknown = sanitize({"attributes": {"pa_weight": ["1"]}}, KNOWN)
        assert derive_key(with_unknown) == derive_key(FilterParams())

    def test_equivalent_raw_values(self) -> None:
        """Values that sanitize identically give the same key."""
        a = sanitize({"page": "02", "min_price": "10", "order": "desc"}, KNOWN)
        b = sanitize({"page": 2, "min_price": "10.0", "order": "DESC"}, KNOWN)
        assert derive_key(a) == derive_key(b)

    def test_distinct_params_distinct_keys(self) -> None:
        """Each parameter contributes to the key."""
        base = FilterParams()
        variants = [
            FilterParams(categories={1}),
            FilterParams(attributes={"pa_color": {1}}),
            FilterParams(min_price=0.0),
            FilterParams(max_price=10.0),
            FilterParams(page=2),
            FilterParams(per_page=24),
            FilterParams(orderby=OrderBy.PRICE),
            FilterParams(order=SortOrder.DESC),
        ]
        keys = {derive_key(base)} | {derive_key(v) for v in variants}
        assert len(keys) == len(variants) + 1

    def test_zero_min_price_differs_from_absent(self) -> None:
        """A zero price bound is a real bound."""
        assert derive_key(FilterParams(min_price=0.0)) != derive_key(FilterParams())


class TestCanonicalParams:
    """Tests for canonical_params."""

    def test_sorted_lists(self) -> None:
        """Categories and terms are sorted."""
        canonical = canonical_params(
            FilterParams(categories={9, 3}, attributes={"pa_size": {5, 2}, "pa_color": {7}})
        )
        assert canonical["categories"] == [3, 9]
        assert canonical["attributes"] == {"pa_color": [7], "pa_size": [2, 5]}

    def test_unset_prices_omitted(self) -> None:
        """Absent price bounds are left out."""
        canonical = canonical_params(FilterParams())
        assert "min_price" not in canonical
        assert "max_price" not in canonical
