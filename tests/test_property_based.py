"""Property-based tests using Hypothesis.

Tests invariants of the filter engine and the favorites store: the
six-predicate conjunction, order preservation, idempotence and favorites
uniqueness. These discover edge cases that example-based tests miss.
"""

import asyncio
from datetime import UTC, datetime

from hypothesis import given
from hypothesis import strategies as st

from propertyvue.db.kv import MemoryKeyValueStore
from propertyvue.exceptions import AlreadyExistsError
from propertyvue.filters.criteria import apply_filters, matches
from propertyvue.models import FilterSpec, Property, PropertyType
from propertyvue.stores.favorites import FavoritesStore, decode_favorites

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

prices = st.integers(min_value=0, max_value=3_000_000)
words = st.sampled_from(["park", "loft", "river", "view", "garden", "Park", "LOFT", "quiet"])
texts = st.lists(words, max_size=4).map(" ".join)

properties = st.fixed_dictionaries(
    {
        "id": st.uuids().map(str),
        "title": texts,
        "address": texts,
        "city": texts,
        "price": prices,
        "property_type": st.sampled_from(PropertyType),
        "bedrooms": st.integers(min_value=0, max_value=6),
        "bathrooms": st.sampled_from([0, 1, 1.5, 2, 2.5, 3]),
        "square_feet": st.integers(min_value=0, max_value=5000),
        "description": texts,
        "listed_date": st.just(datetime(2024, 1, 1, tzinfo=UTC)),
    }
).map(Property.model_validate)

catalogs = st.lists(properties, max_size=12, unique_by=lambda p: p.id)

filter_specs = st.fixed_dictionaries(
    {
        "price_min": prices,
        "price_max": st.none() | prices,
        "property_types": st.frozensets(st.sampled_from(PropertyType)),
        "bedrooms_min": st.integers(min_value=0, max_value=6),
        "bathrooms_min": st.sampled_from([0, 1, 1.5, 2, 3]),
        "square_feet_min": st.integers(min_value=0, max_value=5000),
        "keywords": st.sampled_from(["", "  ", "park", "Loft", "loft ", "river view", "nothing"]),
    }
).map(FilterSpec.model_validate)


def _reference_match(prop: Property, spec: FilterSpec) -> bool:
    """Straight transcription of the six filter predicates."""
    keyword = spec.keywords.lower() if spec.keywords.strip() else ""
    upper = spec.price_max if spec.price_max is not None else float("inf")
    return all(
        (
            spec.price_min <= prop.price <= upper,
            not spec.property_types or prop.property_type in spec.property_types,
            spec.bedrooms_min == 0 or prop.bedrooms >= spec.bedrooms_min,
            spec.bathrooms_min == 0 or prop.bathrooms >= spec.bathrooms_min,
            spec.square_feet_min == 0 or prop.square_feet >= spec.square_feet_min,
            not keyword
            or any(
                keyword in field.lower()
                for field in (prop.title, prop.address, prop.city, prop.description)
            ),
        )
    )


# ---------------------------------------------------------------------------
# apply_filters
# ---------------------------------------------------------------------------


class TestApplyFiltersProperties:
    @given(properties, filter_specs)
    def test_single_property_kept_iff_all_predicates_hold(
        self, prop: Property, spec: FilterSpec
    ) -> None:
        assert (apply_filters([prop], spec) == [prop]) == _reference_match(prop, spec)
        assert matches(prop, spec) == _reference_match(prop, spec)

    @given(catalogs, filter_specs)
    def test_preserves_relative_order(self, catalog: list[Property], spec: FilterSpec) -> None:
        result = apply_filters(catalog, spec)
        positions = [catalog.index(p) for p in result]
        assert positions == sorted(positions)

    @given(catalogs, filter_specs)
    def test_result_is_subset(self, catalog: list[Property], spec: FilterSpec) -> None:
        assert all(p in catalog for p in apply_filters(catalog, spec))

    @given(filter_specs)
    def test_empty_catalog(self, spec: FilterSpec) -> None:
        assert apply_filters([], spec) == []

    @given(catalogs, filter_specs)
    def test_idempotent(self, catalog: list[Property], spec: FilterSpec) -> None:
        once = apply_filters(catalog, spec)
        assert apply_filters(once, spec) == once

    @given(
        st.lists(properties, min_size=1, max_size=12, unique_by=lambda p: p.id),
        st.integers(min_value=1, max_value=3_000_000),
        st.integers(min_value=0, max_value=3_000_000),
    )
    def test_inverted_price_bounds_match_nothing(
        self, catalog: list[Property], price_min: int, gap: int
    ) -> None:
        spec = FilterSpec(price_min=price_min, price_max=max(0, price_min - 1 - gap))
        assert apply_filters(catalog, spec) == []


# ---------------------------------------------------------------------------
# FavoritesStore
# ---------------------------------------------------------------------------

property_ids = st.text(alphabet="abcdef0123456789-", min_size=1, max_size=8)


class TestFavoritesProperties:
    @given(st.lists(property_ids, max_size=10))
    def test_create_is_unique_per_property(self, ids: list[str]) -> None:
        async def scenario() -> None:
            store = FavoritesStore(MemoryKeyValueStore())
            seen: set[str] = set()
            for property_id in ids:
                try:
                    await store.create(property_id)
                except AlreadyExistsError:
                    assert property_id in seen
                else:
                    assert property_id not in seen
                seen.add(property_id)
            favorites = await store.list_all()
            assert sorted(f.property_id for f in favorites) == sorted(set(ids))

        asyncio.run(scenario())

    @given(st.lists(property_ids, unique=True, max_size=8), property_ids)
    def test_create_then_delete_round_trip(self, existing: list[str], new_id: str) -> None:
        async def scenario() -> None:
            store = FavoritesStore(MemoryKeyValueStore())
            for property_id in existing:
                await store.create(property_id)
            before = {f.property_id for f in await store.list_all()}
            if new_id in before:
                return
            await store.create(new_id)
            await store.delete(new_id)
            after = {f.property_id for f in await store.list_all()}
            assert after == before

        asyncio.run(scenario())

    @given(st.binary(max_size=64))
    def test_arbitrary_blob_never_raises(self, raw: bytes) -> None:
        assert isinstance(decode_favorites(raw), list)
