"""Tests for Pydantic data models."""

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from propertyvue.models import (
    Favorite,
    FilterSpec,
    ListingStatus,
    Property,
    PropertyType,
    Viewing,
)

PropertyFactory = Callable[..., Property]


class TestProperty:
    def test_valid_property(self, sample_property: Property) -> None:
        assert sample_property.property_type is PropertyType.CONDO
        assert sample_property.status is ListingStatus.AVAILABLE
        assert sample_property.images == ()

    def test_camel_case_json_round_trip(self, sample_property: Property) -> None:
        data = sample_property.model_dump(mode="json", by_alias=True)
        assert data["type"] == "Condo"
        assert data["squareFeet"] == 1100
        assert data["zipCode"] == "62701"
        assert Property.model_validate(data) == sample_property

    def test_frozen(self, sample_property: Property) -> None:
        with pytest.raises(ValidationError):
            sample_property.title = "Changed"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": -1},
            {"bedrooms": -1},
            {"bathrooms": -0.5},
            {"square_feet": -10},
            {"property_type": "Castle"},
            {"status": "Rented"},
            {"id": ""},
        ],
    )
    def test_rejects_invalid_values(
        self, property_factory: PropertyFactory, overrides: dict[str, object]
    ) -> None:
        with pytest.raises(ValidationError):
            property_factory(**overrides)

    def test_coordinates_both_or_neither(self, property_factory: PropertyFactory) -> None:
        with pytest.raises(ValidationError, match="latitude and longitude"):
            property_factory(latitude=40.7)
        prop = property_factory(latitude=40.7, longitude=-74.0)
        assert prop.longitude == -74.0

    def test_naive_listed_date_is_utc(self, property_factory: PropertyFactory) -> None:
        prop = property_factory(listed_date=datetime(2024, 1, 1, 12, 0))
        assert prop.listed_date.tzinfo is UTC

    def test_normalize_keys(self) -> None:
        normalized = Property.normalize_keys({"squareFeet": 1, "type": "House", "other": 2})
        assert normalized == {"square_feet": 1, "property_type": "House", "other": 2}


class TestFilterSpec:
    def test_defaults_constrain_nothing(self) -> None:
        spec = FilterSpec()
        assert spec.price_min == 0
        assert spec.price_max is None
        assert spec.property_types == frozenset()
        assert spec.keyword == ""

    def test_inverted_price_bounds_allowed(self) -> None:
        spec = FilterSpec(price_min=500000, price_max=100000)
        assert spec.price_min > spec.price_max  # type: ignore[operator]

    def test_camel_case_input(self) -> None:
        spec = FilterSpec.model_validate(
            {"priceMin": 1, "propertyTypes": ["Condo", "House"], "squareFeetMin": 900}
        )
        assert spec.property_types == {PropertyType.CONDO, PropertyType.HOUSE}
        assert spec.square_feet_min == 900

    def test_negative_minimum_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FilterSpec(bedrooms_min=-1)

    def test_keyword_lowercased_not_stripped(self) -> None:
        assert FilterSpec(keywords=" River VIEW ").keyword == " river view "
        assert FilterSpec(keywords="  ").keyword == ""


class TestFavorite:
    def test_aliases(self) -> None:
        favorite = Favorite.model_validate(
            {"id": "f1", "propertyId": "p1", "savedDate": "2024-01-01T00:00:00Z"}
        )
        assert favorite.property_id == "p1"
        assert favorite.saved_date == datetime(2024, 1, 1, tzinfo=UTC)

    def test_requires_property_id(self) -> None:
        with pytest.raises(ValidationError):
            Favorite(id="f1", property_id="", saved_date=datetime(2024, 1, 1, tzinfo=UTC))


class TestViewing:
    def test_date_and_time_aliases(self) -> None:
        viewing = Viewing.model_validate(
            {
                "id": "v1",
                "propertyId": "p1",
                "date": "2024-01-15",
                "time": "2:00 PM",
                "name": "Sarah",
                "email": "sarah@example.com",
                "phone": "555",
                "scheduledAt": "2024-01-10T10:30:00Z",
            }
        )
        dumped = viewing.model_dump(mode="json", by_alias=True)
        assert dumped["date"] == "2024-01-15"
        assert dumped["time"] == "2:00 PM"
        assert dumped["status"] == "Scheduled"
