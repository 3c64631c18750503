"""Shared pytest fixtures."""

import itertools
import os
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest
from hypothesis import HealthCheck, settings

from propertyvue.config import Settings
from propertyvue.models import Property, PropertyType

FIXED_NOW = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)

# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=25)
settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent the local .env file from leaking into test Settings instances."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


def make_property(**overrides: Any) -> Property:
    """Build a valid Property, overriding any field by name."""
    fields: dict[str, Any] = {
        "id": "p1",
        "title": "Sunny two-bed condo",
        "address": "12 Maple Street",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "price": 450000,
        "property_type": PropertyType.CONDO,
        "bedrooms": 2,
        "bathrooms": 1.5,
        "square_feet": 1100,
        "description": "Close to shops and transit.",
        "listed_date": FIXED_NOW,
    }
    fields.update(overrides)
    return Property(**fields)


@pytest.fixture
def property_factory() -> Callable[..., Property]:
    """Factory building valid properties with per-test overrides."""
    return make_property


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def sample_property() -> Property:
    """A valid sample property for testing."""
    return make_property()


@pytest.fixture
def sample_catalog() -> list[Property]:
    """A small mixed catalog."""
    return [
        make_property(
            id="house-1",
            title="Riverside Park Home",
            property_type=PropertyType.HOUSE,
            price=250000,
            bedrooms=3,
            bathrooms=2,
            square_feet=1800,
            description="Quiet street with a big garden.",
        ),
        make_property(
            id="condo-1",
            title="Downtown Loft",
            property_type=PropertyType.CONDO,
            price=450000,
            bedrooms=1,
            bathrooms=1,
            square_feet=750,
            city="Chicago",
            description="City view from every room.",
        ),
        make_property(
            id="condo-2",
            title="Lakeside Condo",
            property_type=PropertyType.CONDO,
            price=900000,
            bedrooms=2,
            bathrooms=2,
            square_feet=1300,
            description="Walk to the park and the beach.",
        ),
        make_property(
            id="apt-1",
            title="Garden Apartment",
            property_type=PropertyType.APARTMENT,
            price=320000,
            bedrooms=2,
            bathrooms=1,
            square_feet=950,
            address="8 Park Avenue",
        ),
    ]
