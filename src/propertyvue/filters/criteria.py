"""Catalog filtering by price, type, size and keyword."""

from collections.abc import Iterable

from propertyvue.logging import get_logger
from propertyvue.models import FilterSpec, Property

logger = get_logger(__name__)


def matches_price(prop: Property, spec: FilterSpec) -> bool:
    """Price lies within [price_min, price_max]; inverted bounds match nothing."""
    if prop.price < spec.price_min:
        return False
    return spec.price_max is None or prop.price <= spec.price_max


def matches_type(prop: Property, spec: FilterSpec) -> bool:
    return not spec.property_types or prop.property_type in spec.property_types


def matches_size(prop: Property, spec: FilterSpec) -> bool:
    """Bedroom, bathroom and floor-area minimums; zero means unconstrained."""
    return (
        (spec.bedrooms_min == 0 or prop.bedrooms >= spec.bedrooms_min)
        and (spec.bathrooms_min == 0 or prop.bathrooms >= spec.bathrooms_min)
        and (spec.square_feet_min == 0 or prop.square_feet >= spec.square_feet_min)
    )


def matches_keyword(prop: Property, keyword: str) -> bool:
    """Case-insensitive substring match on title, address, city or description.

    Args:
        prop: Property to test.
        keyword: Lower-cased keyword. Empty matches all.
    """
    if not keyword:
        return True
    return any(
        keyword in text.lower() for text in (prop.title, prop.address, prop.city, prop.description)
    )


def matches(prop: Property, spec: FilterSpec) -> bool:
    """Check if a property satisfies every constraint of the filter."""
    return (
        matches_price(prop, spec)
        and matches_type(prop, spec)
        and matches_size(prop, spec)
        and matches_keyword(prop, spec.keyword)
    )


def apply_filters(properties: Iterable[Property], spec: FilterSpec) -> list[Property]:
    """Return the properties matching ``spec``, preserving input order."""
    return [p for p in properties if matches(p, spec)]


class CriteriaFilter:
    """Filter a catalog snapshot by a FilterSpec."""

    def __init__(self, spec: FilterSpec) -> None:
        """Initialize the criteria filter.

        Args:
            spec: Filter constraints to apply.
        """
        self.spec = spec

    def filter_properties(self, properties: list[Property]) -> list[Property]:
        """Filter properties by the configured constraints.

        Args:
            properties: Catalog snapshot to filter.

        Returns:
            Matching properties in their original order.
        """
        matching = apply_filters(properties, self.spec)

        logger.info(
            "criteria_filter_complete",
            total_properties=len(properties),
            matching=len(matching),
            active_filters=self.spec.active_count,
            price_min=self.spec.price_min,
            price_max=self.spec.price_max,
            property_types=sorted(self.spec.property_types),
            keyword=self.spec.keyword or None,
        )

        return matching
