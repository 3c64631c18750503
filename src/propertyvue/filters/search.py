"""Search-page text query with quick filters."""

from collections.abc import Iterable

from propertyvue.logging import get_logger
from propertyvue.models import Property, QuickSearch

logger = get_logger(__name__)


def parse_price_range(value: str | None) -> tuple[float, float | None] | None:
    """Parse a quick-filter price range such as "300000-500000" or "1000000-".

    Returns:
        (minimum, maximum) where maximum is None for an open range, or None
        when the value is empty or malformed.
    """
    if not value or not value.strip():
        return None
    low, sep, high = value.strip().partition("-")
    if not sep:
        return None
    try:
        minimum = float(low) if low.strip() else 0.0
        maximum = float(high) if high.strip() else None
    except ValueError:
        return None
    # A zero upper bound in "0-0" style strings means "no maximum"
    return minimum, maximum or None


def _matches_text(prop: Property, query: str) -> bool:
    fields = (prop.title, prop.address, prop.city, prop.description)
    return any(query in text.lower() for text in fields) or any(
        query in feature.lower() for feature in prop.features
    )


def quick_search(properties: Iterable[Property], search: QuickSearch) -> list[Property]:
    """Run a search-page query against a catalog snapshot.

    A blank query returns no results. Otherwise the query must appear in the
    title, address, city, description or one of the features, and every
    quick filter that is set must also hold.
    """
    if not search.query.strip():
        return []
    query = search.query.lower()

    price_range = parse_price_range(search.price_range)
    results: list[Property] = []
    for prop in properties:
        if not _matches_text(prop, query):
            continue
        if price_range is not None:
            minimum, maximum = price_range
            if prop.price < minimum or (maximum is not None and prop.price > maximum):
                continue
        if search.bedrooms_min is not None and prop.bedrooms < search.bedrooms_min:
            continue
        if search.property_type is not None and prop.property_type != search.property_type:
            continue
        results.append(prop)

    logger.debug("quick_search_complete", query=query, matching=len(results))
    return results
