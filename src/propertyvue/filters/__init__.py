"""Filters for narrowing the property catalog."""

from propertyvue.filters.criteria import CriteriaFilter, apply_filters, matches
from propertyvue.filters.search import parse_price_range, quick_search

__all__ = [
    "CriteriaFilter",
    "apply_filters",
    "matches",
    "parse_price_range",
    "quick_search",
]
