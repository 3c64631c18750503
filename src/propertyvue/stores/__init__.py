"""Async stores owning the application's records."""

from propertyvue.stores.catalog import CatalogStore, load_seed_properties
from propertyvue.stores.favorites import (
    FAVORITES_KEY,
    FavoritesStore,
    decode_favorites,
    encode_favorites,
    resolve_favorites,
)
from propertyvue.stores.recent_searches import RECENT_SEARCHES_KEY, RecentSearches
from propertyvue.stores.viewings import ViewingStore, load_seed_viewings

__all__ = [
    "FAVORITES_KEY",
    "RECENT_SEARCHES_KEY",
    "CatalogStore",
    "FavoritesStore",
    "RecentSearches",
    "ViewingStore",
    "load_seed_viewings",
    "decode_favorites",
    "encode_favorites",
    "load_seed_properties",
    "resolve_favorites",
]
