"""Persisted set of favorited properties."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any, Final

from pydantic import ValidationError

from propertyvue.db.kv import KeyValueStore
from propertyvue.exceptions import AlreadyExistsError, ImmutableFieldError, NotFoundError
from propertyvue.logging import get_logger
from propertyvue.models import Favorite, FavoriteListAdapter, Property
from propertyvue.simulation import NO_LATENCY, Clock, IdFactory, Latency, new_id, utc_now

logger = get_logger(__name__)

FAVORITES_KEY: Final = "propertyvue_favorites"

_ENTITY = "Favorite"
_IDENTITY_FIELDS: Final = frozenset({"id", "property_id"})


def decode_favorites(raw: bytes | None) -> list[Favorite]:
    """Decode a persisted favorites blob.

    Missing or corrupt data decodes to an empty list. Entries repeating a
    property id are dropped so the uniqueness invariant survives a bad blob.
    """
    if not raw:
        return []
    try:
        decoded = FavoriteListAdapter.validate_json(raw)
    except (ValidationError, UnicodeDecodeError) as e:
        logger.warning("favorites_load_corrupt", error=type(e).__name__, size=len(raw))
        return []

    favorites: list[Favorite] = []
    seen: set[str] = set()
    for favorite in decoded:
        if favorite.property_id in seen:
            logger.warning("favorites_load_duplicate", property_id=favorite.property_id)
            continue
        seen.add(favorite.property_id)
        favorites.append(favorite)
    return favorites


def encode_favorites(favorites: Iterable[Favorite]) -> bytes:
    """Encode favorites as a JSON array with camelCase keys."""
    return FavoriteListAdapter.dump_json(list(favorites), by_alias=True)


def resolve_favorites(
    properties: Iterable[Property], favorites: Iterable[Favorite]
) -> list[Property]:
    """Return the favorited properties, in catalog order.

    Favorites whose property is no longer in the catalog are skipped.
    """
    favorite_ids = {f.property_id for f in favorites}
    return [p for p in properties if p.id in favorite_ids]


class FavoritesStore:
    """In-memory mirror of the favorites slot, written through on every change.

    The slot is read once, on first use. After that the in-memory collection
    is the source of truth for the session; another session writing the same
    slot is overwritten by our next mutation.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = FAVORITES_KEY,
        latency: Latency = NO_LATENCY,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._kv = kv
        self._key = key
        self._latency = latency
        self._clock = clock
        self._id_factory = id_factory
        self._favorites: dict[str, Favorite] = {}
        self._loaded = False
        self._load_lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> None:
        """Read the durable slot into memory. Only the first call has any effect."""
        if self._loaded:
            return
        async with self._load_lock:
            if self._loaded:
                return
            raw = await self._kv.load(self._key)
            self._favorites = {f.property_id: f for f in decode_favorites(raw)}
            self._loaded = True
            logger.debug("favorites_loaded", key=self._key, count=len(self._favorites))

    async def _persist(self) -> None:
        await self._kv.save(self._key, encode_favorites(self._favorites.values()))

    def _get(self, property_id: str) -> Favorite:
        try:
            return self._favorites[property_id]
        except KeyError:
            raise NotFoundError(_ENTITY, property_id) from None

    async def list_all(self) -> list[Favorite]:
        await self.load()
        await self._latency.pause("favorites.list_all")
        return list(self._favorites.values())

    async def get_by_property_id(self, property_id: str) -> Favorite:
        """Fetch the favorite for a property.

        Raises:
            NotFoundError: If the property is not favorited.
        """
        await self.load()
        await self._latency.pause("favorites.get_by_property_id")
        return self._get(property_id)

    async def contains(self, property_id: str) -> bool:
        """Membership check used to draw the favorite icon. No simulated delay."""
        await self.load()
        return property_id in self._favorites

    async def property_ids(self) -> set[str]:
        await self.load()
        return set(self._favorites)

    async def create(self, property_id: str) -> Favorite:
        """Favorite a property.

        The property id is not checked against the catalog.

        Raises:
            AlreadyExistsError: If the property is already favorited.
        """
        await self.load()
        await self._latency.pause("favorites.create")
        if property_id in self._favorites:
            raise AlreadyExistsError(_ENTITY, property_id)
        favorite = Favorite(
            id=self._id_factory(), property_id=property_id, saved_date=self._clock()
        )
        self._favorites[property_id] = favorite
        logger.info("favorite_created", property_id=property_id, favorite_id=favorite.id)
        await self._persist()
        return favorite

    async def update(self, property_id: str, fields: Mapping[str, Any]) -> Favorite:
        """Change the timestamp fields of a favorite.

        Raises:
            NotFoundError: If the property is not favorited.
            ImmutableFieldError: If ``fields`` changes ``id`` or ``property_id``.
        """
        await self.load()
        await self._latency.pause("favorites.update")
        current = self._get(property_id)
        changes = Favorite.normalize_keys(fields)
        for name in changes.keys() & _IDENTITY_FIELDS:
            if changes[name] != getattr(current, name):
                raise ImmutableFieldError(_ENTITY, name)
        updated = Favorite.model_validate({**dict(current), **changes})
        self._favorites[property_id] = updated
        logger.info("favorite_updated", property_id=property_id, fields=sorted(changes))
        await self._persist()
        return updated

    async def delete(self, property_id: str) -> Favorite:
        """Unfavorite a property and return the removed record.

        Raises:
            NotFoundError: If the property is not favorited.
        """
        await self.load()
        await self._latency.pause("favorites.delete")
        removed = self._get(property_id)
        del self._favorites[property_id]
        logger.info("favorite_deleted", property_id=property_id, favorite_id=removed.id)
        await self._persist()
        return removed

    async def clear(self) -> list[Favorite]:
        """Remove every favorite with a single write. Returns what was removed."""
        await self.load()
        await self._latency.pause("favorites.clear")
        removed = list(self._favorites.values())
        self._favorites = {}
        logger.info("favorites_cleared", count=len(removed))
        await self._persist()
        return removed

    async def toggle(self, property_id: str) -> bool:
        """Favorite or unfavorite a property. Returns True if it is now favorited."""
        if await self.contains(property_id):
            await self.delete(property_id)
            return False
        await self.create(property_id)
        return True
