"""In-memory property catalog with simulated network latency."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from importlib import resources
from pathlib import Path
from typing import Any

from propertyvue.exceptions import ImmutableFieldError, NotFoundError
from propertyvue.logging import get_logger
from propertyvue.models import DEFAULT_AGENT, Property, PropertyListAdapter
from propertyvue.simulation import NO_LATENCY, Clock, IdFactory, Latency, new_id, utc_now

logger = get_logger(__name__)

_ENTITY = "Property"


def load_seed_properties(path: str | Path | None = None) -> list[Property]:
    """Load catalog seed data.

    Args:
        path: JSON file holding an array of properties. Defaults to the
            bundled ``data/properties.json``.

    Returns:
        Validated properties in file order.
    """
    if path is None:
        raw = resources.files("propertyvue.data").joinpath("properties.json").read_bytes()
    else:
        raw = Path(path).read_bytes()
    properties = PropertyListAdapter.validate_json(raw)
    logger.debug("seed_properties_loaded", count=len(properties), path=str(path or "bundled"))
    return properties


class CatalogStore:
    """Owns every Property record.

    Records are immutable pydantic models, so the list returned by
    ``list_all`` is a snapshot: callers may reorder or trim it freely
    without touching the store.
    """

    def __init__(
        self,
        properties: Iterable[Property] = (),
        *,
        latency: Latency = NO_LATENCY,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        """Initialize the catalog.

        Args:
            properties: Seed records. Ids must be unique.
            latency: Simulated delay applied to every call.
            clock: Source of creation timestamps.
            id_factory: Source of new property ids.

        Raises:
            ValueError: If two seed records share an id.
        """
        self._latency = latency
        self._clock = clock
        self._id_factory = id_factory
        self._properties: dict[str, Property] = {}
        for prop in properties:
            if prop.id in self._properties:
                raise ValueError(f"duplicate property id in seed data: {prop.id}")
            self._properties[prop.id] = prop

    def __len__(self) -> int:
        return len(self._properties)

    def _get(self, property_id: str) -> Property:
        try:
            return self._properties[property_id]
        except KeyError:
            raise NotFoundError(_ENTITY, property_id) from None

    def _next_id(self) -> str:
        # The factory is injected; guard against it repeating itself
        property_id = self._id_factory()
        while property_id in self._properties:
            property_id = self._id_factory()
        return property_id

    async def list_all(self) -> list[Property]:
        await self._latency.pause("catalog.list_all")
        return list(self._properties.values())

    async def get_by_id(self, property_id: str) -> Property:
        """Fetch one property.

        Raises:
            NotFoundError: If no property has this id.
        """
        await self._latency.pause("catalog.get_by_id")
        return self._get(property_id)

    async def create(self, data: Mapping[str, Any]) -> Property:
        """Add a property.

        Args:
            data: Property fields by name or camelCase alias. ``id`` and
                ``listed_date`` are always assigned by the store; ``status``
                defaults to Available and ``agent`` to the house agent.

        Returns:
            The stored record.

        Raises:
            pydantic.ValidationError: If required fields are missing or invalid.
        """
        await self._latency.pause("catalog.create")
        fields = Property.normalize_keys(data)
        fields.setdefault("agent", DEFAULT_AGENT)
        fields["id"] = self._next_id()
        fields["listed_date"] = self._clock()
        prop = Property.model_validate(fields)
        self._properties[prop.id] = prop
        logger.info("property_created", property_id=prop.id, title=prop.title)
        return prop

    async def update(self, property_id: str, fields: Mapping[str, Any]) -> Property:
        """Shallow-merge ``fields`` into an existing property.

        Nested values such as ``agent`` or ``features`` are replaced whole.

        Raises:
            NotFoundError: If no property has this id.
            ImmutableFieldError: If ``fields`` tries to change the id.
            pydantic.ValidationError: If the merged record is invalid.
        """
        await self._latency.pause("catalog.update")
        current = self._get(property_id)
        changes = Property.normalize_keys(fields)
        if changes.get("id", property_id) != property_id:
            raise ImmutableFieldError(_ENTITY, "id")
        merged = {**dict(current), **changes}
        updated = Property.model_validate(merged)
        self._properties[property_id] = updated
        logger.info("property_updated", property_id=property_id, fields=sorted(changes))
        return updated

    async def delete(self, property_id: str) -> Property:
        """Remove a property and return it.

        Favorites that reference it are left in place.

        Raises:
            NotFoundError: If no property has this id.
        """
        await self._latency.pause("catalog.delete")
        removed = self._get(property_id)
        del self._properties[property_id]
        logger.info("property_deleted", property_id=property_id)
        return removed
