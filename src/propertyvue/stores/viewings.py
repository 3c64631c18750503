"""In-memory viewing requests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from importlib import resources
from pathlib import Path
from typing import Any

from propertyvue.exceptions import ImmutableFieldError, NotFoundError
from propertyvue.logging import get_logger
from propertyvue.models import Viewing, ViewingListAdapter, ViewingStatus
from propertyvue.simulation import NO_LATENCY, Clock, IdFactory, Latency, new_id, utc_now

logger = get_logger(__name__)

_ENTITY = "Viewing"


def load_seed_viewings(path: str | Path | None = None) -> list[Viewing]:
    """Load viewing requests from a JSON array, the bundled file by default."""
    if path is None:
        raw = resources.files("propertyvue.data").joinpath("viewings.json").read_bytes()
    else:
        raw = Path(path).read_bytes()
    viewings = ViewingListAdapter.validate_json(raw)
    logger.debug("seed_viewings_loaded", count=len(viewings), path=str(path or "bundled"))
    return viewings


class ViewingStore:
    """Owns every Viewing record. Keyed by viewing id, in creation order."""

    def __init__(
        self,
        viewings: Iterable[Viewing] = (),
        *,
        latency: Latency = NO_LATENCY,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._latency = latency
        self._clock = clock
        self._id_factory = id_factory
        self._viewings: dict[str, Viewing] = {}
        for viewing in viewings:
            if viewing.id in self._viewings:
                raise ValueError(f"duplicate viewing id: {viewing.id}")
            self._viewings[viewing.id] = viewing

    def _next_id(self) -> str:
        viewing_id = self._id_factory()
        while viewing_id in self._viewings:
            viewing_id = self._id_factory()
        return viewing_id

    def _get(self, viewing_id: str) -> Viewing:
        try:
            return self._viewings[viewing_id]
        except KeyError:
            raise NotFoundError(_ENTITY, viewing_id) from None

    async def list_all(self) -> list[Viewing]:
        await self._latency.pause("viewings.list_all")
        return list(self._viewings.values())

    async def get_by_id(self, viewing_id: str) -> Viewing:
        await self._latency.pause("viewings.get_by_id")
        return self._get(viewing_id)

    async def list_by_property_id(self, property_id: str) -> list[Viewing]:
        """All viewings for a property; empty when there are none."""
        await self._latency.pause("viewings.list_by_property_id")
        return [v for v in self._viewings.values() if v.property_id == property_id]

    async def create(self, data: Mapping[str, Any]) -> Viewing:
        """Schedule a viewing. Id, ``scheduled_at`` and status are assigned here."""
        await self._latency.pause("viewings.create")
        fields = Viewing.normalize_keys(data)
        fields["id"] = self._next_id()
        fields["scheduled_at"] = self._clock()
        fields["status"] = ViewingStatus.SCHEDULED
        viewing = Viewing.model_validate(fields)
        self._viewings[viewing.id] = viewing
        logger.info("viewing_scheduled", viewing_id=viewing.id, property_id=viewing.property_id)
        return viewing

    async def update(self, viewing_id: str, fields: Mapping[str, Any]) -> Viewing:
        await self._latency.pause("viewings.update")
        current = self._get(viewing_id)
        changes = Viewing.normalize_keys(fields)
        if changes.get("id", viewing_id) != viewing_id:
            raise ImmutableFieldError(_ENTITY, "id")
        updated = Viewing.model_validate({**dict(current), **changes})
        self._viewings[viewing_id] = updated
        logger.info("viewing_updated", viewing_id=viewing_id, fields=sorted(changes))
        return updated

    async def update_status(self, viewing_id: str, status: ViewingStatus | str) -> Viewing:
        """Move a viewing to a new status and stamp ``updated_at``."""
        await self._latency.pause("viewings.update_status")
        current = self._get(viewing_id)
        updated = Viewing.model_validate(
            {**dict(current), "status": status, "updated_at": self._clock()}
        )
        self._viewings[viewing_id] = updated
        logger.info("viewing_status_changed", viewing_id=viewing_id, status=updated.status)
        return updated

    async def delete(self, viewing_id: str) -> Viewing:
        await self._latency.pause("viewings.delete")
        removed = self._get(viewing_id)
        del self._viewings[viewing_id]
        logger.info("viewing_deleted", viewing_id=viewing_id)
        return removed
