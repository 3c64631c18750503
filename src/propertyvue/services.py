"""Wiring of the stores into one container built per process."""

from __future__ import annotations

from dataclasses import dataclass, field

from propertyvue.config import Settings
from propertyvue.contact import ContactService
from propertyvue.db.kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from propertyvue.logging import bind_session, configure_logging, get_logger
from propertyvue.simulation import FaultInjector, Latency
from propertyvue.stores.catalog import CatalogStore, load_seed_properties
from propertyvue.stores.favorites import FavoritesStore
from propertyvue.stores.recent_searches import RecentSearches
from propertyvue.stores.viewings import ViewingStore, load_seed_viewings

logger = get_logger(__name__)


@dataclass
class Services:
    """Every store the UI layer talks to, sharing one persistence backend."""

    kv: KeyValueStore
    latency: Latency
    catalog: CatalogStore
    favorites: FavoritesStore
    viewings: ViewingStore
    recent_searches: RecentSearches
    contact: ContactService
    faults: FaultInjector = field(default_factory=FaultInjector)

    async def close(self) -> None:
        """Release the persistence backend."""
        if isinstance(self.kv, SqliteKeyValueStore):
            await self.kv.close()


async def create_kv_store(settings: Settings) -> KeyValueStore:
    """Open the configured key-value backend."""
    if settings.storage_backend == "memory":
        return MemoryKeyValueStore()
    kv = SqliteKeyValueStore(settings.database_path)
    await kv.initialize()
    return kv


async def create_services(settings: Settings, *, kv: KeyValueStore | None = None) -> Services:
    """Build the service container.

    Args:
        settings: Application settings.
        kv: Backend to use instead of the configured one (tests, embedding).
            A supplied backend is never closed here.

    Returns:
        Services with favorites already loaded from the durable slot.
    """
    owns_kv = kv is None
    if kv is None:
        kv = await create_kv_store(settings)
    latency = settings.get_latency()
    faults = FaultInjector()

    try:
        catalog = CatalogStore(load_seed_properties(settings.get_seed_path()), latency=latency)
        favorites = FavoritesStore(kv, key=settings.favorites_key, latency=latency)
        await favorites.load()
        viewings = load_seed_viewings()
    except BaseException:
        if owns_kv and isinstance(kv, SqliteKeyValueStore):
            await kv.close()
        raise

    services = Services(
        kv=kv,
        latency=latency,
        catalog=catalog,
        favorites=favorites,
        viewings=ViewingStore(viewings, latency=latency),
        recent_searches=RecentSearches(
            kv, key=settings.recent_searches_key, limit=settings.recent_searches_limit
        ),
        contact=ContactService(latency=latency, faults=faults),
        faults=faults,
    )
    logger.info(
        "services_ready",
        backend=settings.storage_backend,
        properties=len(catalog),
        simulate_latency=settings.simulate_latency,
    )
    return services


async def bootstrap(settings: Settings | None = None) -> Services:
    """Process entry point: configure logging, tag the session, then build the container."""
    settings = settings or Settings()
    configure_logging(json_output=settings.log_json, level=settings.log_level)
    bind_session(backend=settings.storage_backend)
    return await create_services(settings)
