"""Injected latency, clock, id and fault hooks for the mock stores.

The stores never sleep, read the wall clock or draw ids on their own; they
receive these dependencies so tests can run with zero delay and fixed values.
"""

import asyncio
import uuid
from collections import Counter
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Final

from propertyvue.exceptions import TransientFailureError
from propertyvue.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]
Sleep = Callable[[float], Awaitable[None]]

# Simulated round-trip per operation, in milliseconds
DEFAULT_DELAYS_MS: Final[dict[str, float]] = {
    "catalog.list_all": 300,
    "catalog.get_by_id": 200,
    "catalog.create": 400,
    "catalog.update": 350,
    "catalog.delete": 250,
    "favorites.list_all": 200,
    "favorites.get_by_property_id": 150,
    "favorites.create": 300,
    "favorites.update": 250,
    "favorites.delete": 200,
    "favorites.clear": 200,
    "viewings.list_all": 300,
    "viewings.get_by_id": 200,
    "viewings.list_by_property_id": 250,
    "viewings.create": 400,
    "viewings.update": 350,
    "viewings.update_status": 300,
    "viewings.delete": 250,
    "contact.send_inquiry": 800,
    "contact.history": 300,
}


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


def new_id() -> str:
    """Default id factory."""
    return uuid.uuid4().hex


class Latency:
    """Fixed per-operation delay applied before each store mutation or read."""

    def __init__(
        self,
        delays_ms: Mapping[str, float] | None = None,
        *,
        default_ms: float = 0.0,
        scale: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the latency model.

        Args:
            delays_ms: Delay per operation name (e.g. "catalog.get_by_id").
            default_ms: Delay for operations missing from ``delays_ms``.
            scale: Multiplier applied to every delay; 0 disables waiting.
            sleep: Coroutine used to wait, in seconds.
        """
        if scale < 0:
            raise ValueError("scale must be >= 0")
        self._delays_ms = dict(delays_ms or {})
        self._default_ms = default_ms
        self._scale = scale
        self._sleep = sleep

    def delay_for(self, operation: str) -> float:
        """Return the delay in seconds for an operation."""
        ms = self._delays_ms.get(operation, self._default_ms)
        return max(0.0, ms * self._scale) / 1000

    async def pause(self, operation: str) -> None:
        """Suspend the caller for the operation's simulated round trip.

        Always yields to the event loop, even with no delay, so overlapping
        calls interleave at the same points they would over a network.
        """
        await self._sleep(self.delay_for(operation))


NO_LATENCY: Final = Latency()


def default_latency(scale: float = 1.0) -> Latency:
    """Latency model with the application's default per-operation delays."""
    return Latency(DEFAULT_DELAYS_MS, scale=scale)


class FaultInjector:
    """Deterministic failure schedule for collaborator mocks.

    Example:
        faults = FaultInjector()
        faults.fail_next("contact.send_inquiry", times=2)
    """

    def __init__(self) -> None:
        self._pending: Counter[str] = Counter()

    def fail_next(self, operation: str, times: int = 1) -> None:
        """Make the next ``times`` calls of ``operation`` fail."""
        if times < 1:
            raise ValueError("times must be >= 1")
        self._pending[operation] += times

    def pending(self, operation: str) -> int:
        return self._pending[operation]

    def reset(self) -> None:
        self._pending.clear()

    def check(self, operation: str) -> None:
        """Raise TransientFailureError if a failure is scheduled for ``operation``."""
        if self._pending[operation] <= 0:
            return
        self._pending[operation] -= 1
        logger.info("fault_injected", operation=operation, remaining=self._pending[operation])
        raise TransientFailureError(operation)
