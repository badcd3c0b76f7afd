"""In-process TTL cache with single-flight refresh.

Holds one value, its expiry and the task currently computing it. Concurrent
callers that arrive while a refresh is running await that same task instead
of starting their own.

Usage:
    from libs.common.cache import SingleFlightCache

    cache = SingleFlightCache(ttl_seconds=300)
    summary = await cache.get_or_compute(load_summary)

    # After a write that changes the underlying data
    cache.invalidate()
"""
import asyncio
import time
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from libs.common.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_MISSING: Any = object()


class SingleFlightCache(Generic[T]):
    """
    EMPTY -> COMPUTING -> POPULATED(expires_at) -> EMPTY.

    ``None`` is a legitimate cached value. The event loop never interleaves the
    "is a refresh in flight" check with the assignment of ``_inflight``, so no
    lock is needed as long as the cache is only used from one loop.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock
        self._value: Any = _MISSING
        self._expires_at: Optional[float] = None
        self._inflight: Optional["asyncio.Task[T]"] = None
        self._generation = 0

    @property
    def state(self) -> str:
        if self._inflight is not None:
            return "computing"
        if self.is_valid():
            return "populated"
        return "empty"

    def is_valid(self) -> bool:
        return (
            self._value is not _MISSING
            and self._expires_at is not None
            and self._clock() < self._expires_at
        )

    def peek(self) -> Optional[T]:
        """Return the cached value without computing, or None if expired/absent."""
        if self.is_valid():
            return self._value
        return None

    def invalidate(self) -> None:
        """
        Drop the cached value. A refresh already in flight still answers its
        waiters but its result is not stored, and the next caller starts anew.
        """
        self._generation += 1
        self._value = _MISSING
        self._expires_at = None
        self._inflight = None

    async def get_or_compute(self, loader: Callable[[], Awaitable[T]]) -> T:
        if self.is_valid():
            return self._value

        if self._inflight is None:
            logger.debug("Refreshing %s", self.name)
            self._inflight = asyncio.ensure_future(
                self._refresh(loader, self._generation)
            )

        # Shielded so that an abandoned caller does not cancel the shared refresh
        return await asyncio.shield(self._inflight)

    async def _refresh(
        self, loader: Callable[[], Awaitable[T]], generation: int
    ) -> T:
        try:
            value = await loader()
            if generation == self._generation:
                self._value = value
                self._expires_at = self._clock() + self.ttl_seconds
            else:
                logger.debug("Discarding stale refresh of %s", self.name)
            return value
        finally:
            if generation == self._generation:
                self._inflight = None
