"""TTL-invalidated cache entry for remote product sub-resources.

A ``RemoteValueCache`` pairs one value with the wall-clock millisecond at
which it expires. Fetches, refreshes and mutations run under one lock and
write value and expiry together, so two callers that see an expired value
share a single refresh and writes apply in the order they were issued.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from shopclient.domain.results import FetchResult, Outcome

T = TypeVar("T")

Clock = Callable[[], int]
Loader = Callable[[], Awaitable[FetchResult[T]]]


def current_millis() -> int:
    """Wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class RemoteValueCache(Generic[T]):
    """Lazily fetched value that goes stale after a fixed window.

    States: empty, loading, populated. A failed load leaves the entry as it
    was (empty stays empty, a stale value stays stale).
    """

    def __init__(
        self,
        loader: Loader[T],
        ttl_ms: int,
        clock: Clock = current_millis,
    ) -> None:
        """Initialize the cache entry.

        Args:
            loader: Coroutine factory performing one fetch.
            ttl_ms: Freshness window measured from the last successful write.
            clock: Millisecond clock.
        """
        self._loader = loader
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._value: T | None = None
        self._expires_at = 0
        self._lock = asyncio.Lock()
        self._generation = 0
        self.last_outcome: Outcome | None = None

    @property
    def value(self) -> T | None:
        """Cached value without any freshness check."""
        return self._value

    @property
    def expires_at(self) -> int:
        """Millisecond timestamp at which the value becomes stale."""
        return self._expires_at

    def is_stale(self) -> bool:
        """Whether the next ``get()`` has to fetch."""
        return self._value is None or self._clock() >= self._expires_at

    async def get(self) -> T | None:
        """Return the cached value, fetching once if it is absent or expired."""
        if not self.is_stale():
            return self._value
        return await self._load(only_if_stale=True)

    async def refresh(self) -> T | None:
        """Fetch unconditionally, coalescing with a fetch already in flight."""
        return await self._load(only_if_stale=False)

    async def mutate(self, action: Loader[T]) -> T | None:
        """Run a remote mutation and store the value it returns.

        Args:
            action: Coroutine factory issuing the mutation.

        Returns:
            The cached value after the mutation.
        """
        async with self._lock:
            self._apply(await action())
            return self._value

    def reject(self, outcome: Outcome) -> None:
        """Record a step that was refused before reaching the server."""
        self.last_outcome = outcome

    async def _load(self, only_if_stale: bool) -> T | None:
        generation = self._generation
        async with self._lock:
            # Another caller finished a fetch while we waited.
            if self._generation != generation:
                return self._value
            if only_if_stale and not self.is_stale():
                return self._value
            self._apply(await self._loader())
            self._generation += 1
            return self._value

    def _apply(self, result: FetchResult[T]) -> None:
        self.last_outcome = result.outcome
        if result.is_ok:
            self._value = result.value
            self._expires_at = self._clock() + self.ttl_ms
