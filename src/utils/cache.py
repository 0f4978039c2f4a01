"""Process-local caches with per-store time-to-live.

Each resolver owns its own TimedCache instance; nothing here is module-global.
Entries older than the TTL are treated as absent and dropped on lookup
(no background sweep, no size bound).
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Generic, Optional, TypeVar

from src.utils.logger import logger

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    inserted_at: float


class TimedCache(Generic[V]):
    """Keyed store of (value, inserted_at) with lazy TTL eviction.

    Args:
        ttl_seconds: Age after which an entry is treated as absent.
        clock: Monotonic time source, injectable for tests.
        name: Label used in debug logs.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got: {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock
        self._entries: Dict[str, CacheEntry[V]] = {}

    def get(self, key: str) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.inserted_at > self.ttl_seconds:
            del self._entries[key]
            logger.debug(f"[{self.name}] expired entry evicted: {key}")
            return None
        return entry.value

    def put(self, key: str, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


class SingleFlight(Generic[V]):
    """Share one in-flight computation per key among concurrent callers.

    The first caller for a key starts the work; callers arriving while it is
    pending await the same task. The key is released once the task settles.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, asyncio.Task] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._pending

    async def run(self, key: str, factory: Callable[[], Awaitable[V]]) -> V:
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task
            task.add_done_callback(lambda _: self._pending.pop(key, None))
        else:
            logger.debug(f"Joining in-flight computation for {key}")
        # shield: one caller giving up must not cancel the shared work
        return await asyncio.shield(task)
