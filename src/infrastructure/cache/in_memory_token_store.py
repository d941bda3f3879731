"""In-process token store implementing TokenStoreProtocol.

Used when no Redis URL is configured (development, tests, single-process
deployments). Expired entries are dropped on access and purged on every
write, so keys that are never read again do not accumulate.
"""

import asyncio
import heapq
import time
from collections.abc import Callable, Mapping, Sequence

from src.core.result import Result, Success
from src.infrastructure.errors import CacheError


class InMemoryTokenStore:
    """Dict-backed token store with per-key TTL.

    All operations run under one asyncio.Lock, so batches are atomic and
    reads observe every completed write.

    Args:
        clock: Monotonic seconds source (injectable for expiry tests).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        # (expires_at, key); may hold superseded expiries for rewritten keys
        self._expiries: list[tuple[float, str]] = []
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Result[str | None, CacheError]:
        async with self._lock:
            entry = self._live_entry(key)
            return Success(value=None if entry is None else entry[0])

    async def set(self, key: str, value: str, ttl: int) -> Result[None, CacheError]:
        async with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._put(key, value, now + ttl)
            return Success(value=None)

    async def delete(self, key: str) -> Result[bool, CacheError]:
        async with self._lock:
            existed = self._live_entry(key) is not None
            self._entries.pop(key, None)
            return Success(value=existed)

    async def exists(self, key: str) -> Result[bool, CacheError]:
        async with self._lock:
            return Success(value=self._live_entry(key) is not None)

    async def ttl(self, key: str) -> Result[int | None, CacheError]:
        async with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return Success(value=None)
            return Success(value=max(int(entry[1] - self._clock()), 0))

    async def scan_prefix(self, prefix: str) -> Result[list[str], CacheError]:
        async with self._lock:
            keys = [
                key
                for key in list(self._entries)
                if key.startswith(prefix) and self._live_entry(key) is not None
            ]
            return Success(value=keys)

    async def apply_batch(
        self,
        *,
        set_entries: Mapping[str, tuple[str, int]],
        delete_keys: Sequence[str],
    ) -> Result[None, CacheError]:
        async with self._lock:
            now = self._clock()
            self._purge_expired(now)
            for key, (value, ttl) in set_entries.items():
                self._put(key, value, now + ttl)
            for key in delete_keys:
                self._entries.pop(key, None)
            return Success(value=None)

    def __len__(self) -> int:
        return sum(1 for key in list(self._entries) if self._live_entry(key))

    def _live_entry(self, key: str) -> tuple[str, float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock():
            del self._entries[key]
            return None
        return entry

    def _put(self, key: str, value: str, expires_at: float) -> None:
        self._entries[key] = (value, expires_at)
        heapq.heappush(self._expiries, (expires_at, key))

    def _purge_expired(self, now: float) -> None:
        while self._expiries and self._expiries[0][0] <= now:
            expires_at, key = heapq.heappop(self._expiries)
            entry = self._entries.get(key)
            # Skip keys rewritten with a later expiry
            if entry is not None and entry[1] == expires_at:
                del self._entries[key]
