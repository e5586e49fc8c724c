"""In-process keyed locks.

Serializes work on one key (e.g. a (user, challenge) pair) inside a single
instance. Multi-instance deployments rely on the database constraints instead.
"""
import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLockStore:
    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._holders: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                # last user of this key; drop it so the map doesn't grow forever
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
