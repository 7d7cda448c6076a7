"""
Keyed Locks

Per-key asyncio locks used by strict dedup mode to serialize the
check-then-insert sequence for one URL while other URLs proceed freely.

Locks only exist while some coroutine holds or waits on them, so the
registry does not grow with the number of distinct URLs ever seen.
Serialization covers a single process; across processes the unique index
on long_url_hash takes over.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Tuple


class KeyedLock:
    """Registry of asyncio locks keyed by string."""

    def __init__(self):
        # key -> (lock, number of holders and waiters)
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def acquire(self, key: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[key] = (lock, users + 1)

        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        return len(self._locks)
