"""Per-scope asyncio locks serializing reconciler calls on the same scope."""

import asyncio
import weakref
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class ScopeLocks:
    """Registry of asyncio.Lock keyed by scope (e.g. ("routes", role_id, domain)).

    Calls on the same scope run one at a time; different scopes never wait on
    each other. Locks are dropped once no caller holds a reference.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[Hashable, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _get(self, scope: Hashable) -> asyncio.Lock:
        lock = self._locks.get(scope)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[scope] = lock
        return lock

    @asynccontextmanager
    async def hold(self, scope: Hashable) -> AsyncIterator[None]:
        lock = self._get(scope)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)
