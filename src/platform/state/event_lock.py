"""
Per-event write lock

Every seat-status transition for one event (reserve, release, extend, commit, reaper release)
runs inside `EventLockRegistry.hold(event_id=...)`. Combined with row locks on PostgreSQL this
gives a single writer per event; on SQLite, where `FOR UPDATE` is a no-op, it is what closes the
check-then-act window. Holds are short and never wait on the caller.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Union
from uuid import UUID

import anyio

from src.platform.logging.loguru_io import Logger


class EventLockRegistry:
    def __init__(self) -> None:
        self._locks: dict[str, anyio.Lock] = {}

    @asynccontextmanager
    async def hold(self, *, event_id: Union[str, UUID]) -> AsyncIterator[None]:
        key = str(event_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = anyio.Lock()

        if lock.locked():
            Logger.base.debug(f'[LOCK] Waiting for event lock: {key}')
        try:
            async with lock:
                yield
        finally:
            # Drop idle locks so the registry does not grow with every event ever seen
            if not lock.locked() and lock.statistics().tasks_waiting == 0:
                self._locks.pop(key, None)
