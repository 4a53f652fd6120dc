from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from app.domain.common.errors import ValidationError
from app.domain.common.time import to_iso
from app.domain.sync.ports import Clock, SnapshotRepository
from app.domain.sync.store import AppStore

logger = logging.getLogger(__name__)


class SnapshotPersister:
    """
    Keeps the store's snapshot in a named slot across restarts.

    Saves are coalesced: at most one save runs at a time, and changes made
    while it runs are written by one more save right after it.
    """

    def __init__(self, store: AppStore, repo: SnapshotRepository, slot: str, clock: Clock) -> None:
        self._store = store
        self._repo = repo
        self._slot = slot
        self._clock = clock
        self._dirty = False
        self._task: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    async def hydrate(self) -> bool:
        """Restore the slot into the store. Call before attach()."""
        data = await self._repo.load(self._slot)
        if data is None:
            logger.info("No snapshot in slot %s", self._slot)
            return False
        try:
            restored = self._store.restore(data)
        except ValidationError:
            logger.warning("Snapshot in slot %s is malformed, starting fresh", self._slot, exc_info=True)
            return False
        if restored:
            logger.info("Store restored from slot %s", self._slot)
        return restored

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def flush(self) -> None:
        """Wait for pending saves; writes immediately if a change is still unsaved."""
        if self._task is not None:
            await self._task
        if self._dirty:
            await self._save_loop()

    async def clear(self) -> None:
        await self._repo.clear(self._slot)

    def _on_change(self, _store: AppStore) -> None:
        self._dirty = True
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._save_loop())

    async def _save_loop(self) -> None:
        while self._dirty:
            self._dirty = False
            try:
                await self._repo.save(self._slot, self._store.snapshot(), to_iso(self._clock.now()))
            except Exception:
                # keep the session running; the next change retries the save
                logger.error("Saving snapshot to slot %s failed", self._slot, exc_info=True)
                return
