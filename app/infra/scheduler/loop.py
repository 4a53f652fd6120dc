# app/infra/scheduler/loop.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

JobFn = Callable[[], Awaitable[None]]


@dataclass
class SchedulerConfig:
    tick_seconds: float = 1.0


@dataclass
class PeriodicJob:
    name: str
    every_seconds: float
    fn: JobFn
    next_run: float = 0.0


class SchedulerLoop:
    """
    Runs registered coroutines periodically (store auto-sync, pomodoro ticks).
    A failing job is logged and retried on its next period.
    """

    def __init__(
        self,
        cfg: SchedulerConfig = SchedulerConfig(),
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cfg = cfg
        self._monotonic = monotonic
        self._jobs: Dict[str, PeriodicJob] = {}
        self._stop = asyncio.Event()

    def register(self, name: str, every_seconds: float, fn: JobFn, run_immediately: bool = False) -> None:
        now = self._monotonic()
        self._jobs[name] = PeriodicJob(
            name=name,
            every_seconds=every_seconds,
            fn=fn,
            next_run=now if run_immediately else now + every_seconds,
        )

    def unregister(self, name: str) -> None:
        self._jobs.pop(name, None)

    def stop(self) -> None:
        self._stop.set()

    async def run_forever(self) -> None:
        while not self._stop.is_set():
            await self.run_due()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._cfg.tick_seconds)
            except asyncio.TimeoutError:
                pass

    async def run_due(self, now: Optional[float] = None) -> List[str]:
        """Run every job whose time has come. Returns the names that ran."""
        now = self._monotonic() if now is None else now
        ran: List[str] = []
        for job in list(self._jobs.values()):
            if job.next_run > now:
                continue
            job.next_run = now + job.every_seconds
            try:
                await job.fn()
            except Exception as e:
                # never crash the bot because of a periodic job
                logger.error(f"Periodic job failed: name={job.name}, error={e}", exc_info=True)
            ran.append(job.name)
        return ran
