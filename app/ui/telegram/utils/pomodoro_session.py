from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from app.models import PomodoroSettings
from app.views.pomodoro import PhaseFinished, PomodoroTimer

logger = logging.getLogger(__name__)

Announce = Callable[[str], Awaitable[None]]


class PomodoroSession:
    """
    The owner's running timer. The scheduler calls tick() once a second;
    a finished phase is announced through `announce`.
    """

    def __init__(self, settings: PomodoroSettings, announce: Optional[Announce] = None) -> None:
        self.timer = PomodoroTimer(settings)
        self._announce = announce

    def set_announce(self, announce: Optional[Announce]) -> None:
        self._announce = announce

    def sync_settings(self, settings: PomodoroSettings) -> bool:
        """Adopt changed store settings. Returns True when the timer was reset."""
        if settings == self.timer.settings:
            return False
        self.timer.apply_settings(settings)
        return True

    async def tick(self, seconds: int = 1) -> Optional[PhaseFinished]:
        finished = self.timer.tick(seconds)
        if finished is not None:
            logger.info("Pomodoro %s -> %s", finished.finished, finished.next_phase)
            if self._announce is not None:
                await self._announce(finished.message)
        return finished
