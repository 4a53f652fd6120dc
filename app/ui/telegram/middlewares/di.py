from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from app.domain.sync.store import AppStore
from app.infra.clock.system_clock import SystemClock
from app.ui.telegram.utils.pomodoro_session import PomodoroSession


class DIMiddleware(BaseMiddleware):
    """
    Inject dependencies to handlers via `data` dict.

    Handlers can request args by name, e.g.
      async def handler(message: Message, store: AppStore, clock: SystemClock): ...
    """

    def __init__(self, store: AppStore, clock: SystemClock, pomodoro: PomodoroSession) -> None:
        self._store = store
        self._clock = clock
        self._pomodoro = pomodoro

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        # keep names stable across the project
        data["store"] = self._store
        data["clock"] = self._clock
        data["tz"] = self._clock.tz
        data["pomodoro"] = self._pomodoro

        return await handler(event, data)
