from __future__ import annotations

import logging

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from app.domain.sync.ports import Notifier

logger = logging.getLogger(__name__)


class TelegramNotifier(Notifier):
    """
    Delivers store toasts as chat messages to the owner.
    Success toasts can be muted; failures are always sent.
    """

    def __init__(self, bot: Bot, chat_id: int, send_success: bool = True) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._send_success = send_success

    async def success(self, text: str) -> None:
        if self._send_success:
            await self._send(f"✅ {text}")

    async def error(self, text: str) -> None:
        await self._send(f"⚠️ {text}")

    async def _send(self, text: str) -> None:
        try:
            await self._bot.send_message(chat_id=self._chat_id, text=text, disable_notification=True)
        except TelegramAPIError as e:
            logger.warning("Could not deliver toast %r: %s", text, e)
