"""
Store toasts delivered as Telegram messages.
"""
from __future__ import annotations

import asyncio

from aiogram.exceptions import TelegramAPIError

from app.infra.notify.telegram import TelegramNotifier


class FakeBot:
    def __init__(self, fail: bool = False) -> None:
        self.sent = []
        self.fail = fail

    async def send_message(self, chat_id, text, **kwargs):
        if self.fail:
            raise TelegramAPIError(method=None, message="chat not found")
        self.sent.append((chat_id, text))


def test_toasts_are_prefixed_and_sent_to_owner():
    async def run():
        bot = FakeBot()
        notifier = TelegramNotifier(bot, chat_id=42)
        await notifier.success("Task saved")
        await notifier.error("Failed to load tasks from server.")
        assert bot.sent == [(42, "✅ Task saved"), (42, "⚠️ Failed to load tasks from server.")]

    asyncio.run(run())


def test_success_toasts_can_be_muted():
    async def run():
        bot = FakeBot()
        notifier = TelegramNotifier(bot, chat_id=42, send_success=False)
        await notifier.success("Task saved")
        await notifier.error("Failed to delete task on server. Restoring task locally.")
        assert [text for _, text in bot.sent] == ["⚠️ Failed to delete task on server. Restoring task locally."]

    asyncio.run(run())


def test_undeliverable_toast_is_dropped():
    async def run():
        notifier = TelegramNotifier(FakeBot(fail=True), chat_id=42)
        await notifier.error("anything")

    asyncio.run(run())
