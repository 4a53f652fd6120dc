from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.views.pomodoro import PomodoroTimer


def pomodoro_kb(timer: PomodoroTimer) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="⏸ Pause" if timer.active else "▶ Start", callback_data="pomo:toggle")
    kb.button(text="↺ Reset", callback_data="pomo:reset")
    kb.button(text="⏭ Skip", callback_data="pomo:skip")
    kb.button(text="🔄 Refresh", callback_data="pomo:show")
    kb.adjust(3, 1)
    return kb.as_markup()
