from __future__ import annotations

from aiogram.types import ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

BTN_DASHBOARD = "Dashboard"
BTN_TASKS = "Tasks"
BTN_ADD_TASK = "Add task"
BTN_NOTES = "Notes"
BTN_CALENDAR = "Calendar"
BTN_PRAYER = "Prayer times"
BTN_BALANCE = "Life balance"
BTN_POMODORO = "Pomodoro"


def main_menu_kb() -> ReplyKeyboardMarkup:
    kb = ReplyKeyboardBuilder()

    kb.button(text=BTN_DASHBOARD)
    kb.button(text=BTN_TASKS)
    kb.button(text=BTN_ADD_TASK)
    kb.button(text=BTN_NOTES)
    kb.button(text=BTN_CALENDAR)
    kb.button(text=BTN_PRAYER)
    kb.button(text=BTN_BALANCE)
    kb.button(text=BTN_POMODORO)

    # 1 + 2x2 + 3
    kb.adjust(1, 2, 2, 3)

    return kb.as_markup(resize_keyboard=True, one_time_keyboard=False)
