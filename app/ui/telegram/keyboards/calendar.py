from __future__ import annotations

from datetime import date

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.views.calendar import shift_month


def month_nav_kb(month: date) -> InlineKeyboardMarkup:
    prev_month = shift_month(month, -1)
    next_month = shift_month(month, 1)
    kb = InlineKeyboardBuilder()
    kb.button(text=f"◀ {prev_month:%b}", callback_data=f"cal:{prev_month:%Y-%m}")
    kb.button(text="Today", callback_data="cal:today")
    kb.button(text=f"{next_month:%b} ▶", callback_data=f"cal:{next_month:%Y-%m}")
    kb.adjust(3)
    return kb.as_markup()
