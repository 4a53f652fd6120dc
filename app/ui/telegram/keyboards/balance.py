from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.models import LifeBalanceArea
from app.ui.telegram.keyboards.common import short


def balance_kb(areas: Sequence[LifeBalanceArea]) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for a in areas:
        kb.button(text="➖", callback_data=f"bal:dec:{a.id}")
        kb.button(text=f"{short(a.name, 20)} {a.value}", callback_data=f"bal:show:{a.id}")
        kb.button(text="➕", callback_data=f"bal:inc:{a.id}")
    kb.adjust(3)
    return kb.as_markup()
