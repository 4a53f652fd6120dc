from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.models import Category
from app.ui.telegram.keyboards.common import short


def categories_kb(categories: Sequence[Category]) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for c in categories:
        kb.button(text=f"🗑️ {short(c.name, 24)}", callback_data=f"cat:del:{c.id}")
    kb.adjust(2)
    return kb.as_markup()
