from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.models import Note
from app.ui.telegram.keyboards.common import short


def notes_list_kb(notes: Sequence[Note]) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for n in notes:
        kb.button(text=short(n.title), callback_data=f"note:view:{n.id}")
        kb.button(text="🗑️", callback_data=f"note:del:{n.id}")
    kb.button(text="New note", callback_data="note:new")
    kb.adjust(*([2] * len(notes)), 1)
    return kb.as_markup()


def note_kb(note_id: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="🗑️ Delete", callback_data=f"note:del:{note_id}")
    kb.button(text="⬅ Notes", callback_data="note:list")
    kb.adjust(2)
    return kb.as_markup()
