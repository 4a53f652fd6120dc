from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.models import Task
from app.ui.telegram.keyboards.common import short

FILTERS = ("all", "active", "completed")


def tasks_list_kb(tasks: Sequence[Task], status: str = "all") -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for t in tasks:
        mark = "☑" if t.completed else "☐"
        kb.button(text=f"{mark} {short(t.title)}", callback_data=f"td:done:{t.id}")
        kb.button(text="✏️", callback_data=f"td:edit:{t.id}")
        kb.button(text="🗑️", callback_data=f"td:del:{t.id}")

    for f in FILTERS:
        label = f"• {f}" if f == status else f
        kb.button(text=label, callback_data=f"td:filter:{f}")

    kb.adjust(*([3] * len(tasks)), 3)
    return kb.as_markup()
