from __future__ import annotations

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder


def cancel_kb() -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.button(text="Cancel", callback_data="cancel")
    return kb.as_markup()


def short(text: str, limit: int = 32) -> str:
    """Inline button captions get cut by clients; keep them readable."""
    text = text or "(empty)"
    return text if len(text) <= limit else text[: limit - 1] + "…"
