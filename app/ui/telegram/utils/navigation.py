from __future__ import annotations

from typing import Optional

from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.types import InlineKeyboardMarkup, Message

from app.ui.telegram.keyboards.mainmenu import main_menu_kb
from app.ui.telegram.texts.prompts import MAIN_MENU


async def go_to_main_menu(
    message: Message,
    state: Optional[FSMContext] = None,
    text: str = MAIN_MENU,
) -> None:
    """
    Clears FSM state (if provided) and returns user to the main menu.
    Safe to call from anywhere.
    """
    if state is not None:
        await state.clear()

    await message.answer(text, reply_markup=main_menu_kb())


async def send_or_edit(
    target: Message,
    text: str,
    markup: Optional[InlineKeyboardMarkup] = None,
    prefer_edit: bool = False,
) -> None:
    """
    prefer_edit=True: edit target in place (callback UX).
    prefer_edit=False: send a new message (command UX).
    """
    if prefer_edit:
        try:
            await target.edit_text(text, reply_markup=markup)
            return
        except TelegramBadRequest as e:
            # unchanged content is fine; anything else falls back to a new message
            if "message is not modified" in str(e):
                return
    await target.answer(text, reply_markup=markup)
