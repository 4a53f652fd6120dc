from __future__ import annotations

import re

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from app.domain.sync.store import AppStore
from app.ui.telegram.keyboards.categories import categories_kb
from app.ui.telegram.texts.prompts import CATEGORY_USAGE
from app.ui.telegram.texts.render import render_categories
from app.ui.telegram.utils.navigation import send_or_edit
from app.ui.telegram.utils.parsing import command_args

router = Router()

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@router.message(Command("categories"))
async def categories_cmd(message: Message, store: AppStore):
    await message.answer(render_categories(store.categories), reply_markup=categories_kb(store.categories))


@router.message(Command("category_add"))
async def category_add_cmd(message: Message, store: AppStore):
    parts = command_args(message).rsplit(maxsplit=1)
    if len(parts) != 2 or not HEX_COLOR.match(parts[1]):
        await message.answer(CATEGORY_USAGE)
        return
    if store.add_category(parts[0], parts[1].lower()) is None:
        await message.answer(CATEGORY_USAGE)
        return
    await message.answer(render_categories(store.categories), reply_markup=categories_kb(store.categories))


@router.callback_query(F.data.startswith("cat:del:"))
async def category_delete(cb: CallbackQuery, store: AppStore):
    category_id = cb.data.split(":")[-1]
    removed = store.delete_category(category_id)
    await cb.answer(f"Deleted {removed.name}" if removed else "Category not found.")
    await send_or_edit(
        cb.message, render_categories(store.categories), categories_kb(store.categories), prefer_edit=True
    )
