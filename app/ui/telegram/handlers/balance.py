from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from app.domain.sync.store import AppStore
from app.ui.telegram.keyboards.balance import balance_kb
from app.ui.telegram.keyboards.mainmenu import BTN_BALANCE
from app.ui.telegram.texts.render import render_balance
from app.ui.telegram.utils.navigation import send_or_edit

router = Router()

STEP = {"inc": 1, "dec": -1}


@router.message(Command("balance"))
@router.message(F.text == BTN_BALANCE)
async def balance_cmd(message: Message, store: AppStore):
    areas = store.life_balance_areas
    await message.answer(render_balance(areas), reply_markup=balance_kb(areas))


@router.callback_query(F.data.startswith("bal:"))
async def balance_cb(cb: CallbackQuery, store: AppStore):
    _, action, area_id = cb.data.split(":", 2)
    area = next((a for a in store.life_balance_areas if a.id == area_id), None)
    if area is None:
        await cb.answer("Area not found.", show_alert=True)
        return

    if action in STEP:
        if store.update_life_balance_area(area_id, value=area.value + STEP[action]) is None:
            await cb.answer("Values stay between 1 and 10.")
            return
        await cb.answer()
    else:
        await cb.answer(area.description or area.name)
        return

    areas = store.life_balance_areas
    await send_or_edit(cb.message, render_balance(areas), balance_kb(areas), prefer_edit=True)
