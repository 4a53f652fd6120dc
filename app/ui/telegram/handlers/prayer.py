from __future__ import annotations

from dataclasses import replace

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message

from app.domain.sync.store import AppStore
from app.infra.clock.system_clock import SystemClock
from app.ui.telegram.keyboards.mainmenu import BTN_PRAYER
from app.ui.telegram.texts.render import render_prayers
from app.ui.telegram.utils.parsing import command_args, parse_clock

router = Router()

PRAYER_SET_USAGE = "Usage: /prayer_set <name> <HH:MM>"


@router.message(Command("prayer"))
@router.message(F.text == BTN_PRAYER)
async def prayer_cmd(message: Message, store: AppStore, clock: SystemClock):
    await message.answer(render_prayers(store.prayer_times, clock.now()))


@router.message(Command("prayer_set"))
async def prayer_set_cmd(message: Message, store: AppStore, clock: SystemClock):
    parts = command_args(message).split()
    if len(parts) != 2:
        await message.answer(PRAYER_SET_USAGE)
        return
    name, raw_time = parts
    try:
        at = parse_clock(raw_time)
    except ValueError:
        await message.answer(PRAYER_SET_USAGE)
        return

    prayers = list(store.prayer_times)
    idx = next((i for i, p in enumerate(prayers) if p.name.lower() == name.lower()), None)
    if idx is None:
        known = ", ".join(p.name for p in prayers)
        await message.answer(f"Unknown prayer {name!r}. Known: {known}")
        return

    prayers[idx] = replace(prayers[idx], time=at)
    store.set_prayer_times(prayers)
    await message.answer(render_prayers(store.prayer_times, clock.now()))
