from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from app.domain.sync.store import AppStore
from app.ui.telegram.keyboards.mainmenu import BTN_POMODORO
from app.ui.telegram.keyboards.pomodoro import pomodoro_kb
from app.ui.telegram.texts.prompts import POMODORO_USAGE
from app.ui.telegram.texts.render import render_pomodoro
from app.ui.telegram.utils.navigation import send_or_edit
from app.ui.telegram.utils.parsing import command_args
from app.ui.telegram.utils.pomodoro_session import PomodoroSession
from app.views.pomodoro import LONG_BREAK, SHORT_BREAK, WORK

router = Router()

SETTING_NAMES = ("work_duration", "short_break_duration", "long_break_duration", "sessions_until_long_break")


@router.message(Command("pomodoro"))
@router.message(F.text == BTN_POMODORO)
async def pomodoro_cmd(message: Message, store: AppStore, pomodoro: PomodoroSession):
    pomodoro.sync_settings(store.pomodoro_settings)
    await message.answer(render_pomodoro(pomodoro.timer), reply_markup=pomodoro_kb(pomodoro.timer))


@router.message(Command("pomodoro_set"))
async def pomodoro_set_cmd(message: Message, store: AppStore, pomodoro: PomodoroSession):
    parts = command_args(message).split()
    if len(parts) != len(SETTING_NAMES) or not all(p.isdigit() for p in parts):
        await message.answer(POMODORO_USAGE)
        return

    settings = store.update_pomodoro_settings(**dict(zip(SETTING_NAMES, map(int, parts))))
    if settings is None:
        await message.answer(POMODORO_USAGE)
        return
    pomodoro.sync_settings(settings)
    await message.answer(render_pomodoro(pomodoro.timer), reply_markup=pomodoro_kb(pomodoro.timer))


@router.callback_query(F.data.startswith("pomo:"))
async def pomodoro_cb(cb: CallbackQuery, pomodoro: PomodoroSession):
    action = cb.data.split(":")[-1]
    timer = pomodoro.timer

    if action == "toggle":
        timer.toggle()
    elif action == "reset":
        timer.reset()
    elif action == "skip":
        if timer.phase == WORK:
            timer.switch_to(SHORT_BREAK)
        elif timer.phase in (SHORT_BREAK, LONG_BREAK):
            timer.switch_to(WORK)

    await cb.answer()
    await send_or_edit(cb.message, render_pomodoro(timer), pomodoro_kb(timer), prefer_edit=True)
