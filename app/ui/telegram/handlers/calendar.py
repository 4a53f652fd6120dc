from __future__ import annotations

from datetime import date, datetime

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from app.domain.sync.store import AppStore
from app.infra.clock.system_clock import SystemClock
from app.ui.telegram.keyboards.calendar import month_nav_kb
from app.ui.telegram.keyboards.mainmenu import BTN_CALENDAR, main_menu_kb
from app.ui.telegram.texts.prompts import EVENT_ADDED, EVENT_USAGE
from app.ui.telegram.texts.render import render_day, render_month
from app.ui.telegram.utils.navigation import send_or_edit
from app.ui.telegram.utils.parsing import command_args, parse_day, parse_event_args, parse_month
from app.views.calendar import month_view

router = Router()


async def _send_month(target: Message, store: AppStore, clock: SystemClock, month: date, prefer_edit: bool) -> None:
    tz = clock.tz
    # anchor mid-month so the server resolves the same month in any timezone
    await store.events.fetch_month(datetime(month.year, month.month, 15, 12, tzinfo=tz))
    weeks = month_view(store.events.items, month.year, month.month, clock.now().date(), tz)
    await send_or_edit(target, render_month(weeks, month), month_nav_kb(month), prefer_edit)


@router.message(Command("calendar"))
@router.message(F.text == BTN_CALENDAR)
async def calendar_cmd(message: Message, store: AppStore, clock: SystemClock):
    raw = command_args(message) if (message.text or "").startswith("/") else ""
    try:
        month = parse_month(raw, clock.now().date())
    except ValueError:
        await message.answer("Usage: /calendar [YYYY-MM]")
        return
    await _send_month(message, store, clock, month, prefer_edit=False)


@router.callback_query(F.data.startswith("cal:"))
async def calendar_nav(cb: CallbackQuery, store: AppStore, clock: SystemClock):
    raw = cb.data.split(":", 1)[-1]
    today = clock.now().date()
    try:
        month = parse_month("" if raw == "today" else raw, today)
    except ValueError:
        await cb.answer()
        return
    await cb.answer()
    await _send_month(cb.message, store, clock, month, prefer_edit=True)


@router.message(Command("events"))
async def events_cmd(message: Message, store: AppStore, clock: SystemClock):
    try:
        day = parse_day(command_args(message) or "today", clock.now().date())
    except ValueError:
        await message.answer("Usage: /events [YYYY-MM-DD|today|tomorrow]")
        return
    await message.answer(render_day(store.events.items, day, clock.tz))


@router.message(Command("event"))
async def event_add_cmd(message: Message, store: AppStore, clock: SystemClock):
    try:
        start, end, title = parse_event_args(command_args(message), clock.now().date(), clock.tz)
    except ValueError:
        await message.answer(EVENT_USAGE)
        return

    event = store.events.add(title=title, start=start, end=end)
    if event is None:
        await message.answer(EVENT_USAGE)
        return
    await message.answer(EVENT_ADDED, reply_markup=main_menu_kb())
    await message.answer(render_day(store.events.items, start.date(), clock.tz))
