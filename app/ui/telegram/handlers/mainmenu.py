from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from app.constants import STATE_ORPHANED, STATE_PENDING
from app.domain.sync.collection import SyncedCollection
from app.domain.sync.store import AppStore
from app.infra.clock.system_clock import SystemClock
from app.ui.telegram.keyboards.mainmenu import BTN_DASHBOARD, main_menu_kb
from app.ui.telegram.texts.prompts import SYNCING
from app.ui.telegram.texts.render import render_dashboard

router = Router()


async def send_mainmenu(message: Message, store: AppStore, clock: SystemClock) -> None:
    """Dashboard summary with the reply keyboard attached."""
    name = message.from_user.first_name if message.from_user else None
    await message.answer(render_dashboard(store, clock.now(), name), reply_markup=main_menu_kb())


def _sync_line(label: str, collection: SyncedCollection) -> str:
    ids = [r.id for r in collection.items]
    pending = sum(1 for i in ids if collection.state_of(i) == STATE_PENDING)
    local_only = sum(1 for i in ids if collection.state_of(i) == STATE_ORPHANED)
    line = f"{label}: {len(ids)}"
    if pending:
        line += f", {pending} syncing"
    if local_only:
        line += f", {local_only} local only"
    if collection.loading:
        line += " (loading)"
    return line


@router.message(Command("dashboard"))
@router.message(F.text == BTN_DASHBOARD)
async def mm_dashboard(message: Message, state: FSMContext, store: AppStore, clock: SystemClock):
    await state.clear()
    await send_mainmenu(message, store=store, clock=clock)


@router.message(Command("sync"))
async def sync_cmd(message: Message, store: AppStore, clock: SystemClock):
    await message.answer(SYNCING)
    await store.fetch_everything()
    await send_mainmenu(message, store=store, clock=clock)


@router.message(Command("status"))
async def status_cmd(message: Message, store: AppStore):
    lines = [
        "<b>Sync status</b>",
        _sync_line("Tasks", store.tasks),
        _sync_line("Notes", store.notes),
        _sync_line("Events", store.events),
    ]
    await message.answer("\n".join(lines))
