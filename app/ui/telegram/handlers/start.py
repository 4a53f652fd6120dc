from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from app.domain.sync.store import AppStore
from app.infra.clock.system_clock import SystemClock
from app.ui.telegram.handlers.mainmenu import send_mainmenu

router = Router()


@router.message(CommandStart())
async def start_cmd(message: Message, state: FSMContext, store: AppStore, clock: SystemClock):
    await state.clear()
    await send_mainmenu(message, store=store, clock=clock)


@router.message(Command("menu"))
async def menu_cmd(message: Message, state: FSMContext, store: AppStore, clock: SystemClock):
    await state.clear()
    await send_mainmenu(message, store=store, clock=clock)
