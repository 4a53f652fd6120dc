from __future__ import annotations

from datetime import tzinfo
from typing import Tuple

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from app.domain.sync.store import AppStore
from app.ui.telegram.keyboards.common import cancel_kb
from app.ui.telegram.keyboards.mainmenu import BTN_NOTES, main_menu_kb
from app.ui.telegram.keyboards.notes import note_kb, notes_list_kb
from app.ui.telegram.states.notes import NotesFlow
from app.ui.telegram.texts.prompts import (
    ASK_NOTE_CONTENT,
    ASK_NOTE_TITLE,
    EMPTY_TITLE,
    NO_NOTES,
    NOTE_ADDED,
    NOTE_NOT_FOUND,
)
from app.ui.telegram.texts.render import render_note, render_notes
from app.ui.telegram.utils.navigation import send_or_edit
from app.ui.telegram.utils.parsing import command_args
from app.views.dashboard import parse_tags, visible_notes

router = Router()

MAX_LISTED = 20


def split_content(text: str) -> Tuple[str, Tuple[str, ...]]:
    """A trailing '# a, b' line holds the tags."""
    lines = (text or "").strip().splitlines()
    if lines and lines[-1].lstrip().startswith("#"):
        return "\n".join(lines[:-1]).strip(), parse_tags(lines[-1].lstrip()[1:])
    return "\n".join(lines).strip(), ()


async def _send_list(target: Message, store: AppStore, tz: tzinfo, query: str = "", prefer_edit: bool = False) -> None:
    notes = visible_notes(store.notes.items, query)[:MAX_LISTED]
    if not notes:
        await send_or_edit(target, NO_NOTES, notes_list_kb([]), prefer_edit)
        return
    await send_or_edit(target, render_notes(notes, tz), notes_list_kb(notes), prefer_edit)


@router.message(Command("notes"))
@router.message(F.text == BTN_NOTES)
async def notes_list(message: Message, state: FSMContext, store: AppStore, tz: tzinfo):
    await state.clear()
    query = command_args(message) if (message.text or "").startswith("/") else ""
    await _send_list(message, store, tz, query)


@router.message(Command("note"))
async def note_cmd(message: Message, state: FSMContext):
    # /note <title> skips the title question
    title = command_args(message)
    if title:
        await state.update_data(note_title=title)
        await state.set_state(NotesFlow.content)
        await message.answer(ASK_NOTE_CONTENT, reply_markup=cancel_kb())
        return
    await state.set_state(NotesFlow.title)
    await message.answer(ASK_NOTE_TITLE, reply_markup=cancel_kb())


@router.callback_query(F.data == "note:new")
async def note_new_cb(cb: CallbackQuery, state: FSMContext):
    await cb.answer()
    await state.set_state(NotesFlow.title)
    await cb.message.answer(ASK_NOTE_TITLE, reply_markup=cancel_kb())


@router.message(NotesFlow.title)
async def note_title(message: Message, state: FSMContext):
    title = (message.text or "").strip()
    if not title:
        await message.answer(EMPTY_TITLE)
        return
    await state.update_data(note_title=title)
    await state.set_state(NotesFlow.content)
    await message.answer(ASK_NOTE_CONTENT, reply_markup=cancel_kb())


@router.message(NotesFlow.content)
async def note_content(message: Message, state: FSMContext, store: AppStore, tz: tzinfo):
    data = await state.get_data()
    content, tags = split_content(message.text or "")
    note = store.notes.add(title=data.get("note_title", ""), content=content, tags=tags or None)
    await state.clear()
    if note is None:
        await message.answer(EMPTY_TITLE, reply_markup=main_menu_kb())
        return
    await message.answer(NOTE_ADDED, reply_markup=main_menu_kb())
    await message.answer(render_note(note, store, tz), reply_markup=note_kb(note.id))


@router.callback_query(F.data == "note:list")
async def note_list_cb(cb: CallbackQuery, store: AppStore, tz: tzinfo):
    await cb.answer()
    await _send_list(cb.message, store, tz, prefer_edit=True)


@router.callback_query(F.data.startswith("note:view:"))
async def note_view(cb: CallbackQuery, store: AppStore, tz: tzinfo):
    note_id = cb.data.split(":")[-1]
    note = store.notes.get(note_id)
    if note is None:
        await cb.answer(NOTE_NOT_FOUND, show_alert=True)
        return
    await cb.answer()
    await send_or_edit(cb.message, render_note(note, store, tz), note_kb(note.id), prefer_edit=True)


@router.callback_query(F.data.startswith("note:del:"))
async def note_delete(cb: CallbackQuery, store: AppStore, tz: tzinfo):
    note_id = cb.data.split(":")[-1]
    if store.notes.remove(note_id) is None:
        await cb.answer(NOTE_NOT_FOUND, show_alert=True)
        return
    await cb.answer("Deleted 🗑️")
    await _send_list(cb.message, store, tz, prefer_edit=True)
