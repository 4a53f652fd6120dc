from __future__ import annotations

from datetime import tzinfo

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from app.domain.sync.store import AppStore
from app.ui.telegram.keyboards.mainmenu import BTN_ADD_TASK, BTN_TASKS, main_menu_kb
from app.ui.telegram.keyboards.tasks import FILTERS, tasks_list_kb
from app.ui.telegram.states.tasks import TasksFlow
from app.ui.telegram.texts.prompts import (
    ASK_NEW_TASK_TITLE,
    ASK_TASK_TITLE,
    EMPTY_TITLE,
    NO_TASKS,
    TASK_ADDED,
    TASK_NOT_FOUND,
)
from app.ui.telegram.texts.render import render_tasks
from app.ui.telegram.utils.navigation import send_or_edit
from app.ui.telegram.utils.parsing import command_args, split_priority
from app.views.dashboard import visible_tasks

router = Router()


async def _current_filter(state: FSMContext) -> str:
    data = await state.get_data()
    status = data.get("task_filter", "all")
    return status if status in FILTERS else "all"


async def _send_list(
    *,
    target: Message,
    store: AppStore,
    tz: tzinfo,
    status: str,
    prefer_edit: bool,
) -> bool:
    """Returns True if the list has items, False if empty."""
    tasks = visible_tasks(store.tasks.items, status)
    if not tasks and status == "all":
        await target.answer(NO_TASKS, reply_markup=main_menu_kb())
        return False

    heading = "Tasks" if status == "all" else f"Tasks ({status})"
    await send_or_edit(target, render_tasks(tasks, store, tz, heading), tasks_list_kb(tasks, status), prefer_edit)
    return bool(tasks)


def _add_task(store: AppStore, text: str) -> bool:
    title, priority = split_priority(text)
    return store.tasks.add(title=title, priority=priority) is not None


@router.message(Command("tasks"))
@router.message(F.text == BTN_TASKS)
async def td_list(message: Message, state: FSMContext, store: AppStore, tz: tzinfo):
    await state.clear()
    await _send_list(target=message, store=store, tz=tz, status="all", prefer_edit=False)


@router.message(Command("add"))
async def td_add_cmd(message: Message, state: FSMContext, store: AppStore, tz: tzinfo):
    args = command_args(message)

    # /add <title> [!priority] -> add directly
    if args:
        if not _add_task(store, args):
            await message.answer(EMPTY_TITLE, reply_markup=main_menu_kb())
            return
        await message.answer(TASK_ADDED, reply_markup=main_menu_kb())
        await _send_list(target=message, store=store, tz=tz, status="all", prefer_edit=False)
        return

    # /add -> FSM
    await state.set_state(TasksFlow.add_title)
    await message.answer(ASK_TASK_TITLE, reply_markup=main_menu_kb())


@router.message(F.text == BTN_ADD_TASK)
async def td_add_button(message: Message, state: FSMContext):
    await state.set_state(TasksFlow.add_title)
    await message.answer(ASK_TASK_TITLE, reply_markup=main_menu_kb())


@router.message(TasksFlow.add_title)
async def td_add_title(message: Message, state: FSMContext, store: AppStore, tz: tzinfo):
    if not _add_task(store, message.text or ""):
        await message.answer(EMPTY_TITLE)
        return

    await state.clear()
    await message.answer(TASK_ADDED, reply_markup=main_menu_kb())
    await _send_list(target=message, store=store, tz=tz, status="all", prefer_edit=False)


@router.callback_query(F.data.startswith("td:filter:"))
async def td_filter(cb: CallbackQuery, state: FSMContext, store: AppStore, tz: tzinfo):
    status = cb.data.split(":")[-1]
    if status not in FILTERS:
        status = "all"
    await state.update_data(task_filter=status)
    await cb.answer()
    await _send_list(target=cb.message, store=store, tz=tz, status=status, prefer_edit=True)


@router.callback_query(F.data.startswith("td:done:"))
async def td_done(cb: CallbackQuery, state: FSMContext, store: AppStore, tz: tzinfo):
    task_id = cb.data.split(":")[-1]
    task = store.tasks.complete(task_id)
    if task is None:
        await cb.answer(TASK_NOT_FOUND, show_alert=True)
        return

    await cb.answer("Done ✅" if task.completed else "Reopened")
    status = await _current_filter(state)
    await _send_list(target=cb.message, store=store, tz=tz, status=status, prefer_edit=True)


@router.callback_query(F.data.startswith("td:del:"))
async def td_delete(cb: CallbackQuery, state: FSMContext, store: AppStore, tz: tzinfo):
    task_id = cb.data.split(":")[-1]
    if store.tasks.remove(task_id) is None:
        await cb.answer(TASK_NOT_FOUND, show_alert=True)
        return

    await cb.answer("Deleted 🗑️")
    status = await _current_filter(state)
    await _send_list(target=cb.message, store=store, tz=tz, status=status, prefer_edit=True)


@router.callback_query(F.data.startswith("td:edit:"))
async def td_edit(cb: CallbackQuery, state: FSMContext, store: AppStore):
    task_id = cb.data.split(":")[-1]
    if store.tasks.get(task_id) is None:
        await cb.answer(TASK_NOT_FOUND, show_alert=True)
        return
    await cb.answer()
    await state.update_data(edit_task_id=task_id)
    await state.set_state(TasksFlow.edit_title)
    await cb.message.answer(ASK_NEW_TASK_TITLE, reply_markup=main_menu_kb())


@router.message(TasksFlow.edit_title)
async def td_edit_title(message: Message, state: FSMContext, store: AppStore, tz: tzinfo):
    title, priority = split_priority(message.text or "")
    if not title:
        await message.answer(EMPTY_TITLE)
        return

    data = await state.get_data()
    task_id = data.get("edit_task_id")
    await state.set_state(None)
    fields = {"title": title}
    if priority:
        fields["priority"] = priority
    if not task_id or store.tasks.update(task_id, **fields) is None:
        await message.answer(TASK_NOT_FOUND, reply_markup=main_menu_kb())
        return

    await message.answer("Updated.", reply_markup=main_menu_kb())
    await _send_list(
        target=message, store=store, tz=tz, status=await _current_filter(state), prefer_edit=False
    )
