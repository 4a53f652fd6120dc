from aiogram.fsm.state import StatesGroup, State


class TasksFlow(StatesGroup):
    add_title = State()
    edit_title = State()
