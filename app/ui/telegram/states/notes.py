from aiogram.fsm.state import StatesGroup, State


class NotesFlow(StatesGroup):
    title = State()
    content = State()
