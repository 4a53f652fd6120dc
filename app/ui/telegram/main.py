from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from app.config import Settings, load_settings
from app.constants import MSG_SESSION_EXPIRED
from app.domain.common.errors import RemoteError
from app.domain.common.time import to_iso
from app.domain.sync.persist import SnapshotPersister
from app.domain.sync.store import AppStore
from app.infra.api.client import ApiClient
from app.infra.clock.system_clock import SystemClock
from app.infra.db.connection import Database
from app.infra.db.repo.snapshot_sqlite import SnapshotSqliteRepo
from app.infra.db.schema_version import apply_migrations
from app.infra.ids.uuid_gen import UuidGenerator
from app.infra.notify.telegram import TelegramNotifier
from app.infra.scheduler.loop import SchedulerLoop

from app.ui.telegram.handlers.balance import router as balance_router
from app.ui.telegram.handlers.calendar import router as calendar_router
from app.ui.telegram.handlers.cancel import router as cancel_router
from app.ui.telegram.handlers.categories import router as categories_router
from app.ui.telegram.handlers.mainmenu import router as mainmenu_router
from app.ui.telegram.handlers.notes import router as notes_router
from app.ui.telegram.handlers.pomodoro import router as pomodoro_router
from app.ui.telegram.handlers.prayer import router as prayer_router
from app.ui.telegram.handlers.start import router as start_router
from app.ui.telegram.handlers.tasks import router as tasks_router
from app.ui.telegram.middlewares.auth import OwnerOnlyMiddleware
from app.ui.telegram.middlewares.di import DIMiddleware
from app.ui.telegram.utils.pomodoro_session import PomodoroSession

logger = logging.getLogger(__name__)

POMODORO_TICK_SECONDS = 1


async def _ensure_login(api: ApiClient, settings: Settings) -> bool:
    if api.is_authenticated:
        return True
    if not (settings.api.email and settings.api.password):
        return False
    try:
        await api.login(settings.api.email, settings.api.password)
    except RemoteError as e:
        logger.error("Login failed: %s", e)
        return False
    logger.info("Logged in as %s", settings.api.email)
    return True


async def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()

    repo_root = Path(__file__).resolve().parents[3]  # .../app/ui/telegram/main.py -> repo root

    # --- DB path: one place, always absolute, ensure dir exists ---
    db_path = settings.db_path
    if not db_path.is_absolute():
        db_path = repo_root / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("DB_PATH: %s", db_path)

    db = Database(str(db_path))
    clock = SystemClock(settings.timezone)
    ids = UuidGenerator()

    # --- migrations ---
    applied = await apply_migrations(db=db, now_iso=to_iso(clock.now()))
    logger.info("Applied %d migration(s)", applied)

    # --- bot/dispatcher ---
    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = Dispatcher()
    owner_chat = settings.owner_telegram_id

    # --- API + store ---
    api = ApiClient(
        settings.api.base_url,
        token=settings.api.token,
        timeout_seconds=settings.api.timeout_seconds,
    )

    async def session_expired() -> None:
        await bot.send_message(chat_id=owner_chat, text=f"⚠️ {MSG_SESSION_EXPIRED}")

    api.set_on_unauthorized(session_expired)

    store = AppStore(
        tasks_api=api.tasks(),
        notes_api=api.notes(),
        events_api=api.events(),
        notifier=TelegramNotifier(bot, owner_chat),
        clock=clock,
        ids=ids,
    )

    persister = SnapshotPersister(store, SnapshotSqliteRepo(db), settings.snapshot_slot, clock)
    await persister.hydrate()
    persister.attach()

    async def announce(text: str) -> None:
        await bot.send_message(chat_id=owner_chat, text=f"🍅 {text}")

    pomodoro = PomodoroSession(store.pomodoro_settings, announce)

    # --- middlewares ---
    dp.message.middleware(OwnerOnlyMiddleware(settings.owner_telegram_id))
    dp.callback_query.middleware(OwnerOnlyMiddleware(settings.owner_telegram_id))

    dp.message.middleware(DIMiddleware(store, clock, pomodoro))
    dp.callback_query.middleware(DIMiddleware(store, clock, pomodoro))

    # --- routers ---
    dp.include_router(start_router)
    dp.include_router(cancel_router)
    dp.include_router(mainmenu_router)
    dp.include_router(tasks_router)
    dp.include_router(notes_router)
    dp.include_router(calendar_router)
    dp.include_router(prayer_router)
    dp.include_router(balance_router)
    dp.include_router(pomodoro_router)
    dp.include_router(categories_router)

    # --- scheduler (background) ---
    scheduler = SchedulerLoop()

    async def auto_sync() -> None:
        if await _ensure_login(api, settings):
            await store.fetch_everything()

    async def pomodoro_tick() -> None:
        await pomodoro.tick(POMODORO_TICK_SECONDS)

    if settings.sync_interval_seconds > 0:
        scheduler.register("sync", settings.sync_interval_seconds, auto_sync, run_immediately=True)
    else:
        await auto_sync()
    scheduler.register("pomodoro", POMODORO_TICK_SECONDS, pomodoro_tick)

    scheduler_task = asyncio.create_task(scheduler.run_forever())

    logger.info("Starting polling...")

    try:
        await dp.start_polling(bot)
    finally:
        scheduler.stop()
        scheduler_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scheduler_task
        await store.drain()
        persister.detach()
        await persister.flush()
        await api.close()
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
