from dataclasses import dataclass
import os
from pathlib import Path

from dotenv import load_dotenv

from app.constants import DEFAULT_SNAPSHOT_SLOT

load_dotenv()


@dataclass(frozen=True)
class ApiSettings:
    base_url: str
    token: str
    email: str
    password: str
    timeout_seconds: float


@dataclass(frozen=True)
class Settings:
    api: ApiSettings
    timezone: str
    db_path: Path
    snapshot_slot: str
    sync_interval_seconds: int
    bot_token: str
    owner_telegram_id: int


def load_api_settings() -> ApiSettings:
    api = ApiSettings(
        base_url=os.getenv("API_BASE_URL", "http://localhost:3000/api").strip().rstrip("/"),
        token=os.getenv("API_TOKEN", "").strip(),
        email=os.getenv("API_EMAIL", "").strip(),
        password=os.getenv("API_PASSWORD", ""),
        timeout_seconds=float(os.getenv("API_TIMEOUT_SECONDS", "10").strip()),
    )
    if not api.token and not (api.email and api.password):
        raise RuntimeError("API_TOKEN or API_EMAIL + API_PASSWORD missing in .env")
    return api


def load_settings() -> Settings:
    bot_token = os.getenv("BOT_TOKEN", "").strip()
    owner_id = int(os.getenv("OWNER_TELEGRAM_ID", "0").strip() or "0")
    tz = os.getenv("TZ", "Europe/Helsinki").strip()
    db_raw = os.getenv("DB_PATH", "data/ihsan.db").strip()
    slot = os.getenv("SNAPSHOT_SLOT", DEFAULT_SNAPSHOT_SLOT).strip()
    sync_interval = int(os.getenv("SYNC_INTERVAL_SECONDS", "300").strip() or "0")

    if not bot_token:
        raise RuntimeError("BOT_TOKEN missing in .env")
    if owner_id <= 0:
        raise RuntimeError("OWNER_TELEGRAM_ID missing/invalid in .env")

    # db_path may still be relative; main.py resolves it against the repo root
    return Settings(
        api=load_api_settings(),
        timezone=tz,
        db_path=Path(db_raw),
        snapshot_slot=slot or DEFAULT_SNAPSHOT_SLOT,
        sync_interval_seconds=sync_interval,
        bot_token=bot_token,
        owner_telegram_id=owner_id,
    )
