from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from app.domain.sync.ports import Clock


class SystemClock(Clock):
    """Wall clock in the user's timezone (aware datetimes only)."""

    def __init__(self, tz_name: str) -> None:
        self._tz = ZoneInfo(tz_name)

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)
