from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Sequence

from app.models import PrayerTime


@dataclass(frozen=True)
class ScheduledPrayer:
    prayer: PrayerTime
    at: datetime

    @property
    def name(self) -> str:
        return self.prayer.name


def schedule_for(prayers: Sequence[PrayerTime], day: date, tz: tzinfo) -> List[ScheduledPrayer]:
    """Prayer times placed on `day`, earliest first."""
    scheduled = [
        ScheduledPrayer(p, datetime.combine(day, p.time.replace(second=0, microsecond=0), tzinfo=tz))
        for p in prayers
    ]
    return sorted(scheduled, key=lambda s: s.at)


def next_prayer(prayers: Sequence[PrayerTime], now: datetime) -> Optional[ScheduledPrayer]:
    """The first prayer after now; after the last one of the day, tomorrow's first."""
    today = schedule_for(prayers, now.date(), now.tzinfo)
    if not today:
        return None
    for s in today:
        if s.at > now:
            return s
    first = today[0]
    return ScheduledPrayer(first.prayer, first.at + timedelta(days=1))


def is_passed(scheduled: ScheduledPrayer, now: datetime) -> bool:
    return scheduled.at < now


def time_until(at: datetime, now: datetime) -> Optional[str]:
    """'1h 2m 3s', or '2m 3s' under an hour; None once `at` has passed."""
    seconds = int((at - now).total_seconds())
    if seconds < 0:
        return None
    hours, rest = divmod(seconds, 3600)
    mins, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {mins}m {secs}s"
    return f"{mins}m {secs}s"
