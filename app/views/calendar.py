from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Sequence, Tuple

from app.models import CalendarEvent

# react-day-picker style: weeks start on Sunday
SUNDAY = 6
EVENTS_PER_DAY = 3


@dataclass(frozen=True)
class CalendarCell:
    day: date
    in_month: bool
    is_today: bool
    events: Tuple[CalendarEvent, ...]  # first EVENTS_PER_DAY of the day
    more: int  # events not shown


def local_day(dt: datetime, tz: tzinfo) -> date:
    return dt.astimezone(tz).date()


def events_on(events: Iterable[CalendarEvent], day: date, tz: tzinfo) -> List[CalendarEvent]:
    """Events starting on `day` (in tz), earliest first."""
    return sorted((e for e in events if local_day(e.start, tz) == day), key=lambda e: e.start)


def month_bounds(day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """[first day 00:00, last day 23:59:59] of day's month."""
    last = _calendar.monthrange(day.year, day.month)[1]
    start = datetime(day.year, day.month, 1, tzinfo=tz)
    end = datetime(day.year, day.month, last, 23, 59, 59, tzinfo=tz)
    return start, end


def events_in_month(events: Iterable[CalendarEvent], day: date, tz: tzinfo) -> List[CalendarEvent]:
    start, end = month_bounds(day, tz)
    return sorted((e for e in events if start <= e.start <= end), key=lambda e: e.start)


def month_grid(year: int, month: int, first_weekday: int = SUNDAY) -> List[List[date]]:
    """Full weeks covering the month, padded with days of the adjacent months."""
    return _calendar.Calendar(firstweekday=first_weekday).monthdatescalendar(year, month)


def month_view(
    events: Sequence[CalendarEvent],
    year: int,
    month: int,
    today: date,
    tz: tzinfo,
    per_day: int = EVENTS_PER_DAY,
) -> List[List[CalendarCell]]:
    by_day = {}
    for e in events:
        by_day.setdefault(local_day(e.start, tz), []).append(e)

    weeks: List[List[CalendarCell]] = []
    for week in month_grid(year, month):
        row = []
        for d in week:
            day_events = sorted(by_day.get(d, []), key=lambda e: e.start)
            row.append(
                CalendarCell(
                    day=d,
                    in_month=d.month == month,
                    is_today=d == today,
                    events=tuple(day_events[:per_day]),
                    more=max(0, len(day_events) - per_day),
                )
            )
        weeks.append(row)
    return weeks


def shift_month(day: date, months: int) -> date:
    """First day of the month `months` away from day's month."""
    idx = day.year * 12 + (day.month - 1) + months
    return date(idx // 12, idx % 12 + 1, 1)


def week_of(day: date, first_weekday: int = SUNDAY) -> List[date]:
    offset = (day.weekday() - first_weekday) % 7
    start = day - timedelta(days=offset)
    return [start + timedelta(days=i) for i in range(7)]
