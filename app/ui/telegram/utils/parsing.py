from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Optional, Tuple

from aiogram.types import Message

from app.models import PRIORITIES


def command_args(message: Message) -> str:
    text = (message.text or "").strip()
    parts = text.split(maxsplit=1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()


def parse_clock(raw: str) -> time:
    """
    Accepts:
      - HHMM   (e.g. 0730)
      - HH:MM  (e.g. 07:30)
    """
    raw = (raw or "").strip()
    if len(raw) == 5 and raw[2] == ":" and raw[:2].isdigit() and raw[3:].isdigit():
        return time(int(raw[:2]), int(raw[3:]))
    if len(raw) == 4 and raw.isdigit():
        return time(int(raw[:2]), int(raw[2:]))
    raise ValueError("Invalid time format")


def parse_day(raw: str, today: date) -> date:
    """YYYY-MM-DD, 'today' or 'tomorrow'."""
    raw = (raw or "").strip().lower()
    if raw == "today":
        return today
    if raw == "tomorrow":
        return date.fromordinal(today.toordinal() + 1)
    return date.fromisoformat(raw)


def parse_month(raw: str, today: date) -> date:
    """YYYY-MM -> first day of that month; empty -> current month."""
    raw = (raw or "").strip()
    if not raw:
        return today.replace(day=1)
    year, month = raw.split("-", 1)
    return date(int(year), int(month), 1)


def split_priority(text: str) -> Tuple[str, Optional[str]]:
    """'Buy milk !high' -> ('Buy milk', 'high')"""
    words = text.split()
    if words and words[-1].startswith("!") and words[-1][1:].lower() in PRIORITIES:
        return " ".join(words[:-1]), words[-1][1:].lower()
    return text.strip(), None


def parse_event_args(raw: str, today: date, tz: tzinfo) -> Tuple[datetime, datetime, str]:
    """
    '<day> <HH:MM> <HH:MM> <title>' e.g. 'tomorrow 09:00 10:30 Dentist'.
    An end before the start means the event runs past midnight.
    """
    parts = raw.split(maxsplit=3)
    if len(parts) < 4:
        raise ValueError("Expected: <day> <start> <end> <title>")
    day = parse_day(parts[0], today)
    start = datetime.combine(day, parse_clock(parts[1]), tzinfo=tz)
    end = datetime.combine(day, parse_clock(parts[2]), tzinfo=tz)
    if end < start:
        end = datetime.combine(date.fromordinal(day.toordinal() + 1), end.timetz())
    return start, end, parts[3].strip()
