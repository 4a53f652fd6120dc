"""
Command argument parsing for the Telegram handlers.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest

from app.ui.telegram.utils.parsing import (
    parse_clock,
    parse_day,
    parse_event_args,
    parse_month,
    split_priority,
)
from app.ui.telegram.handlers.notes import split_content

TODAY = date(2025, 3, 10)
TZ = timezone(timedelta(hours=2))


def test_parse_clock_formats():
    assert parse_clock("07:30") == time(7, 30)
    assert parse_clock("0730") == time(7, 30)
    for bad in ("7:30", "", "25:00", "ab:cd"):
        with pytest.raises(ValueError):
            parse_clock(bad)


def test_parse_day_keywords():
    assert parse_day("today", TODAY) == TODAY
    assert parse_day("Tomorrow", TODAY) == date(2025, 3, 11)
    assert parse_day("2025-12-24", TODAY) == date(2025, 12, 24)
    with pytest.raises(ValueError):
        parse_day("someday", TODAY)


def test_parse_month():
    assert parse_month("", TODAY) == date(2025, 3, 1)
    assert parse_month("2024-11", TODAY) == date(2024, 11, 1)
    with pytest.raises(ValueError):
        parse_month("2024", TODAY)


def test_split_priority():
    assert split_priority("Buy milk !high") == ("Buy milk", "high")
    assert split_priority("Buy milk !HIGH") == ("Buy milk", "high")
    assert split_priority("Say hi!") == ("Say hi!", None)
    assert split_priority("Fix !urgent") == ("Fix !urgent", None)


def test_parse_event_args():
    start, end, title = parse_event_args("tomorrow 09:00 10:30 Dentist visit", TODAY, TZ)
    assert start == datetime(2025, 3, 11, 9, 0, tzinfo=TZ)
    assert end == datetime(2025, 3, 11, 10, 30, tzinfo=TZ)
    assert title == "Dentist visit"


def test_parse_event_args_past_midnight():
    start, end, _ = parse_event_args("2025-03-10 23:00 01:00 Night shift", TODAY, TZ)
    assert end - start == timedelta(hours=2)
    assert end.tzinfo is TZ
    with pytest.raises(ValueError):
        parse_event_args("today 09:00 Dentist", TODAY, TZ)


def test_note_content_tags_line():
    assert split_content("Buy things\n# home, errands") == ("Buy things", ("home", "errands"))
    assert split_content("No tags here") == ("No tags here", ())
