"""
camelCase codec shared by the REST API and the snapshot.
"""
from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

import pytest

from app.domain.common.errors import ValidationError
from app.domain.common.time import from_iso, to_iso
from app.models import Note, PrayerTime, Task, fields_to_wire, from_wire, normalize_fields, to_wire


def test_api_task_payload_is_decoded():
    task = from_wire(
        Task,
        {
            "id": "t1",
            "title": "Pay rent",
            "completed": True,
            "dueDate": "2025-04-01T00:00:00.000Z",
            "createdAt": "2025-03-01T08:00:00Z",
            "updatedAt": "2025-03-02T08:00:00Z",
            "user": {"id": 7},
        },
    )
    assert task.due_date == datetime(2025, 4, 1, tzinfo=timezone.utc)
    assert task.completed is True
    assert task.priority is None


def test_payload_missing_required_field_is_rejected():
    with pytest.raises(ValidationError):
        from_wire(Task, {"id": "t1", "createdAt": "2025-03-01T08:00:00Z"})


def test_payload_with_bad_values_is_rejected():
    with pytest.raises(ValidationError):
        from_wire(Task, {"id": "t1", "title": "x", "createdAt": "not-a-date"})
    with pytest.raises(ValidationError):
        from_wire(PrayerTime, {"name": "Fajr", "time": "25:99"})
    with pytest.raises(ValidationError):
        from_wire(Task, ["t1"])


def test_fields_are_sent_in_camel_case_utc():
    helsinki = timezone(timedelta(hours=2))
    body = fields_to_wire({"due_date": datetime(2025, 4, 1, 2, 0, tzinfo=helsinki), "title": "x"})
    assert body == {"dueDate": "2025-04-01T00:00:00Z", "title": "x"}


def test_note_and_prayer_encoding():
    now = datetime(2025, 3, 10, 9, tzinfo=timezone.utc)
    note = Note(id="n", title="t", created_at=now, updated_at=now, tags=("a",))
    assert to_wire(note)["tags"] == ["a"]
    assert to_wire(PrayerTime("Fajr", time(5, 30), "الفجر")) == {
        "name": "Fajr",
        "time": "05:30",
        "arabicName": "الفجر",
    }


def test_normalize_fields_rules():
    assert normalize_fields(Task, {"title": "  x  "}) == {"title": "x"}
    with pytest.raises(TypeError):
        normalize_fields(Task, {"colour": "red"})
    with pytest.raises(ValidationError):
        normalize_fields(Task, {"due_date": datetime(2025, 1, 1)})


def test_iso_helpers():
    assert from_iso("2025-03-10T09:00:00Z") == datetime(2025, 3, 10, 9, tzinfo=timezone.utc)
    assert from_iso("2025-03-10T09:00:00").tzinfo == timezone.utc
    assert to_iso(datetime(2025, 3, 10, 11, tzinfo=timezone(timedelta(hours=2)))) == "2025-03-10T09:00:00Z"
    with pytest.raises(ValueError):
        to_iso(datetime(2025, 3, 10))
