"""
Optimistic create / update / delete and their reconciliation with the remote API.

Run with: python -m pytest tests/test_sync_collection.py -v
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.constants import STATE_CONFIRMED, STATE_ORPHANED, STATE_PENDING
from app.domain.common.errors import NotFoundError
from app.domain.sync.collection import EventCollection, NoteCollection, TaskCollection
from fakes import (
    T0,
    BrokenNotifier,
    FakeRemote,
    FixedClock,
    RecordingNotifier,
    SeqIds,
    event_payload,
    note_payload,
    task_payload,
)


class Changes:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


def _tasks(records=None, notifier=None):
    remote = FakeRemote("task", records)
    notifier = notifier or RecordingNotifier()
    changes = Changes()
    col = TaskCollection(remote, notifier, FixedClock(), SeqIds(), changes)
    return col, remote, notifier, changes


async def _seeded(*records):
    col, remote, notifier, changes = _tasks(list(records))
    assert await col.fetch_all() is True
    return col, remote, notifier, changes


# ----- create -----


def test_add_is_visible_before_server_answers():
    """The record is in the list with a temporary id right after add()."""
    async def run():
        col, remote, notifier, _ = _tasks()
        gate = remote.hold("create")

        task = col.add(title="  Buy milk ", priority="high")
        assert task is not None
        assert task.id == "tmp-1"
        assert task.title == "Buy milk"
        assert task.completed is False
        assert task.created_at == T0
        assert [t.id for t in col.items] == ["tmp-1"]
        assert col.state_of("tmp-1") == STATE_PENDING

        gate.set()
        await col.drain()
        assert [t.id for t in col.items] == ["srv-101"]
        assert col.items[0].priority == "high"
        assert col.state_of("srv-101") == STATE_CONFIRMED
        assert notifier.successes == ["Task saved"]
        assert remote.ops("create") == [("create", {"title": "Buy milk", "priority": "high"})]

    asyncio.run(run())


def test_failed_create_keeps_record_as_local_only():
    """A failed create leaves the temp record in place and marks it orphaned."""
    async def run():
        col, remote, notifier, _ = _tasks()
        remote.fail.add("create")

        col.add(title="Offline task")
        await col.drain()

        assert [t.title for t in col.items] == ["Offline task"]
        assert col.state_of("tmp-1") == STATE_ORPHANED
        assert notifier.errors == ["Failed to save task to server. Changes saved locally."]
        assert notifier.successes == []

    asyncio.run(run())


def test_local_only_record_never_reaches_remote():
    """Update and remove of an orphaned record stay local."""
    async def run():
        col, remote, notifier, _ = _tasks()
        remote.fail.add("create")
        col.add(title="Offline task")
        await col.drain()

        assert col.update("tmp-1", title="Renamed").title == "Renamed"
        await col.drain()
        assert col.remove("tmp-1") is not None
        await col.drain()

        assert col.items == ()
        assert remote.ops("update") == []
        assert remote.ops("delete") == []

    asyncio.run(run())


def test_add_with_blank_title_is_rejected_quietly():
    async def run():
        col, remote, notifier, changes = _tasks()
        assert col.add(title="   ") is None
        assert col.add(title="ok", priority="urgent") is None
        await col.drain()
        assert col.items == ()
        assert remote.calls == []
        assert notifier.errors == [] and notifier.successes == []
        assert changes.count == 0

    asyncio.run(run())


def test_unknown_field_is_a_programming_error():
    async def run():
        col, _, _, _ = _tasks()
        with pytest.raises(TypeError):
            col.add(title="x", colour="red")
        with pytest.raises(TypeError):
            col.add(id="mine", title="x")

    asyncio.run(run())


# ----- update -----


def test_update_applies_locally_then_confirms():
    async def run():
        col, remote, notifier, _ = await _seeded(task_payload("t1", "Old"))

        updated = col.update("t1", title="New")
        assert updated.title == "New"
        assert col.get("t1").title == "New"

        await col.drain()
        assert remote.ops("update") == [("update", "t1", {"title": "New"})]
        assert col.get("t1").title == "New"
        assert notifier.successes == ["Task updated"]

    asyncio.run(run())


def test_failed_update_is_not_reverted():
    async def run():
        col, remote, notifier, _ = await _seeded(task_payload("t1", "Old"))
        remote.fail.add("update")

        col.update("t1", title="New")
        await col.drain()

        assert col.get("t1").title == "New"
        assert notifier.errors == ["Failed to update task on server. Changes saved locally."]

    asyncio.run(run())


def test_complete_toggles_and_reports_status_failure():
    async def run():
        col, remote, notifier, _ = await _seeded(task_payload("t1", "Walk"))
        assert col.complete("t1").completed is True
        await col.drain()
        assert remote.ops("update") == [("update", "t1", {"completed": True})]

        remote.fail.add("update")
        assert col.complete("t1").completed is False
        await col.drain()
        assert col.get("t1").completed is False
        assert notifier.errors == ["Failed to update task status on server. Changes saved locally."]

    asyncio.run(run())


def test_update_of_unknown_id_returns_none():
    async def run():
        col, remote, _, _ = await _seeded(task_payload("t1", "Walk"))
        assert col.update("nope", title="x") is None
        assert col.complete("nope") is None
        assert col.remove("nope") is None
        await col.drain()
        assert remote.ops("update") == [] and remote.ops("delete") == []

    asyncio.run(run())


def test_stale_update_confirmation_is_discarded():
    """An older update answering after a newer one must not overwrite the newer value."""
    async def run():
        col, remote, _, _ = await _seeded(task_payload("t1", "Old"))
        gate = remote.hold("update")

        col.update("t1", title="First")
        col.update("t1", title="Second")
        # let the second request finish while the first is still held
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        gate.set()
        await col.drain()

        assert [c[2] for c in remote.ops("update")] == [{"title": "First"}, {"title": "Second"}]
        assert col.get("t1").title == "Second"

    asyncio.run(run())


def test_server_fields_are_merged_into_confirmed_record():
    async def run():
        col, remote, _, _ = await _seeded(task_payload("t1", "Old"))
        remote.records["t1"]["description"] = "set by server"

        col.update("t1", title="New")
        await col.drain()

        assert col.get("t1").title == "New"
        assert col.get("t1").description == "set by server"

    asyncio.run(run())


# ----- delete -----


def test_remove_drops_record_and_confirms():
    async def run():
        col, remote, notifier, _ = await _seeded(task_payload("t1", "A"), task_payload("t2", "B"))
        removed = col.remove("t1")
        assert removed.title == "A"
        assert [t.id for t in col.items] == ["t2"]

        await col.drain()
        assert remote.ops("delete") == [("delete", "t1")]
        assert notifier.successes == ["Task deleted"]

    asyncio.run(run())


def test_failed_remove_reappends_record_at_the_end():
    async def run():
        col, remote, notifier, _ = await _seeded(task_payload("t1", "A"), task_payload("t2", "B"))
        remote.fail.add("delete")

        col.remove("t1")
        await col.drain()

        assert [t.id for t in col.items] == ["t2", "t1"]
        assert notifier.errors == ["Failed to delete task on server. Restoring task locally."]

    asyncio.run(run())


def test_failed_note_remove_restores_title_and_content():
    async def run():
        remote = FakeRemote("note", [note_payload("n1", "Groceries", content="milk, dates")])
        notifier = RecordingNotifier()
        col = NoteCollection(remote, notifier, FixedClock(), SeqIds(), Changes())
        await col.fetch_all()
        remote.fail.add("delete")

        col.remove("n1")
        assert col.items == ()
        await col.drain()

        [note] = col.items
        assert (note.id, note.title, note.content) == ("n1", "Groceries", "milk, dates")
        assert notifier.errors == ["Failed to delete note on server. Restoring note locally."]

    asyncio.run(run())


# ----- mutations while a create is in flight -----


def test_update_during_create_is_replayed_on_server_id():
    async def run():
        col, remote, _, _ = _tasks()
        gate = remote.hold("create")

        col.add(title="Draft")
        assert col.update("tmp-1", title="Final").title == "Final"
        await asyncio.sleep(0)
        assert remote.ops("update") == []

        gate.set()
        await col.drain()

        assert [(t.id, t.title) for t in col.items] == [("srv-101", "Final")]
        assert remote.ops("update") == [("update", "srv-101", {"title": "Final"})]
        assert remote.records["srv-101"]["title"] == "Final"

    asyncio.run(run())


def test_remove_during_create_deletes_server_record():
    async def run():
        col, remote, _, _ = _tasks()
        gate = remote.hold("create")

        col.add(title="Oops")
        col.remove("tmp-1")
        assert col.items == ()

        gate.set()
        await col.drain()

        assert col.items == ()
        assert remote.ops("delete") == [("delete", "srv-101")]
        assert remote.records == {}

    asyncio.run(run())


def test_create_confirmed_after_refresh_is_appended():
    """fetch_all() replaced the list while the create was in flight."""
    async def run():
        col, remote, _, _ = await _seeded(task_payload("t1", "Existing"))
        gate = remote.hold("create")

        col.add(title="New")
        assert await col.fetch_all() is True
        assert [t.id for t in col.items] == ["t1"]

        gate.set()
        await col.drain()
        assert [t.id for t in col.items] == ["t1", "srv-101"]

    asyncio.run(run())


# ----- fetch -----


def test_fetch_all_replaces_items_and_tracks_loading():
    async def run():
        col, remote, notifier, _ = _tasks([task_payload("t1", "A")])
        gate = remote.hold("list")

        fetch = asyncio.get_running_loop().create_task(col.fetch_all())
        await asyncio.sleep(0)
        assert col.loading is True

        gate.set()
        assert await fetch is True
        assert col.loading is False
        assert [t.title for t in col.items] == ["A"]
        assert notifier.successes == [] and notifier.errors == []

    asyncio.run(run())


def test_repeated_fetch_all_is_idempotent():
    async def run():
        col, remote, notifier, _ = _tasks([task_payload("t1", "A"), task_payload("t2", "B", priority="low")])
        assert col.loading is False

        assert await col.fetch_all() is True
        first = col.items
        assert col.loading is False

        assert await col.fetch_all() is True
        assert col.items == first
        assert col.loading is False
        assert remote.ops("list") == [("list",), ("list",)]
        assert notifier.errors == []

    asyncio.run(run())


def test_fetch_all_failure_keeps_items():
    async def run():
        col, remote, notifier, _ = await _seeded(task_payload("t1", "A"))
        remote.fail.add("list")

        assert await col.fetch_all() is False
        assert col.loading is False
        assert [t.id for t in col.items] == ["t1"]
        assert notifier.errors == ["Failed to load tasks from server."]

    asyncio.run(run())


def test_fetch_all_forgets_local_only_records_it_replaced():
    async def run():
        col, remote, _, _ = _tasks([task_payload("t1", "A")])
        remote.fail.add("create")
        col.add(title="Offline")
        await col.drain()
        assert col.state_of("tmp-1") == STATE_ORPHANED

        await col.fetch_all()
        assert col.state_of("tmp-1") is None
        assert col.snapshot()["localOnly"] == []

    asyncio.run(run())


def test_fetch_one_upserts_and_raises_not_found():
    async def run():
        col, remote, notifier, _ = await _seeded(task_payload("t1", "A"))
        remote.records["t1"]["title"] = "A2"
        remote.records["t2"] = task_payload("t2", "B")

        assert (await col.fetch_one("t1")).title == "A2"
        assert (await col.fetch_one("t2")).title == "B"
        assert [t.title for t in col.items] == ["A2", "B"]

        with pytest.raises(NotFoundError) as exc:
            await col.fetch_one("missing")
        assert str(exc.value) == "task with ID missing not found"

        remote.fail.add("get")
        assert await col.fetch_one("t1") is None
        assert notifier.errors == ["Failed to load tasks from server."]

    asyncio.run(run())


# ----- notes / events -----


def test_note_update_stamps_updated_at():
    async def run():
        remote = FakeRemote("note", [note_payload("n1", "Idea")])
        clock = FixedClock()
        col = NoteCollection(remote, RecordingNotifier(), clock, SeqIds(), Changes())
        await col.fetch_all()

        clock.advance(hours=2)
        note = col.update("n1", content="details", tags=[" a ", "", "b"])
        assert note.updated_at == T0 + timedelta(hours=2)
        assert note.tags == ("a", "b")
        await col.drain()
        assert remote.ops("update") == [("update", "n1", {"content": "details", "tags": ["a", "b"]})]

    asyncio.run(run())


def test_event_requires_valid_range():
    async def run():
        remote = FakeRemote("event")
        col = EventCollection(remote, RecordingNotifier(), FixedClock(), SeqIds(), Changes())
        start = datetime(2025, 3, 12, 10, tzinfo=timezone.utc)

        assert col.add(title="Backwards", start=start, end=start - timedelta(hours=1)) is None
        assert col.add(title="No end", start=start) is None
        assert col.add(title="Naive", start=datetime(2025, 3, 12, 10), end=start) is None

        event = col.add(title="Meeting", start=start, end=start + timedelta(hours=1))
        assert event is not None
        assert col.update(event.id, end=start - timedelta(minutes=5)) is None
        await col.drain()
        assert remote.ops("create") == [
            ("create", {"title": "Meeting", "start": "2025-03-12T10:00:00Z", "end": "2025-03-12T11:00:00Z"})
        ]

    asyncio.run(run())


def test_fetch_month_upserts_events():
    async def run():
        remote = FakeRemote("event", [event_payload("e1", "Old", "2025-03-01T10:00:00Z", "2025-03-01T11:00:00Z")])
        notifier = RecordingNotifier()
        col = EventCollection(remote, notifier, FixedClock(), SeqIds(), Changes())
        await col.fetch_all()

        remote.month = [
            event_payload("e1", "Moved", "2025-03-02T10:00:00Z", "2025-03-02T11:00:00Z"),
            event_payload("e2", "Dentist", "2025-03-20T08:00:00Z", "2025-03-20T09:00:00Z"),
        ]
        events = await col.fetch_month(T0)
        assert [e.id for e in events] == ["e1", "e2"]
        assert [(e.id, e.title) for e in col.items] == [("e1", "Moved"), ("e2", "Dentist")]

        remote.fail.add("list_month")
        assert await col.fetch_month(T0) is None
        assert notifier.errors == ["Failed to load events from server."]

    asyncio.run(run())


def test_broken_notifier_does_not_break_reconciliation():
    async def run():
        col, remote, _, _ = _tasks(notifier=BrokenNotifier())
        col.add(title="Still syncs")
        await col.drain()
        assert [t.id for t in col.items] == ["srv-101"]

    asyncio.run(run())


def test_every_visible_change_is_signalled():
    async def run():
        col, remote, _, changes = _tasks()
        col.add(title="A")
        assert changes.count == 1
        await col.drain()
        # temp id swapped for the server id
        assert changes.count == 2

    asyncio.run(run())
