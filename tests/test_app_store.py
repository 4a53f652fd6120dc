"""
AppStore: local preferences, category references and the durable snapshot.
"""
from __future__ import annotations

import asyncio
from datetime import time

from app.constants import STATE_ORPHANED
from app.domain.sync.store import AppStore
from app.models import PrayerTime
from fakes import FakeRemote, FixedClock, RecordingNotifier, SeqIds, note_payload, task_payload


def _store(tasks=None, notes=None, events=None, ids=None):
    remotes = {
        "tasks": FakeRemote("task", tasks),
        "notes": FakeRemote("note", notes),
        "events": FakeRemote("event", events),
    }
    notifier = RecordingNotifier()
    store = AppStore(
        tasks_api=remotes["tasks"],
        notes_api=remotes["notes"],
        events_api=remotes["events"],
        notifier=notifier,
        clock=FixedClock(),
        ids=ids or SeqIds("id"),
    )
    return store, remotes, notifier


def test_defaults_are_seeded():
    async def run():
        store, _, _ = _store()
        assert [c.name for c in store.categories] == ["Personal", "Work", "Study", "Health", "Finance"]
        assert len(store.life_balance_areas) == 6
        assert [p.name for p in store.prayer_times][:3] == ["Fajr", "Sunrise", "Dhuhr"]
        assert store.pomodoro_settings.work_duration == 25

    asyncio.run(run())


def test_deleted_category_leaves_dangling_reference():
    async def run():
        store, _, _ = _store()
        work = store.add_category("Side project", "#123456")
        task = store.tasks.add(title="Ship it", category=work.id)
        assert store.category_for(task.category) == work

        assert store.delete_category(work.id) == work
        assert store.tasks.get(task.id).category == work.id
        assert store.category_for(task.category) is None
        assert store.delete_category(work.id) is None
        await store.drain()

    asyncio.run(run())


def test_category_validation():
    async def run():
        store, _, _ = _store()
        before = store.categories
        assert store.add_category("   ", "#000000") is None
        assert store.categories == before

        first = store.categories[0]
        renamed = store.update_category(first.id, name="Home")
        assert renamed.name == "Home"
        assert store.update_category("missing", name="x") is None

    asyncio.run(run())


def test_pomodoro_settings_must_be_positive_minutes():
    async def run():
        store, _, _ = _store()
        assert store.update_pomodoro_settings(work_duration=0) is None
        assert store.update_pomodoro_settings(short_break_duration="5") is None
        assert store.pomodoro_settings.work_duration == 25

        updated = store.update_pomodoro_settings(work_duration=50, sessions_until_long_break=2)
        assert updated.work_duration == 50
        assert updated.short_break_duration == 5
        assert store.pomodoro_settings == updated

    asyncio.run(run())


def test_life_balance_value_stays_in_range():
    async def run():
        store, _, _ = _store()
        area = store.life_balance_areas[0]
        assert store.update_life_balance_area(area.id, value=11) is None
        assert store.update_life_balance_area(area.id, value=0) is None
        assert store.update_life_balance_area(area.id, value="abc") is None
        assert store.update_life_balance_area(area.id, value=None) is None
        assert store.update_life_balance_area(area.id, value=10).value == 10
        assert store.update_life_balance_area("missing", value=5) is None

    asyncio.run(run())


def test_subscribe_and_unsubscribe():
    async def run():
        store, _, _ = _store()
        seen = []
        unsubscribe = store.subscribe(lambda s: seen.append(len(s.categories)))

        store.add_category("Kids", "#ffffff")
        store.set_prayer_times([PrayerTime(name="Fajr", time=time(5, 0))])
        assert seen == [6, 6]

        unsubscribe()
        store.add_category("Garden", "#00ff00")
        assert seen == [6, 6]

    asyncio.run(run())


def test_fetch_everything_loads_all_kinds():
    async def run():
        store, remotes, notifier = _store(
            tasks=[task_payload("t1", "Task")],
            notes=[note_payload("n1", "Note")],
        )
        remotes["events"].fail.add("list")

        assert await store.fetch_everything() == (True, True, False)
        assert [t.id for t in store.tasks.items] == ["t1"]
        assert [n.id for n in store.notes.items] == ["n1"]
        assert notifier.errors == ["Failed to load events from server."]

    asyncio.run(run())


def test_snapshot_restore_keeps_local_only_records():
    """Unsynced creates come back as local-only records after a restart."""
    async def run():
        store, remotes, _ = _store(tasks=[task_payload("t1", "Synced")])
        await store.fetch_everything()
        remotes["tasks"].fail.add("create")
        store.tasks.add(title="Offline")
        pending_gate = remotes["notes"].hold("create")
        store.notes.add(title="Half written", tags=["x"])
        await asyncio.sleep(0)
        store.update_pomodoro_settings(work_duration=45)
        store.add_category("Quran", "#0f766e")

        snap = store.snapshot()
        assert snap["version"] == 1
        assert snap["state"]["pomodoroSettings"]["workDuration"] == 45
        assert "loading" not in snap["state"]["tasks"]

        fresh, fresh_remotes, _ = _store()
        assert fresh.restore(snap) is True
        assert [t.title for t in fresh.tasks.items] == ["Synced", "Offline"]
        offline = fresh.tasks.items[1]
        assert fresh.tasks.state_of(offline.id) == STATE_ORPHANED
        assert fresh.notes.state_of(fresh.notes.items[0].id) == STATE_ORPHANED
        assert fresh.notes.items[0].tags == ("x",)
        assert fresh.pomodoro_settings.work_duration == 45
        assert fresh.categories[-1].name == "Quran"
        assert fresh.prayer_times == store.prayer_times

        # local-only records are edited without remote calls
        fresh.tasks.update(offline.id, title="Offline 2")
        await fresh.drain()
        assert fresh_remotes["tasks"].calls == []

        pending_gate.set()
        await store.drain()

    asyncio.run(run())


def test_restore_ignores_unknown_version():
    async def run():
        store, _, _ = _store()
        assert store.restore({"version": 99, "state": {"categories": []}}) is False
        assert len(store.categories) == 5

    asyncio.run(run())


def test_restore_keeps_sections_missing_from_snapshot():
    async def run():
        store, _, _ = _store()
        assert store.restore({"version": 1, "state": {"pomodoroSettings": {"workDuration": 30}}}) is True
        assert store.pomodoro_settings.work_duration == 30
        assert store.pomodoro_settings.long_break_duration == 15
        assert len(store.categories) == 5

    asyncio.run(run())
