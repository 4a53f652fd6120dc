"""
HTML message bodies: escaping and the text month grid.
"""
from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta, timezone

from app.domain.sync.store import AppStore
from app.models import CalendarEvent
from app.ui.telegram.texts.render import render_balance, render_dashboard, render_month, render_tasks
from app.views.calendar import month_view
from fakes import FakeRemote, FixedClock, RecordingNotifier, SeqIds, T0

UTC = timezone.utc


def _store() -> AppStore:
    return AppStore(
        tasks_api=FakeRemote("task"),
        notes_api=FakeRemote("note"),
        events_api=FakeRemote("event"),
        notifier=RecordingNotifier(),
        clock=FixedClock(),
        ids=SeqIds(),
    )


def test_task_titles_are_escaped_and_category_resolved():
    async def run():
        store = _store()
        work = store.categories[1]
        store.tasks.add(title="<b>x</b> & y", priority="high", category=work.id)
        text = render_tasks(store.tasks.items, store, UTC)
        assert "&lt;b&gt;x&lt;/b&gt; &amp; y" in text
        assert "[Work]" in text
        assert "🔴" in text

        store.delete_category(work.id)
        assert "[Work]" not in render_tasks(store.tasks.items, store, UTC)
        await store.drain()

    asyncio.run(run())


def test_month_grid_marks_today_and_event_days():
    start = datetime(2025, 3, 12, 8, tzinfo=UTC)
    events = [CalendarEvent(id="e", title="x", start=start, end=start + timedelta(hours=1))]
    weeks = month_view(events, 2025, 3, date(2025, 3, 10), UTC)
    text = render_month(weeks, date(2025, 3, 1))
    assert text.startswith("<b>March 2025</b>")
    assert "[10]" in text
    assert "12•" in text


def test_dashboard_and_balance_texts():
    async def run():
        store = _store()
        text = render_dashboard(store, T0, "Amina")
        assert text.startswith("<b>Good morning, Amina!</b>")
        assert "0/0 done" in text

        balance = render_balance(store.life_balance_areas)
        assert "Average: 6.5" in balance
        assert "Physical Health" in balance

    asyncio.run(run())
