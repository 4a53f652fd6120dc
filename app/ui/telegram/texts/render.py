"""HTML message bodies built from store state and the derived views."""
from __future__ import annotations

from datetime import date, datetime, tzinfo
from html import escape
from typing import List, Optional, Sequence

from app.domain.sync.store import AppStore
from app.models import CalendarEvent, Category, LifeBalanceArea, Note, PrayerTime, Task
from app.views import hexagon
from app.views.calendar import CalendarCell, events_on
from app.views.dashboard import greeting, recent_activity, task_stats
from app.views.pomodoro import LONG_BREAK, SHORT_BREAK, WORK, PomodoroTimer
from app.views.prayer import is_passed, next_prayer, schedule_for, time_until

PRIORITY_MARK = {"high": "🔴", "medium": "🟡", "low": "🟢"}
PHASE_LABEL = {WORK: "Focus", SHORT_BREAK: "Short break", LONG_BREAK: "Long break"}
WEEKDAYS_SUN_FIRST = ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]


def _category_label(store: AppStore, category_id: Optional[str]) -> str:
    category = store.category_for(category_id)
    return f" [{escape(category.name)}]" if category else ""


def task_line(task: Task, store: AppStore, tz: tzinfo) -> str:
    box = "☑" if task.completed else "☐"
    parts = [box]
    if task.priority:
        parts.append(PRIORITY_MARK[task.priority])
    title = escape(task.title)
    parts.append(f"<s>{title}</s>" if task.completed else title)
    line = " ".join(parts) + _category_label(store, task.category)
    if task.due_date:
        line += f" · due {task.due_date.astimezone(tz).strftime('%b %d')}"
    return line


def render_tasks(tasks: Sequence[Task], store: AppStore, tz: tzinfo, heading: str = "Tasks") -> str:
    lines = [f"<b>{escape(heading)}</b> ({len(tasks)})"]
    if store.tasks.loading:
        lines.append("<i>loading…</i>")
    lines.extend(task_line(t, store, tz) for t in tasks)
    return "\n".join(lines)


def render_notes(notes: Sequence[Note], tz: tzinfo) -> str:
    lines = [f"<b>Notes</b> ({len(notes)})"]
    for n in notes:
        updated = n.updated_at.astimezone(tz).strftime("%b %d, %Y")
        lines.append(f"• {escape(n.title)} <i>(updated {updated})</i>")
    return "\n".join(lines)


def render_note(note: Note, store: AppStore, tz: tzinfo) -> str:
    lines = [f"<b>{escape(note.title)}</b>{_category_label(store, note.category)}"]
    if note.content:
        lines.append(escape(note.content))
    if note.tags:
        lines.append(" ".join(f"#{escape(t)}" for t in note.tags))
    lines.append(f"<i>Updated {note.updated_at.astimezone(tz).strftime('%b %d, %Y %H:%M')}</i>")
    return "\n\n".join(lines)


def event_line(event: CalendarEvent, tz: tzinfo) -> str:
    if event.all_day:
        when = "all day"
    else:
        when = f"{event.start.astimezone(tz):%H:%M}–{event.end.astimezone(tz):%H:%M}"
    line = f"{when} {escape(event.title)}"
    if event.location:
        line += f" @ {escape(event.location)}"
    return line


def render_day(events: Sequence[CalendarEvent], day: date, tz: tzinfo) -> str:
    todays = events_on(events, day, tz)
    lines = [f"<b>{day.strftime('%B %d, %Y')}</b>"]
    if not todays:
        lines.append("No events.")
    lines.extend(f"• {event_line(e, tz)}" for e in todays)
    return "\n".join(lines)


def render_month(weeks: Sequence[Sequence[CalendarCell]], month: date) -> str:
    """Monospace month grid; a dot marks days with events, brackets mark today."""
    rows: List[str] = [" ".join(f"{d:>3}" for d in WEEKDAYS_SUN_FIRST)]
    for week in weeks:
        cells = []
        for c in week:
            if not c.in_month:
                cells.append("   ")
                continue
            num = f"{c.day.day:>2}"
            if c.is_today:
                cells.append(f"[{c.day.day}]".rjust(3))
            elif c.events:
                cells.append(f"{num}•")
            else:
                cells.append(f"{num} ")
        rows.append(" ".join(cells))
    return f"<b>{month.strftime('%B %Y')}</b>\n<pre>{escape(chr(10).join(rows))}</pre>"


def render_prayers(prayers: Sequence[PrayerTime], now: datetime) -> str:
    lines = ["<b>Prayer times</b>"]
    for s in schedule_for(prayers, now.date(), now.tzinfo):
        arabic = f" ({escape(s.prayer.arabic_name)})" if s.prayer.arabic_name else ""
        mark = "✓" if is_passed(s, now) else "·"
        lines.append(f"{mark} {escape(s.name)}{arabic} {s.at:%H:%M}")
    upcoming = next_prayer(prayers, now)
    if upcoming is not None:
        left = time_until(upcoming.at, now)
        lines.append(f"\nNext: <b>{escape(upcoming.name)}</b> at {upcoming.at:%H:%M} (in {left})")
    return "\n".join(lines)


def render_balance(areas: Sequence[LifeBalanceArea]) -> str:
    lines = ["<b>Life balance</b> (1-10)"]
    for a in areas:
        lines.append(f"{'█' * a.value}{'░' * (10 - a.value)} {a.value:>2} {escape(a.name)}")
    layout = hexagon.layout(areas)
    lines.append(f"\nAverage: {hexagon.balance_score(areas):.1f}")
    lines.append(f"<code>{escape(layout.svg_points())}</code>")
    return "\n".join(lines)


def render_pomodoro(timer: PomodoroTimer) -> str:
    s = timer.settings
    state = "running" if timer.active else "paused"
    return (
        f"<b>{PHASE_LABEL[timer.phase]}</b> {timer.display()} ({state}, {timer.progress:.0f}%)\n"
        f"Completed sessions: {timer.completed_sessions}\n"
        f"Settings: {s.work_duration}/{s.short_break_duration}/{s.long_break_duration} min, "
        f"long break every {s.sessions_until_long_break}"
    )


def render_categories(categories: Sequence[Category]) -> str:
    lines = ["<b>Categories</b>"]
    lines.extend(f"• {escape(c.name)} <code>{escape(c.color)}</code>" for c in categories)
    return "\n".join(lines)


def render_dashboard(store: AppStore, now: datetime, first_name: Optional[str] = None) -> str:
    stats = task_stats(store.tasks.items, now)
    lines = [
        f"<b>{greeting(now)}, {escape(first_name or 'there')}!</b>",
        f"Tasks: {stats.completed}/{stats.total} done ({stats.percent_done}%), {stats.overdue} overdue",
    ]
    upcoming = next_prayer(store.prayer_times, now)
    if upcoming is not None:
        lines.append(f"Next prayer: {escape(upcoming.name)} at {upcoming.at:%H:%M}")

    activity = recent_activity(store.tasks.items, store.notes.items, store.events.items, now)
    if activity:
        lines.append("\n<b>Recent activity</b>")
        icons = {"task": "☐", "note": "📝", "event": "📅"}
        for a in activity:
            icon = "☑" if a.kind == "task" and a.done else icons[a.kind]
            lines.append(f"{icon} {escape(a.title)} <i>{a.at.astimezone(now.tzinfo):%b %d}</i>")
    return "\n".join(lines)
