from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Literal, Optional, Sequence, Tuple

from app.models import CalendarEvent, Note, Task

TaskFilter = Literal["all", "active", "completed"]

RECENT_DAYS = 7
RECENT_PER_KIND = 5
RECENT_TOTAL = 10


def greeting(now: datetime) -> str:
    if now.hour < 12:
        return "Good morning"
    if now.hour < 18:
        return "Good afternoon"
    return "Good evening"


def _task_key(task: Task) -> Tuple[bool, bool, float, float]:
    # incomplete first, then dated before undated (soonest first), then newest first
    due = task.due_date.timestamp() if task.due_date else 0.0
    return (task.completed, task.due_date is None, due, -task.created_at.timestamp())


def visible_tasks(
    tasks: Iterable[Task],
    status: TaskFilter = "all",
    category: Optional[str] = None,
) -> List[Task]:
    out = []
    for t in tasks:
        if status == "active" and t.completed:
            continue
        if status == "completed" and not t.completed:
            continue
        if category and t.category != category:
            continue
        out.append(t)
    return sorted(out, key=_task_key)


def visible_notes(notes: Iterable[Note], query: str = "", category: Optional[str] = None) -> List[Note]:
    """Search title and content (case-insensitive), most recently updated first."""
    q = query.strip().lower()
    out = [
        n for n in notes
        if (not q or q in n.title.lower() or q in n.content.lower())
        and (not category or n.category == category)
    ]
    return sorted(out, key=lambda n: n.updated_at, reverse=True)


def parse_tags(text: str) -> Tuple[str, ...]:
    """'a, b,,c ' -> ('a', 'b', 'c')"""
    return tuple(t.strip() for t in text.split(",") if t.strip())


@dataclass(frozen=True)
class Activity:
    kind: str  # task | note | event
    record_id: str
    title: str
    at: datetime
    done: bool = False


def recent_activity(
    tasks: Sequence[Task],
    notes: Sequence[Note],
    events: Sequence[CalendarEvent],
    now: datetime,
) -> List[Activity]:
    """
    Tasks and notes created during the last week plus events that have not
    ended yet (or end today), newest first.
    """
    since = now - timedelta(days=RECENT_DAYS)

    recent_tasks = sorted((t for t in tasks if t.created_at > since), key=lambda t: t.created_at, reverse=True)
    recent_notes = sorted((n for n in notes if n.created_at > since), key=lambda n: n.created_at, reverse=True)
    upcoming = sorted(
        (e for e in events if e.end >= now or e.end.astimezone(now.tzinfo).date() == now.date()),
        key=lambda e: e.start,
    )

    items = (
        [Activity("task", t.id, t.title, t.created_at, t.completed) for t in recent_tasks[:RECENT_PER_KIND]]
        + [Activity("note", n.id, n.title, n.created_at) for n in recent_notes[:RECENT_PER_KIND]]
        + [Activity("event", e.id, e.title, e.start) for e in upcoming[:RECENT_PER_KIND]]
    )
    items.sort(key=lambda a: a.at, reverse=True)
    return items[:RECENT_TOTAL]


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    overdue: int

    @property
    def percent_done(self) -> int:
        return round(self.completed / self.total * 100) if self.total else 0


def task_stats(tasks: Sequence[Task], now: datetime) -> TaskStats:
    return TaskStats(
        total=len(tasks),
        completed=sum(1 for t in tasks if t.completed),
        overdue=sum(1 for t in tasks if not t.completed and t.due_date is not None and t.due_date < now),
    )
