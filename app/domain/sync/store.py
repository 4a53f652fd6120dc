# -*- coding: utf-8 -*-
"""AppStore: the per-session context object UI handlers read from and mutate through."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from app.constants import (
    DEFAULT_CATEGORIES,
    DEFAULT_LIFE_BALANCE_AREAS,
    DEFAULT_PRAYER_TIMES,
    SNAPSHOT_VERSION,
)
from app.domain.common.errors import ValidationError
from app.domain.sync.collection import EventCollection, NoteCollection, TaskCollection
from app.domain.sync.ports import Clock, IdGenerator, Notifier, RemoteCollection, RemoteEventCollection
from app.models import (
    Category,
    LifeBalanceArea,
    PomodoroSettings,
    PrayerTime,
    from_wire,
    normalize_fields,
    to_wire,
)

logger = logging.getLogger(__name__)

Listener = Callable[["AppStore"], None]


def default_categories(ids: IdGenerator) -> List[Category]:
    return [Category(id=ids.new_id(), name=name, color=color) for name, color in DEFAULT_CATEGORIES]


def default_life_balance_areas(ids: IdGenerator) -> List[LifeBalanceArea]:
    return [
        LifeBalanceArea(id=ids.new_id(), name=name, value=value, color=color, description=desc, icon_name=icon)
        for name, value, color, desc, icon in DEFAULT_LIFE_BALANCE_AREAS
    ]


def default_prayer_times() -> List[PrayerTime]:
    return [
        PrayerTime(name=name, arabic_name=arabic, time=time.fromisoformat(hhmm))
        for name, arabic, hhmm in DEFAULT_PRAYER_TIMES
    ]


class AppStore:
    """
    Holds tasks, notes and events (synchronized optimistically with the API)
    plus categories and preferences (local only, never sent to the API).

    Mutations must be called from inside the running event loop: they
    schedule their remote reconciliation as asyncio tasks.
    """

    def __init__(
        self,
        *,
        tasks_api: RemoteCollection,
        notes_api: RemoteCollection,
        events_api: RemoteEventCollection,
        notifier: Notifier,
        clock: Clock,
        ids: IdGenerator,
    ) -> None:
        self._ids = ids
        self._listeners: List[Listener] = []

        self.tasks = TaskCollection(tasks_api, notifier, clock, ids, self._emit)
        self.notes = NoteCollection(notes_api, notifier, clock, ids, self._emit)
        self.events = EventCollection(events_api, notifier, clock, ids, self._emit)

        self._categories: List[Category] = default_categories(ids)
        self._pomodoro = PomodoroSettings()
        self._prayer_times: List[PrayerTime] = default_prayer_times()
        self._areas: List[LifeBalanceArea] = default_life_balance_areas(ids)

    # ---------- reactive reads ----------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(store) after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(self._categories)

    @property
    def pomodoro_settings(self) -> PomodoroSettings:
        return self._pomodoro

    @property
    def prayer_times(self) -> Tuple[PrayerTime, ...]:
        return tuple(self._prayer_times)

    @property
    def life_balance_areas(self) -> Tuple[LifeBalanceArea, ...]:
        return tuple(self._areas)

    def category_for(self, category_id: Optional[str]) -> Optional[Category]:
        """Resolve a category reference; dangling ids (deleted categories) give None."""
        if not category_id:
            return None
        return next((c for c in self._categories if c.id == category_id), None)

    # ---------- remote ----------
    async def fetch_everything(self) -> Tuple[bool, bool, bool]:
        ok_tasks, ok_notes, ok_events = await asyncio.gather(
            self.tasks.fetch_all(),
            self.notes.fetch_all(),
            self.events.fetch_all(),
        )
        return ok_tasks, ok_notes, ok_events

    async def drain(self) -> None:
        await asyncio.gather(self.tasks.drain(), self.notes.drain(), self.events.drain())

    # ---------- categories (local) ----------
    def add_category(self, name: str, color: str) -> Optional[Category]:
        try:
            values = normalize_fields(Category, {"name": name, "color": color})
        except ValidationError as e:
            logger.info("category not added: %s", e)
            return None
        category = Category(id=self._ids.new_id(), **values)
        self._categories = self._categories + [category]
        self._emit()
        return category

    def update_category(self, category_id: str, **fields: Any) -> Optional[Category]:
        current = self.category_for(category_id)
        if current is None:
            return None
        try:
            updated = replace(current, **normalize_fields(Category, fields))
        except ValidationError as e:
            logger.info("category %s not updated: %s", category_id, e)
            return None
        self._categories = [updated if c.id == category_id else c for c in self._categories]
        self._emit()
        return updated

    def delete_category(self, category_id: str) -> Optional[Category]:
        """Records keep pointing at the deleted id; resolve through category_for()."""
        current = self.category_for(category_id)
        if current is None:
            return None
        self._categories = [c for c in self._categories if c.id != category_id]
        self._emit()
        return current

    # ---------- preferences (local) ----------
    def update_pomodoro_settings(self, **fields: Any) -> Optional[PomodoroSettings]:
        try:
            values = normalize_fields(PomodoroSettings, fields)
            for name, minutes in values.items():
                if not isinstance(minutes, int) or minutes < 1:
                    raise ValidationError(f"{name} must be a positive number of minutes")
        except ValidationError as e:
            logger.info("pomodoro settings not updated: %s", e)
            return None
        self._pomodoro = replace(self._pomodoro, **values)
        self._emit()
        return self._pomodoro

    def update_life_balance_area(self, area_id: str, **fields: Any) -> Optional[LifeBalanceArea]:
        current = next((a for a in self._areas if a.id == area_id), None)
        if current is None:
            return None
        try:
            updated = replace(current, **normalize_fields(LifeBalanceArea, fields))
        except ValidationError as e:
            logger.info("life balance area %s not updated: %s", area_id, e)
            return None
        self._areas = [updated if a.id == area_id else a for a in self._areas]
        self._emit()
        return updated

    def set_prayer_times(self, prayer_times: Sequence[PrayerTime]) -> None:
        self._prayer_times = list(prayer_times)
        self._emit()

    # ---------- durable snapshot ----------
    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready state. Loading flags are not part of it."""
        return {
            "version": SNAPSHOT_VERSION,
            "state": {
                "tasks": self.tasks.snapshot(),
                "notes": self.notes.snapshot(),
                "events": self.events.snapshot(),
                "categories": [to_wire(c) for c in self._categories],
                "pomodoroSettings": to_wire(self._pomodoro),
                "prayerTimes": [to_wire(p) for p in self._prayer_times],
                "lifeBalanceAreas": [to_wire(a) for a in self._areas],
            },
        }

    def restore(self, snapshot: Mapping[str, Any]) -> bool:
        """
        Rehydrate from snapshot(); sections missing from it keep their current value.
        Raises ValidationError, with the store unchanged, if any section is malformed.
        """
        if not isinstance(snapshot, Mapping):
            raise ValidationError("Malformed snapshot")
        if snapshot.get("version") != SNAPSHOT_VERSION:
            logger.warning("Ignoring snapshot with version %r", snapshot.get("version"))
            return False
        state = snapshot.get("state") or {}
        if not isinstance(state, Mapping):
            raise ValidationError("Malformed snapshot state")

        # decode everything first so a bad section leaves the store untouched
        collections = [
            (c, c.decode(state[key]))
            for key, c in (("tasks", self.tasks), ("notes", self.notes), ("events", self.events))
            if key in state
        ]
        categories = self._decode_list(Category, state, "categories", self._categories)
        prayer_times = self._decode_list(PrayerTime, state, "prayerTimes", self._prayer_times)
        areas = self._decode_list(LifeBalanceArea, state, "lifeBalanceAreas", self._areas)
        pomodoro = self._pomodoro
        if "pomodoroSettings" in state:
            pomodoro = from_wire(PomodoroSettings, state["pomodoroSettings"])

        for collection, (items, local_only) in collections:
            collection.load(items, local_only)
        self._categories = categories
        self._prayer_times = prayer_times
        self._areas = areas
        self._pomodoro = pomodoro

        self._emit()
        return True

    @staticmethod
    def _decode_list(cls: Type[Any], state: Mapping[str, Any], key: str, current: List[Any]) -> List[Any]:
        if key not in state:
            return current
        raw = state[key]
        if not isinstance(raw, list):
            raise ValidationError(f"Malformed {key} snapshot section")
        return [from_wire(cls, item) for item in raw]

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self)
