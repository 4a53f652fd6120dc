# -*- coding: utf-8 -*-
"""
Optimistic record collections.

Every mutation is applied to the in-memory list synchronously and then
reconciled with the remote CRUD API in a background asyncio task:

- add:    append a record with a temporary id, swap in the server record on success.
          On failure the record stays as an orphaned local-only entry.
- update: merge locally. A failed remote update is NOT reverted.
- remove: drop locally. A failed remote delete re-appends the captured record.

Each record id carries a sequence number bumped on every local mutation; a
remote confirmation is applied only if no newer mutation was issued meanwhile.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Coroutine, Dict, Generic, List, Mapping, Optional, Set, Tuple, Type, TypeVar

from app.constants import (
    KIND_EVENT,
    KIND_NOTE,
    KIND_TASK,
    MSG_COMPLETE_FAILED,
    MSG_CREATE_FAILED,
    MSG_CREATE_OK,
    MSG_DELETE_FAILED,
    MSG_DELETE_OK,
    MSG_FETCH_FAILED,
    MSG_UPDATE_FAILED,
    MSG_UPDATE_OK,
    STATE_CONFIRMED,
    STATE_ORPHANED,
    STATE_PENDING,
    render_message,
)
from app.domain.common.errors import NotFoundError, ValidationError
from app.domain.sync.ports import Clock, IdGenerator, Notifier, RemoteCollection, RemoteEventCollection
from app.models import CalendarEvent, Note, Task, fields_to_wire, from_wire, normalize_fields, to_wire

logger = logging.getLogger(__name__)

R = TypeVar("R", Task, Note, CalendarEvent)


class SyncedCollection(Generic[R]):
    record_type: Type[R]
    kind: str
    required: Tuple[str, ...] = ("title",)

    def __init__(
        self,
        remote: RemoteCollection,
        notifier: Notifier,
        clock: Clock,
        ids: IdGenerator,
        on_change: Callable[[], None],
    ) -> None:
        self._remote = remote
        self._notifier = notifier
        self._clock = clock
        self._ids = ids
        self._on_change = on_change

        self._items: List[R] = []
        self._loading = False
        self._seq: Dict[str, int] = {}
        # temp id -> fields changed locally while its create is in flight
        self._pending: Dict[str, Dict[str, Any]] = {}
        self._delete_after_create: Set[str] = set()
        self._orphaned: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()

    # ---------- reads ----------
    @property
    def items(self) -> Tuple[R, ...]:
        return tuple(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    def get(self, record_id: str) -> Optional[R]:
        idx = self._index(record_id)
        return self._items[idx] if idx is not None else None

    def state_of(self, record_id: str) -> Optional[str]:
        if self._index(record_id) is None:
            return None
        if record_id in self._pending:
            return STATE_PENDING
        if record_id in self._orphaned:
            return STATE_ORPHANED
        return STATE_CONFIRMED

    def __len__(self) -> int:
        return len(self._items)

    # ---------- mutations ----------
    def add(self, **fields: Any) -> Optional[R]:
        if "id" in fields:
            raise TypeError("id is assigned by the store")
        try:
            values = normalize_fields(self.record_type, fields)
            missing = [name for name in self.required if values.get(name) is None]
            if missing:
                raise ValidationError(f"{self.kind} needs {', '.join(missing)}")
            temp_id = self._ids.new_id()
            record = self._build(values, temp_id, self._clock.now())
            self._check(record)
        except ValidationError as e:
            logger.info("%s not added: %s", self.kind, e)
            return None

        self._pending[temp_id] = {}
        self._bump(temp_id)
        self._set(self._items + [record])
        self._spawn(self._confirm_create(temp_id, values))
        return record

    def update(self, record_id: str, **fields: Any) -> Optional[R]:
        return self._apply_update(record_id, fields, MSG_UPDATE_FAILED)

    def remove(self, record_id: str) -> Optional[R]:
        record = self.get(record_id)
        if record is None:
            return None

        self._set([r for r in self._items if r.id != record_id])
        seq = self._bump(record_id)

        if record_id in self._pending:
            self._delete_after_create.add(record_id)
        elif record_id in self._orphaned:
            self._orphaned.discard(record_id)
        else:
            self._spawn(self._confirm_delete(record, seq))
        return record

    def _apply_update(self, record_id: str, fields: Mapping[str, Any], failure_template: str) -> Optional[R]:
        record = self.get(record_id)
        if record is None:
            logger.info("%s %s not found locally, update skipped", self.kind, record_id)
            return None
        if "id" in fields:
            raise TypeError("id cannot be updated")
        try:
            values = normalize_fields(self.record_type, fields)
            cleared = [name for name in self.required if name in values and values[name] is None]
            if cleared:
                raise ValidationError(f"{self.kind} needs {', '.join(cleared)}")
            merged = replace(record, **self._stamp_update(values, self._clock.now()))
            self._check(merged)
        except ValidationError as e:
            logger.info("%s %s not updated: %s", self.kind, record_id, e)
            return None
        if not values:
            return record

        self._replace(record_id, merged)
        seq = self._bump(record_id)

        if record_id in self._pending:
            self._pending[record_id].update(values)
        elif record_id not in self._orphaned:
            self._spawn(self._confirm_update(record_id, values, seq, failure_template))
        return merged

    # ---------- fetch ----------
    async def fetch_all(self) -> bool:
        """Replace the whole collection with the server list. Returns False on failure."""
        self._loading = True
        self._on_change()
        records: Optional[List[R]] = None
        try:
            payload = await self._remote.list()
            records = [from_wire(self.record_type, p) for p in payload]
        except Exception:
            logger.warning("Error fetching %ss", self.kind, exc_info=True)
        finally:
            self._loading = False
            if records is not None:
                self._items = records
                present = {r.id for r in records}
                self._orphaned &= present
            self._on_change()

        if records is None:
            await self._notify(False, render_message(MSG_FETCH_FAILED, self.kind))
            return False
        return True

    async def fetch_one(self, record_id: str) -> Optional[R]:
        """
        Fetch a single record and upsert it locally.
        Raises NotFoundError when the server does not know the id.
        """
        try:
            record = from_wire(self.record_type, await self._remote.get(record_id))
        except NotFoundError:
            raise
        except Exception:
            logger.warning("Error fetching %s %s", self.kind, record_id, exc_info=True)
            await self._notify(False, render_message(MSG_FETCH_FAILED, self.kind))
            return None
        self._upsert([record])
        return record

    async def drain(self) -> None:
        """Wait until every in-flight reconciliation has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ---------- snapshot ----------
    def snapshot(self) -> Dict[str, Any]:
        local_only = sorted((set(self._pending) | self._orphaned) & {r.id for r in self._items})
        return {"items": [to_wire(r) for r in self._items], "localOnly": local_only}

    def decode(self, data: Mapping[str, Any]) -> Tuple[List[R], Set[str]]:
        """Parse a snapshot() section without touching the collection."""
        raw_items = data.get("items", []) if isinstance(data, Mapping) else None
        local_only = data.get("localOnly", []) if isinstance(data, Mapping) else None
        if not isinstance(raw_items, list) or not isinstance(local_only, list):
            raise ValidationError(f"Malformed {self.kind} snapshot section")
        items = [from_wire(self.record_type, raw) for raw in raw_items]
        present = {r.id for r in items}
        # creates that were in flight when the snapshot was taken will never confirm
        return items, {str(i) for i in local_only} & present

    def load(self, items: List[R], local_only: Set[str]) -> None:
        self._items = list(items)
        self._orphaned = set(local_only)
        self._pending.clear()
        self._delete_after_create.clear()

    # ---------- remote reconciliation ----------
    async def _confirm_create(self, temp_id: str, values: Mapping[str, Any]) -> None:
        try:
            saved = from_wire(self.record_type, await self._remote.create(fields_to_wire(values)))
        except Exception:
            logger.warning("Error creating %s %s", self.kind, temp_id, exc_info=True)
            self._pending.pop(temp_id, None)
            if temp_id in self._delete_after_create:
                self._delete_after_create.discard(temp_id)
            else:
                self._orphaned.add(temp_id)
                self._on_change()
            await self._notify(False, render_message(MSG_CREATE_FAILED, self.kind))
            return

        local_changes = self._pending.pop(temp_id, {})

        if temp_id in self._delete_after_create:
            self._delete_after_create.discard(temp_id)
            await self._notify(True, render_message(MSG_CREATE_OK, self.kind))
            self._spawn(self._confirm_delete(saved, self._bump(saved.id)))
            return

        idx = self._index(temp_id)
        if idx is not None:
            record = replace(saved, **local_changes) if local_changes else saved
            items = list(self._items)
            items[idx] = record
            self._set(items)
        elif self._index(saved.id) is None:
            # the collection was replaced by fetch_all() while the create was in flight
            self._set(self._items + [saved])

        if local_changes:
            self._spawn(self._confirm_update(saved.id, local_changes, self._bump(saved.id), MSG_UPDATE_FAILED))
        await self._notify(True, render_message(MSG_CREATE_OK, self.kind))

    async def _confirm_update(
        self,
        record_id: str,
        values: Mapping[str, Any],
        seq: int,
        failure_template: str,
    ) -> None:
        try:
            payload = await self._remote.update(record_id, fields_to_wire(values))
        except Exception:
            logger.warning("Error updating %s %s", self.kind, record_id, exc_info=True)
            await self._notify(False, render_message(failure_template, self.kind))
            return

        current = self.get(record_id)
        if self._seq.get(record_id) != seq:
            logger.debug(
                "Discarding stale %s confirmation for %s (seq %s, latest %s)",
                self.kind, record_id, seq, self._seq.get(record_id),
            )
        elif current is not None and payload:
            try:
                confirmed = from_wire(self.record_type, {**to_wire(current), **payload})
            except ValidationError:
                logger.warning("Ignoring malformed %s update response for %s", self.kind, record_id)
            else:
                if confirmed.id == record_id and confirmed != current:
                    self._replace(record_id, confirmed)
        await self._notify(True, render_message(MSG_UPDATE_OK, self.kind))

    async def _confirm_delete(self, record: R, seq: int) -> None:
        try:
            await self._remote.delete(record.id)
        except Exception:
            logger.warning("Error deleting %s %s", self.kind, record.id, exc_info=True)
            if self._index(record.id) is None:
                self._set(self._items + [record])
            await self._notify(False, render_message(MSG_DELETE_FAILED, self.kind))
            return
        await self._notify(True, render_message(MSG_DELETE_OK, self.kind))

    # ---------- internals ----------
    def _build(self, values: Mapping[str, Any], temp_id: str, now: datetime) -> R:
        return self.record_type(**{**values, "id": temp_id})

    def _stamp_update(self, values: Mapping[str, Any], now: datetime) -> Dict[str, Any]:
        return dict(values)

    def _check(self, record: R) -> None:
        pass

    def _bump(self, record_id: str) -> int:
        seq = self._seq.get(record_id, 0) + 1
        self._seq[record_id] = seq
        return seq

    def _index(self, record_id: str) -> Optional[int]:
        for i, r in enumerate(self._items):
            if r.id == record_id:
                return i
        return None

    def _set(self, items: List[R]) -> None:
        self._items = items
        self._on_change()

    def _replace(self, record_id: str, record: R) -> None:
        self._set([record if r.id == record_id else r for r in self._items])

    def _upsert(self, records: List[R]) -> None:
        items = list(self._items)
        for record in records:
            idx = next((i for i, r in enumerate(items) if r.id == record.id), None)
            if idx is None:
                items.append(record)
            else:
                items[idx] = record
        self._set(items)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _notify(self, ok: bool, text: str) -> None:
        try:
            if ok:
                await self._notifier.success(text)
            else:
                await self._notifier.error(text)
        except Exception:
            # toasts are best effort, a broken channel must not break reconciliation
            logger.warning("Notifier failed for %r", text, exc_info=True)


class TaskCollection(SyncedCollection[Task]):
    record_type = Task
    kind = KIND_TASK

    def _build(self, values: Mapping[str, Any], temp_id: str, now: datetime) -> Task:
        return Task(**{"created_at": now, "completed": False, **values, "id": temp_id})

    def complete(self, task_id: str) -> Optional[Task]:
        """Toggle completion."""
        task = self.get(task_id)
        if task is None:
            return None
        return self._apply_update(task_id, {"completed": not task.completed}, MSG_COMPLETE_FAILED)


class NoteCollection(SyncedCollection[Note]):
    record_type = Note
    kind = KIND_NOTE

    def _build(self, values: Mapping[str, Any], temp_id: str, now: datetime) -> Note:
        return Note(**{"created_at": now, "updated_at": now, **values, "id": temp_id})

    def _stamp_update(self, values: Mapping[str, Any], now: datetime) -> Dict[str, Any]:
        return {**values, "updated_at": now}


class EventCollection(SyncedCollection[CalendarEvent]):
    record_type = CalendarEvent
    kind = KIND_EVENT
    required = ("title", "start", "end")

    _remote: RemoteEventCollection

    def _check(self, record: CalendarEvent) -> None:
        if record.end < record.start:
            raise ValidationError("event ends before it starts")

    async def fetch_month(self, day: datetime) -> Optional[List[CalendarEvent]]:
        """Load the events of day's month and upsert them locally."""
        try:
            payload = await self._remote.list_month(day)
            events = [from_wire(CalendarEvent, p) for p in payload]
        except Exception:
            logger.warning("Error fetching events for %s", day.date().isoformat(), exc_info=True)
            await self._notify(False, render_message(MSG_FETCH_FAILED, self.kind))
            return None
        self._upsert(events)
        return events
