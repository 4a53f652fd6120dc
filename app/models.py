# -*- coding: utf-8 -*-
"""Records held by the store, plus the camelCase codec shared by the REST API and the snapshot."""
from __future__ import annotations

from dataclasses import dataclass, fields as dc_fields
from datetime import datetime, time
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Type, TypeVar

from app.domain.common.errors import ValidationError
from app.domain.common.time import from_iso, to_iso

Priority = Literal["low", "medium", "high"]
PRIORITIES: Tuple[str, ...] = ("low", "medium", "high")


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    created_at: datetime
    completed: bool = False
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    category: Optional[str] = None  # category id
    priority: Optional[Priority] = None


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    content: str = ""
    tags: Optional[Tuple[str, ...]] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    start: datetime
    end: datetime
    description: Optional[str] = None
    all_day: Optional[bool] = None
    location: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class PomodoroSettings:
    work_duration: int = 25  # minutes
    short_break_duration: int = 5
    long_break_duration: int = 15
    sessions_until_long_break: int = 4


@dataclass(frozen=True)
class PrayerTime:
    name: str
    time: time  # local wall-clock time, the day is implied
    arabic_name: Optional[str] = None


@dataclass(frozen=True)
class LifeBalanceArea:
    id: str
    name: str
    value: int  # 1-10
    color: str
    description: str = ""
    icon_name: Optional[str] = None


R = TypeVar("R")

_CAMEL = {
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "due_date": "dueDate",
    "all_day": "allDay",
    "arabic_name": "arabicName",
    "icon_name": "iconName",
    "work_duration": "workDuration",
    "short_break_duration": "shortBreakDuration",
    "long_break_duration": "longBreakDuration",
    "sessions_until_long_break": "sessionsUntilLongBreak",
}
_DATETIME_FIELDS = {"created_at", "updated_at", "due_date", "start", "end"}


def field_names(cls: Type[Any]) -> Tuple[str, ...]:
    return tuple(f.name for f in dc_fields(cls))


def wire_name(name: str) -> str:
    return _CAMEL.get(name, name)


def _encode(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _DATETIME_FIELDS:
        return to_iso(value)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, tuple):
        return list(value)
    return value


def _decode(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _DATETIME_FIELDS:
        return value if isinstance(value, datetime) else from_iso(str(value))
    if name == "time" and not isinstance(value, time):
        return time.fromisoformat(str(value))
    if name == "tags":
        return tuple(str(t) for t in value)
    return value


def fields_to_wire(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Encode snake_case field values into the API's camelCase JSON body."""
    return {wire_name(k): _encode(k, v) for k, v in values.items()}


def to_wire(record: Any) -> Dict[str, Any]:
    return fields_to_wire({name: getattr(record, name) for name in field_names(type(record))})


def from_wire(cls: Type[R], data: Mapping[str, Any]) -> R:
    """
    Build a record from API/snapshot JSON.
    Keys the record does not know (user, updatedAt on tasks, ...) are ignored.
    """
    if not isinstance(data, Mapping):
        raise ValidationError(f"Malformed {cls.__name__} payload: expected an object")
    kwargs: Dict[str, Any] = {}
    try:
        for name in field_names(cls):
            key = wire_name(name)
            if key in data:
                kwargs[name] = _decode(name, data[key])
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Malformed {cls.__name__} payload: {e}") from e


def normalize_fields(cls: Type[Any], values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate caller-supplied fields for a record kind.

    Unknown names raise TypeError (programming error); bad values raise ValidationError.
    """
    known = set(field_names(cls))
    out: Dict[str, Any] = {}
    for name, value in values.items():
        if name not in known:
            raise TypeError(f"{cls.__name__} has no field {name!r}")
        if name in ("title", "name") and isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValidationError(f"{cls.__name__}.{name} must not be empty")
        elif name in _DATETIME_FIELDS and value is not None:
            if not isinstance(value, datetime) or value.tzinfo is None:
                raise ValidationError(f"{cls.__name__}.{name} must be a timezone-aware datetime")
        elif name == "priority" and value is not None and value not in PRIORITIES:
            raise ValidationError(f"priority must be one of {', '.join(PRIORITIES)}")
        elif name == "tags" and value is not None:
            value = tuple(t.strip() for t in value if t and t.strip())
        elif name == "value" and cls is LifeBalanceArea:
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"life balance value must be a number, got {value!r}") from e
            if not 1 <= value <= 10:
                raise ValidationError("life balance value must be between 1 and 10")
        out[name] = value
    return out
