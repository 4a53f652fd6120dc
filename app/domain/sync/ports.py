from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class IdGenerator(ABC):
    @abstractmethod
    def new_id(self) -> str: ...


class RemoteCollection(ABC):
    """
    Remote CRUD API for one record kind. Payloads are camelCase JSON dicts.

    Every method may raise RemoteError; get() raises NotFoundError for a missing id.
    """

    @abstractmethod
    async def list(self) -> List[Dict[str, Any]]: ...

    @abstractmethod
    async def get(self, record_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def update(self, record_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def delete(self, record_id: str) -> None: ...


class RemoteEventCollection(RemoteCollection):
    @abstractmethod
    async def list_month(self, day: datetime) -> List[Dict[str, Any]]: ...


class Notifier(ABC):
    """User-facing toasts."""

    @abstractmethod
    async def success(self, text: str) -> None: ...

    @abstractmethod
    async def error(self, text: str) -> None: ...


class SnapshotRepository(ABC):
    @abstractmethod
    async def load(self, slot: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    async def save(self, slot: str, snapshot: Mapping[str, Any], now_iso: str) -> None: ...

    @abstractmethod
    async def clear(self, slot: str) -> None: ...
