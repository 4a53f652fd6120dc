from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base for errors raised by the store and its collaborators."""


class ValidationError(DomainError):
    pass


class NotFoundError(DomainError):
    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} with ID {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class RemoteError(DomainError):
    """Transport or server failure of the remote CRUD API."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class UnauthorizedError(RemoteError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status=401)
