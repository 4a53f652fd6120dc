"""
Async client for the REST backend (tasks / notes / events scoped to the logged-in user).

Every request carries the bearer token. A 401 answer drops the token and runs
the on_unauthorized hook (session teardown) before UnauthorizedError is raised.
"""
from __future__ import annotations

import asyncio
import json as _json
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional
from urllib.parse import quote

import aiohttp

from app.constants import KIND_EVENT, KIND_NOTE, KIND_TASK
from app.domain.common.errors import NotFoundError, RemoteError, UnauthorizedError
from app.domain.common.time import to_iso
from app.domain.sync.ports import RemoteCollection, RemoteEventCollection

logger = logging.getLogger(__name__)

UnauthorizedHook = Callable[[], Awaitable[None]]


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout_seconds: float = 10.0,
        on_unauthorized: Optional[UnauthorizedHook] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._on_unauthorized = on_unauthorized
        self._session = session
        self._owns_session = session is None
        self.user: Optional[Dict[str, Any]] = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    @property
    def token(self) -> str:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_on_unauthorized(self, hook: Optional[UnauthorizedHook]) -> None:
        self._on_unauthorized = hook

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    # ---------- auth ----------
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.request("POST", "/auth/login", json={"email": email, "password": password}, auth=False)
        token = (data or {}).get("access_token") or (data or {}).get("token")
        if not token:
            raise RemoteError("Missing token in login response")
        self._token = token
        self.user = (data or {}).get("user")
        return data

    async def register(self, first_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
        payload = {"firstName": first_name, "lastName": last_name, "email": email, "password": password}
        return await self.request("POST", "/auth/register", json=payload, auth=False)

    def logout(self) -> None:
        self._token = ""
        self.user = None

    # ---------- resources ----------
    def tasks(self) -> "RestCollection":
        return RestCollection(self, "tasks", KIND_TASK)

    def notes(self) -> "RestCollection":
        return RestCollection(self, "notes", KIND_NOTE)

    def events(self) -> "RestEventCollection":
        return RestEventCollection(self, "events", KIND_EVENT)

    # ---------- transport ----------
    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Mapping[str, str]] = None,
        auth: bool = True,
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        if auth and self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        url = f"{self.base_url}{path}"
        try:
            async with self._get_session().request(
                method, url, json=json, params=params, headers=headers, timeout=self._timeout
            ) as resp:
                body = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteError(f"{method} {path} failed: {e!r}") from e

        if status == 401 and auth:
            await self._handle_unauthorized()
            raise UnauthorizedError(f"{method} {path}: unauthorized")
        if status >= 400:
            raise RemoteError(f"{method} {path} failed: {status} {body[:200]}", status=status)
        if not body:
            return None
        try:
            return _json.loads(body)
        except ValueError as e:
            raise RemoteError(f"{method} {path}: invalid JSON response", status=status) from e

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def _handle_unauthorized(self) -> None:
        logger.warning("API answered 401, tearing down session")
        self.logout()
        if self._on_unauthorized is not None:
            await self._on_unauthorized()


class RestCollection(RemoteCollection):
    def __init__(self, client: ApiClient, resource: str, kind: str) -> None:
        self._client = client
        self._resource = resource
        self._kind = kind

    def _item_path(self, record_id: str) -> str:
        return f"/{self._resource}/{quote(record_id, safe='')}"

    async def list(self) -> List[Dict[str, Any]]:
        data = await self._client.request("GET", f"/{self._resource}")
        return _as_list(data, self._resource)

    async def get(self, record_id: str) -> Dict[str, Any]:
        try:
            data = await self._client.request("GET", self._item_path(record_id))
        except RemoteError as e:
            if e.status == 404:
                raise NotFoundError(self._kind, record_id) from e
            raise
        return _as_dict(data, self._resource)

    async def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        data = await self._client.request("POST", f"/{self._resource}", json=dict(fields))
        return _as_dict(data, self._resource)

    async def update(self, record_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        data = await self._client.request("PATCH", self._item_path(record_id), json=dict(fields))
        return data if isinstance(data, dict) else {}

    async def delete(self, record_id: str) -> None:
        await self._client.request("DELETE", self._item_path(record_id))


class RestEventCollection(RestCollection, RemoteEventCollection):
    async def list_month(self, day: datetime) -> List[Dict[str, Any]]:
        data = await self._client.request("GET", f"/{self._resource}/month", params={"date": to_iso(day)})
        return _as_list(data, self._resource)


def _as_list(data: Any, resource: str) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        raise RemoteError(f"Expected a list of {resource}, got {type(data).__name__}")
    return data


def _as_dict(data: Any, resource: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise RemoteError(f"Expected a {resource} record, got {type(data).__name__}")
    return data
