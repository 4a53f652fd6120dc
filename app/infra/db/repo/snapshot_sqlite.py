from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from app.domain.sync.ports import SnapshotRepository
from app.infra.db.connection import Database


class SnapshotSqliteRepo(SnapshotRepository):
    """store_snapshots table: one JSON document per named slot."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def load(self, slot: str) -> Optional[Dict[str, Any]]:
        row = await self._db.fetchone(
            "SELECT payload_json FROM store_snapshots WHERE slot = ?;",
            (slot,),
        )
        if not row:
            return None
        return json.loads(row["payload_json"])

    async def save(self, slot: str, snapshot: Mapping[str, Any], now_iso: str) -> None:
        payload = json.dumps(snapshot, ensure_ascii=False)
        await self._db.execute(
            """
            INSERT INTO store_snapshots(slot, version, payload_json, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(slot) DO UPDATE SET
                version = excluded.version,
                payload_json = excluded.payload_json,
                updated_at = excluded.updated_at;
            """,
            (slot, int(snapshot.get("version", 0)), payload, now_iso),
        )

    async def clear(self, slot: str) -> None:
        await self._db.execute("DELETE FROM store_snapshots WHERE slot = ?;", (slot,))
