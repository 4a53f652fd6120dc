from __future__ import annotations

import uuid

from app.domain.sync.ports import IdGenerator


class UuidGenerator(IdGenerator):
    """Temporary record ids and local category/area ids."""

    def new_id(self) -> str:
        return str(uuid.uuid4())
