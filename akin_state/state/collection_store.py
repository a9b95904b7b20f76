from __future__ import annotations

import logging
from typing import Any, Generic, List, Mapping, Optional, TypeVar

from ..backend import AkinBackend
from ..errors import NotFoundError, StoreError
from ..kinds import CollectionKind


logger = logging.getLogger("akin_state")

T = TypeVar("T")


class CollectionStore(Generic[T]):
    """CRUD over one child collection (abilities, virtues or flaws).

    Rows are independent of each other and of the profile. Updates replace every
    mutable column; fields left out of the payload are written as their defaults.
    """

    def __init__(self, backend: AkinBackend, kind: CollectionKind) -> None:
        self.backend = backend
        self.kind = kind

    async def list(self) -> List[T]:
        rows = await self.backend.list_collection_rows(self.kind)
        return [self.kind.from_row(row) for row in rows]

    async def get(self, item_id: str) -> Optional[T]:
        row = await self.backend.fetch_collection_row(self.kind, item_id)
        if row is None:
            return None
        return self.kind.from_row(row)

    async def create(self, payload: Mapping[str, Any] | None) -> T:
        values = self.kind.to_columns(payload or {})
        item_id = self.kind.new_id()
        await self.backend.insert_collection_row(self.kind, item_id, values)
        created = await self.get(item_id)
        if created is None:
            raise StoreError(f"{self.kind.label} {item_id} missing right after insert")
        logger.info("Created %s %s (%s)", self.kind.label, item_id, values["name"])
        return created

    async def update(self, item_id: str, payload: Mapping[str, Any] | None) -> T:
        if not await self.backend.collection_row_exists(self.kind, item_id):
            raise NotFoundError(self.kind.label, item_id)
        values = self.kind.to_columns(payload or {})
        if not await self.backend.update_collection_row(self.kind, item_id, values):
            raise NotFoundError(self.kind.label, item_id)
        updated = await self.get(item_id)
        if updated is None:
            raise NotFoundError(self.kind.label, item_id)
        logger.info("Updated %s %s", self.kind.label, item_id)
        return updated

    async def delete(self, item_id: str) -> None:
        await self.backend.delete_collection_row(self.kind, item_id)
