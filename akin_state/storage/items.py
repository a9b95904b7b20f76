from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..kinds import CollectionKind
from .utils import _sqlite_errors


logger = logging.getLogger("akin_state")


class AkinCollectionsMixin:
    async def list_collection_rows(self, kind: CollectionKind) -> List[Dict[str, Any]]:
        columns = ", ".join(("id", *kind.columns))
        with _sqlite_errors(f"{kind.name} list"):
            async with self._connect() as db:
                async with db.execute(f"SELECT {columns} FROM {kind.table} ORDER BY name ASC, id ASC") as cursor:
                    rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def fetch_collection_row(self, kind: CollectionKind, item_id: str) -> Optional[Dict[str, Any]]:
        columns = ", ".join(("id", *kind.columns))
        with _sqlite_errors(f"{kind.name} read"):
            async with self._connect() as db:
                async with db.execute(f"SELECT {columns} FROM {kind.table} WHERE id = ?", (item_id,)) as cursor:
                    row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def collection_row_exists(self, kind: CollectionKind, item_id: str) -> bool:
        with _sqlite_errors(f"{kind.name} exists"):
            async with self._connect() as db:
                async with db.execute(f"SELECT 1 FROM {kind.table} WHERE id = ?", (item_id,)) as cursor:
                    row = await cursor.fetchone()
        return row is not None

    async def insert_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> None:
        columns = ("id", *kind.columns)
        placeholders = ", ".join("?" for _ in columns)
        params = (item_id, *(values[column] for column in kind.columns))
        with _sqlite_errors(f"{kind.name} insert"):
            async with self._connect() as db:
                await db.execute(
                    f"INSERT INTO {kind.table} ({', '.join(columns)}) VALUES ({placeholders})",
                    params,
                )
                await db.commit()

    async def update_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> bool:
        assignments = ", ".join(f"{column} = ?" for column in kind.columns)
        params = (*(values[column] for column in kind.columns), item_id)
        with _sqlite_errors(f"{kind.name} update"):
            async with self._connect() as db:
                cursor = await db.execute(f"UPDATE {kind.table} SET {assignments} WHERE id = ?", params)
                await db.commit()
                return cursor.rowcount > 0

    async def delete_collection_row(self, kind: CollectionKind, item_id: str) -> bool:
        with _sqlite_errors(f"{kind.name} delete"):
            async with self._connect() as db:
                cursor = await db.execute(f"DELETE FROM {kind.table} WHERE id = ?", (item_id,))
                await db.commit()
                deleted = cursor.rowcount > 0
        logger.debug("Delete %s id=%s removed=%s", kind.label, item_id, deleted)
        return deleted
