from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from .errors import StoreError
from .kinds import COLLECTION_KINDS, CollectionKind
from .models import ProfileRow


logger = logging.getLogger("akin_state")


class InMemoryAkinStore:
    """Process-local store with the same row API as the SQL backends.

    State lives on the instance, so every test or app gets its own copy. Rows
    are copied on the way in and out; callers never share dicts with the store.
    """

    backend_name = "memory"

    def __init__(self) -> None:
        self._profiles: Dict[str, Dict[str, Any]] = {}
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._write_lock = asyncio.Lock()
        self._ready = False

    async def ensure_ready(self) -> None:
        for kind in COLLECTION_KINDS.values():
            self._tables.setdefault(kind.table, {})
        self._ready = True

    async def ping(self) -> None:
        self._require_ready()

    async def close(self) -> None:
        return None

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreError("In-memory store used before ensure_ready()")

    def _table(self, kind: CollectionKind) -> Dict[str, Dict[str, Any]]:
        self._require_ready()
        return self._tables[kind.table]

    async def fetch_profile_row(self, profile_id: str) -> Optional[Dict[str, Any]]:
        self._require_ready()
        row = self._profiles.get(profile_id)
        return dict(row) if row is not None else None

    async def upsert_profile_row(self, profile_id: str, row: ProfileRow, now: datetime) -> None:
        self._require_ready()
        stamp = now.isoformat()
        async with self._write_lock:
            existing = self._profiles.get(profile_id)
            self._profiles[profile_id] = {
                "id": profile_id,
                "name": row.name,
                "house": row.house,
                "age": row.age,
                "characteristics_json": row.characteristics_json,
                "arts_json": row.arts_json,
                "spells": row.spells,
                "notes": row.notes,
                "created_at": existing["created_at"] if existing is not None else stamp,
                "updated_at": stamp,
            }

    async def list_collection_rows(self, kind: CollectionKind) -> List[Dict[str, Any]]:
        rows = [dict(row) for row in self._table(kind).values()]
        rows.sort(key=lambda row: (row["name"], row["id"]))
        return rows

    async def fetch_collection_row(self, kind: CollectionKind, item_id: str) -> Optional[Dict[str, Any]]:
        row = self._table(kind).get(item_id)
        return dict(row) if row is not None else None

    async def collection_row_exists(self, kind: CollectionKind, item_id: str) -> bool:
        return item_id in self._table(kind)

    async def insert_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> None:
        table = self._table(kind)
        async with self._write_lock:
            if item_id in table:
                raise StoreError(f"Duplicate {kind.label} id: {item_id}")
            table[item_id] = {"id": item_id, **{column: values[column] for column in kind.columns}}

    async def update_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> bool:
        table = self._table(kind)
        async with self._write_lock:
            if item_id not in table:
                return False
            table[item_id] = {"id": item_id, **{column: values[column] for column in kind.columns}}
            return True

    async def delete_collection_row(self, kind: CollectionKind, item_id: str) -> bool:
        table = self._table(kind)
        async with self._write_lock:
            deleted = table.pop(item_id, None) is not None
        logger.debug("Delete %s id=%s removed=%s", kind.label, item_id, deleted)
        return deleted
