from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Protocol

from .kinds import CollectionKind
from .models import ProfileRow


class AkinBackend(Protocol):
    """Row-level storage API shared by the SQLite, Postgres and in-memory stores."""

    backend_name: str

    async def ensure_ready(self) -> None: ...

    async def ping(self) -> None: ...

    async def close(self) -> None: ...

    async def fetch_profile_row(self, profile_id: str) -> Optional[Dict[str, Any]]: ...

    async def upsert_profile_row(self, profile_id: str, row: ProfileRow, now: datetime) -> None: ...

    async def list_collection_rows(self, kind: CollectionKind) -> List[Dict[str, Any]]: ...

    async def fetch_collection_row(self, kind: CollectionKind, item_id: str) -> Optional[Dict[str, Any]]: ...

    async def collection_row_exists(self, kind: CollectionKind, item_id: str) -> bool: ...

    async def insert_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> None: ...

    async def update_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> bool: ...

    async def delete_collection_row(self, kind: CollectionKind, item_id: str) -> bool: ...
