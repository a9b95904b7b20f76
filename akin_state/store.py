from __future__ import annotations

from .storage.items import AkinCollectionsMixin
from .storage.profile import AkinProfileMixin
from .storage.schema import AkinSchemaMixin
from .storage.utils import _sqlite_errors


class SqliteAkinStore(
    AkinSchemaMixin,
    AkinProfileMixin,
    AkinCollectionsMixin,
):
    """Persistent character-state store backed by a local SQLite file."""

    backend_name = "sqlite"

    async def ping(self) -> None:
        with _sqlite_errors("ping"):
            async with self._connect() as db:
                await db.execute("SELECT 1")

    async def close(self) -> None:
        # Connections are opened per operation; nothing is held between calls.
        return None
