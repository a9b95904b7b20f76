from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..models import ProfileRow
from .utils import _sqlite_errors


logger = logging.getLogger("akin_state")


class AkinProfileMixin:
    async def fetch_profile_row(self, profile_id: str) -> Optional[Dict[str, Any]]:
        with _sqlite_errors("profile read"):
            async with self._connect() as db:
                async with db.execute(
                    """
                    SELECT id, name, house, age, characteristics_json, arts_json, spells, notes, created_at, updated_at
                    FROM akin_profile
                    WHERE id = ?
                    """,
                    (profile_id,),
                ) as cursor:
                    row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def upsert_profile_row(self, profile_id: str, row: ProfileRow, now: datetime) -> None:
        stamp = now.isoformat()
        with _sqlite_errors("profile upsert"):
            async with self._connect() as db:
                await db.execute(
                    """
                    INSERT INTO akin_profile (
                        id, name, house, age, characteristics_json, arts_json, spells, notes, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        house = excluded.house,
                        age = excluded.age,
                        characteristics_json = excluded.characteristics_json,
                        arts_json = excluded.arts_json,
                        spells = excluded.spells,
                        notes = excluded.notes,
                        updated_at = excluded.updated_at
                    """,
                    (
                        profile_id,
                        row.name,
                        row.house,
                        row.age,
                        row.characteristics_json,
                        row.arts_json,
                        row.spells,
                        row.notes,
                        stamp,
                        stamp,
                    ),
                )
                await db.commit()
        logger.debug("Upserted profile %s at %s", profile_id, stamp)
