from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional

import asyncpg

from .errors import StoreError
from .kinds import CollectionKind
from .models import ProfileRow


logger = logging.getLogger("akin_state")


def _affected_rows(status: str) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 1" / "DELETE 0".
    try:
        return int(str(status).rsplit(" ", 1)[-1])
    except ValueError:
        return 0


@contextmanager
def _postgres_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except StoreError:
        raise
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError, OverflowError, TypeError, ValueError) as exc:
        logger.exception("Postgres %s failed", operation)
        raise StoreError(f"Postgres {operation} failed: {exc}") from exc


class PostgresAkinStore:
    """Postgres-backed character-state store implementing the same API as SqliteAkinStore."""

    SCHEMA_VERSION = 1
    backend_name = "postgres"

    def __init__(self, dsn: str, *, min_pool_size: int = 1, max_pool_size: int = 6) -> None:
        self.dsn = dsn.strip()
        if not self.dsn:
            raise ValueError("AKIN_POSTGRES_DSN cannot be empty")
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self._pool: asyncpg.Pool | None = None
        self._init_lock = asyncio.Lock()
        self._initialized = False

    async def _ensure_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            with _postgres_errors("connect"):
                self._pool = await asyncpg.create_pool(
                    dsn=self.dsn,
                    min_size=self.min_pool_size,
                    max_size=self.max_pool_size,
                    command_timeout=30.0,
                )
        return self._pool

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
        self._initialized = False

    async def ping(self) -> None:
        pool = await self._ensure_pool()
        with _postgres_errors("ping"):
            async with pool.acquire() as conn:
                await conn.execute("SELECT 1")

    async def ensure_ready(self) -> None:
        async with self._init_lock:
            if self._initialized:
                return
            pool = await self._ensure_pool()
            with _postgres_errors("schema init"):
                async with pool.acquire() as conn:
                    async with conn.transaction():
                        version = await self._get_schema_version(conn)
                        if version > self.SCHEMA_VERSION:
                            raise StoreError(
                                f"Postgres schema version {version} is newer than supported {self.SCHEMA_VERSION}."
                            )
                        await self._create_schema(conn)
                        if version != self.SCHEMA_VERSION:
                            await self._set_schema_version(conn, self.SCHEMA_VERSION)
            self._initialized = True
            logger.info("Postgres character store ready")

    async def _get_schema_version(self, conn: asyncpg.Connection) -> int:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS akin_meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        )
        row = await conn.fetchrow("SELECT value FROM akin_meta WHERE key = 'schema_version'")
        if row is None:
            return 0
        try:
            return int(str(row["value"]))
        except ValueError:
            return 0

    async def _set_schema_version(self, conn: asyncpg.Connection, version: int) -> None:
        await conn.execute(
            """
            INSERT INTO akin_meta (key, value, updated_at)
            VALUES ('schema_version', $1, NOW())
            ON CONFLICT(key) DO UPDATE SET
                value = EXCLUDED.value,
                updated_at = NOW()
            """,
            str(int(version)),
        )

    async def _create_schema(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS akin_profile (
                id TEXT PRIMARY KEY,
                name TEXT,
                house TEXT,
                age INTEGER,
                characteristics_json TEXT,
                arts_json TEXT,
                spells TEXT,
                notes TEXT,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );

            CREATE TABLE IF NOT EXISTS akin_abilities (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                value INTEGER NOT NULL,
                specialty TEXT
            );

            CREATE TABLE IF NOT EXISTS akin_virtues (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT NOT NULL,
                is_major INTEGER NOT NULL DEFAULT 0,
                page INTEGER
            );

            CREATE TABLE IF NOT EXISTS akin_flaws (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT NOT NULL,
                is_major INTEGER NOT NULL DEFAULT 0,
                page INTEGER
            );

            CREATE INDEX IF NOT EXISTS idx_akin_abilities_name ON akin_abilities(name);
            CREATE INDEX IF NOT EXISTS idx_akin_virtues_name ON akin_virtues(name);
            CREATE INDEX IF NOT EXISTS idx_akin_flaws_name ON akin_flaws(name);
            """
        )

    async def fetch_profile_row(self, profile_id: str) -> Optional[Dict[str, Any]]:
        pool = await self._ensure_pool()
        with _postgres_errors("profile read"):
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    """
                    SELECT id, name, house, age, characteristics_json, arts_json, spells, notes, created_at, updated_at
                    FROM akin_profile
                    WHERE id = $1
                    """,
                    profile_id,
                )
        if row is None:
            return None
        return dict(row)

    async def upsert_profile_row(self, profile_id: str, row: ProfileRow, now: datetime) -> None:
        pool = await self._ensure_pool()
        with _postgres_errors("profile upsert"):
            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO akin_profile (
                        id, name, house, age, characteristics_json, arts_json, spells, notes, created_at, updated_at
                    )
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $9)
                    ON CONFLICT(id) DO UPDATE SET
                        name = EXCLUDED.name,
                        house = EXCLUDED.house,
                        age = EXCLUDED.age,
                        characteristics_json = EXCLUDED.characteristics_json,
                        arts_json = EXCLUDED.arts_json,
                        spells = EXCLUDED.spells,
                        notes = EXCLUDED.notes,
                        updated_at = EXCLUDED.updated_at
                    """,
                    profile_id,
                    row.name,
                    row.house,
                    row.age,
                    row.characteristics_json,
                    row.arts_json,
                    row.spells,
                    row.notes,
                    now,
                )
        logger.debug("Upserted profile %s at %s", profile_id, now.isoformat())

    async def list_collection_rows(self, kind: CollectionKind) -> List[Dict[str, Any]]:
        pool = await self._ensure_pool()
        columns = ", ".join(("id", *kind.columns))
        with _postgres_errors(f"{kind.name} list"):
            async with pool.acquire() as conn:
                rows = await conn.fetch(
                    f'SELECT {columns} FROM {kind.table} ORDER BY name COLLATE "C" ASC, id COLLATE "C" ASC'
                )
        return [dict(row) for row in rows]

    async def fetch_collection_row(self, kind: CollectionKind, item_id: str) -> Optional[Dict[str, Any]]:
        pool = await self._ensure_pool()
        columns = ", ".join(("id", *kind.columns))
        with _postgres_errors(f"{kind.name} read"):
            async with pool.acquire() as conn:
                row = await conn.fetchrow(f"SELECT {columns} FROM {kind.table} WHERE id = $1", item_id)
        if row is None:
            return None
        return dict(row)

    async def collection_row_exists(self, kind: CollectionKind, item_id: str) -> bool:
        pool = await self._ensure_pool()
        with _postgres_errors(f"{kind.name} exists"):
            async with pool.acquire() as conn:
                found = await conn.fetchval(f"SELECT 1 FROM {kind.table} WHERE id = $1", item_id)
        return found is not None

    async def insert_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> None:
        pool = await self._ensure_pool()
        columns = ("id", *kind.columns)
        placeholders = ", ".join(f"${index}" for index in range(1, len(columns) + 1))
        with _postgres_errors(f"{kind.name} insert"):
            async with pool.acquire() as conn:
                await conn.execute(
                    f"INSERT INTO {kind.table} ({', '.join(columns)}) VALUES ({placeholders})",
                    item_id,
                    *(values[column] for column in kind.columns),
                )

    async def update_collection_row(self, kind: CollectionKind, item_id: str, values: Mapping[str, Any]) -> bool:
        pool = await self._ensure_pool()
        assignments = ", ".join(f"{column} = ${index}" for index, column in enumerate(kind.columns, start=1))
        id_placeholder = f"${len(kind.columns) + 1}"
        with _postgres_errors(f"{kind.name} update"):
            async with pool.acquire() as conn:
                status = await conn.execute(
                    f"UPDATE {kind.table} SET {assignments} WHERE id = {id_placeholder}",
                    *(values[column] for column in kind.columns),
                    item_id,
                )
        return _affected_rows(status) > 0

    async def delete_collection_row(self, kind: CollectionKind, item_id: str) -> bool:
        pool = await self._ensure_pool()
        with _postgres_errors(f"{kind.name} delete"):
            async with pool.acquire() as conn:
                status = await conn.execute(f"DELETE FROM {kind.table} WHERE id = $1", item_id)
        deleted = _affected_rows(status) > 0
        logger.debug("Delete %s id=%s removed=%s", kind.label, item_id, deleted)
        return deleted
