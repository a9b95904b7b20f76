from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from pathlib import Path

import aiosqlite

from ..errors import StoreError
from .utils import DEFAULT_BUSY_TIMEOUT_MS, _sqlite_akin_connection, _sqlite_errors


logger = logging.getLogger("akin_state")


class AkinSchemaMixin:
    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path, *, busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.busy_timeout_ms = int(busy_timeout_ms)
        self._init_lock = asyncio.Lock()
        self._initialized = False

    def _connect(self) -> AbstractAsyncContextManager[aiosqlite.Connection]:
        return _sqlite_akin_connection(self.db_path, self.busy_timeout_ms)

    async def ensure_ready(self) -> None:
        async with self._init_lock:
            if self._initialized:
                return
            with _sqlite_errors("schema init"):
                async with self._connect() as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    async with db.execute("PRAGMA user_version") as cursor:
                        row = await cursor.fetchone()
                    version = int(row[0]) if row else 0
                    if version > self.SCHEMA_VERSION:
                        raise StoreError(
                            "SQLite schema version mismatch detected (database is newer than this build). "
                            f"Found user_version={version}, supported={self.SCHEMA_VERSION}."
                        )
                    await self._create_schema(db)
                    if version != self.SCHEMA_VERSION:
                        await db.execute(f"PRAGMA user_version = {self.SCHEMA_VERSION}")
                    await db.commit()
            self._initialized = True
            logger.info("SQLite character store ready at %s", self.db_path)

    async def _create_schema(self, db: aiosqlite.Connection) -> None:
        await db.executescript(
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
                created_at TEXT DEFAULT (datetime('now')),
                updated_at TEXT DEFAULT (datetime('now'))
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
