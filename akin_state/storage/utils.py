from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Iterator

import aiosqlite

from ..errors import StoreError


logger = logging.getLogger("akin_state")

DEFAULT_BUSY_TIMEOUT_MS = 5000


def _clamp_busy_timeout(timeout_ms: int) -> int:
    return max(0, min(int(timeout_ms), 60000))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@asynccontextmanager
async def _sqlite_akin_connection(
    db_path: str | Path,
    busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS,
) -> AsyncIterator[aiosqlite.Connection]:
    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        timeout_ms = _clamp_busy_timeout(busy_timeout_ms)
        if timeout_ms > 0:
            await db.execute(f"PRAGMA busy_timeout={timeout_ms}")
        yield db


@contextmanager
def _sqlite_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except StoreError:
        raise
    except (sqlite3.Error, OSError, OverflowError, TypeError, ValueError) as exc:
        logger.exception("SQLite %s failed", operation)
        raise StoreError(f"SQLite {operation} failed: {exc}") from exc
