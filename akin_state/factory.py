from __future__ import annotations

import logging

from .backend import AkinBackend
from .config import Settings


logger = logging.getLogger("akin_state")


def build_akin_store(settings: Settings) -> AkinBackend:
    backend = settings.backend
    if backend == "sqlite":
        from .store import SqliteAkinStore

        logger.info("Using SQLite character store at %s", settings.sqlite_path)
        return SqliteAkinStore(settings.sqlite_path, busy_timeout_ms=settings.sqlite_busy_timeout_ms)

    if backend == "postgres":
        if not settings.postgres_dsn:
            raise ValueError("AKIN_POSTGRES_DSN is required when AKIN_BACKEND=postgres")
        from .postgres_store import PostgresAkinStore

        logger.info("Using Postgres character store")
        return PostgresAkinStore(settings.postgres_dsn)

    if backend == "memory":
        from .memory_store import InMemoryAkinStore

        logger.warning("Using in-memory character store; data is lost on exit")
        return InMemoryAkinStore()

    raise ValueError("AKIN_BACKEND must be 'sqlite', 'postgres' or 'memory'")
