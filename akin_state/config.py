from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .models import DEFAULT_PROFILE_ID


load_dotenv()


BACKENDS = ("sqlite", "postgres", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_lookup(name: str, aliases: tuple[str, ...] = ()) -> str | None:
    for key in (name, *aliases):
        # Be tolerant to UTF-8 BOM accidentally saved in .env key names.
        for candidate in (key, f"\ufeff{key}"):
            raw = os.getenv(candidate)
            if raw is not None:
                return raw
    return None


def _env_int(name: str, default: int, aliases: tuple[str, ...] = ()) -> int:
    raw = _env_lookup(name, aliases)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str, aliases: tuple[str, ...] = ()) -> str:
    raw = _env_lookup(name, aliases)
    if raw is None:
        return default
    value = raw.strip()
    return value if value else default


@dataclass(slots=True)
class Settings:
    backend: str
    sqlite_path: Path
    sqlite_busy_timeout_ms: int
    postgres_dsn: str
    profile_id: str
    api_host: str
    api_port: int
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            backend=_env_str("AKIN_BACKEND", "sqlite").lower(),
            sqlite_path=Path(_env_str("AKIN_SQLITE_PATH", "./data/akin.db")).expanduser(),
            sqlite_busy_timeout_ms=max(0, min(_env_int("AKIN_SQLITE_BUSY_TIMEOUT_MS", 5000), 60000)),
            postgres_dsn=_env_str("AKIN_POSTGRES_DSN", "", aliases=("DATABASE_URL",)),
            profile_id=_env_str("AKIN_PROFILE_ID", DEFAULT_PROFILE_ID),
            api_host=_env_str("AKIN_API_HOST", "127.0.0.1"),
            api_port=_env_int("AKIN_API_PORT", 3000, aliases=("PORT",)),
            log_level=_env_str("AKIN_LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        if self.backend not in BACKENDS:
            raise ValueError("AKIN_BACKEND must be 'sqlite', 'postgres' or 'memory'")
        if self.backend == "postgres" and not self.postgres_dsn:
            raise ValueError("AKIN_POSTGRES_DSN is required when AKIN_BACKEND=postgres")
        if not self.profile_id.strip():
            raise ValueError("AKIN_PROFILE_ID cannot be empty")
        if self.api_port < 1 or self.api_port > 65535:
            raise ValueError("AKIN_API_PORT must be in [1, 65535]")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"AKIN_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
