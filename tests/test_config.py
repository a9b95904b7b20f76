from __future__ import annotations

from pathlib import Path

import pytest

from akin_state.config import Settings
from akin_state.factory import build_akin_store
from akin_state.memory_store import InMemoryAkinStore
from akin_state.postgres_store import PostgresAkinStore
from akin_state.store import SqliteAkinStore


_ENV_KEYS = (
    "AKIN_BACKEND",
    "AKIN_SQLITE_PATH",
    "AKIN_SQLITE_BUSY_TIMEOUT_MS",
    "AKIN_POSTGRES_DSN",
    "DATABASE_URL",
    "AKIN_PROFILE_ID",
    "AKIN_API_HOST",
    "AKIN_API_PORT",
    "PORT",
    "AKIN_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_settings_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = Settings.from_env()
    settings.validate()

    assert settings.backend == "sqlite"
    assert settings.sqlite_path == Path("./data/akin.db")
    assert settings.sqlite_busy_timeout_ms == 5000
    assert settings.profile_id == "akin"
    assert settings.api_port == 3000
    assert settings.log_level == "INFO"


def test_settings_read_environment(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("AKIN_BACKEND", "Postgres")
    clean_env.setenv("DATABASE_URL", "postgresql://akin@localhost/akin")
    clean_env.setenv("AKIN_SQLITE_BUSY_TIMEOUT_MS", "999999")
    clean_env.setenv("AKIN_API_PORT", "not-a-port")
    clean_env.setenv("AKIN_PROFILE_ID", "companion")

    settings = Settings.from_env()
    settings.validate()

    assert settings.backend == "postgres"
    assert settings.postgres_dsn == "postgresql://akin@localhost/akin"
    assert settings.sqlite_busy_timeout_ms == 60000
    assert settings.api_port == 3000
    assert settings.profile_id == "companion"


@pytest.mark.parametrize(
    "env, message",
    [
        ({"AKIN_BACKEND": "mysql"}, "AKIN_BACKEND"),
        ({"AKIN_BACKEND": "postgres"}, "AKIN_POSTGRES_DSN"),
        ({"AKIN_API_PORT": "70000"}, "AKIN_API_PORT"),
        ({"AKIN_LOG_LEVEL": "chatty"}, "AKIN_LOG_LEVEL"),
    ],
)
def test_settings_validate_rejects_bad_values(clean_env: pytest.MonkeyPatch, env: dict, message: str) -> None:
    for key, value in env.items():
        clean_env.setenv(key, value)

    with pytest.raises(ValueError, match=message):
        Settings.from_env().validate()


def test_factory_builds_each_backend(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("AKIN_SQLITE_PATH", str(tmp_path / "akin.db"))
    clean_env.setenv("AKIN_POSTGRES_DSN", "postgresql://akin@localhost/akin")

    clean_env.setenv("AKIN_BACKEND", "sqlite")
    assert isinstance(build_akin_store(Settings.from_env()), SqliteAkinStore)

    clean_env.setenv("AKIN_BACKEND", "postgres")
    assert isinstance(build_akin_store(Settings.from_env()), PostgresAkinStore)

    clean_env.setenv("AKIN_BACKEND", "memory")
    assert isinstance(build_akin_store(Settings.from_env()), InMemoryAkinStore)


def test_postgres_store_requires_dsn() -> None:
    with pytest.raises(ValueError, match="AKIN_POSTGRES_DSN"):
        PostgresAkinStore("   ")
