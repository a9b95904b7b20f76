from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from akin_state.memory_store import InMemoryAkinStore  # noqa: E402
from akin_state.store import SqliteAkinStore  # noqa: E402


@pytest.fixture(params=["sqlite", "memory"])
def backend(request: pytest.FixtureRequest, tmp_path: Path):  # type: ignore[no-untyped-def]
    if request.param == "sqlite":
        store = SqliteAkinStore(tmp_path / "akin.db")
    else:
        store = InMemoryAkinStore()
    asyncio.run(store.ensure_ready())
    yield store
    asyncio.run(store.close())
