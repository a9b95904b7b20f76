from __future__ import annotations

import asyncio
import os

import pytest

from akin_state.errors import NotFoundError
from akin_state.postgres_store import PostgresAkinStore, _affected_rows
from akin_state.state.service import AkinService


POSTGRES_DSN = os.getenv("AKIN_TEST_POSTGRES_DSN", "").strip()

requires_postgres = pytest.mark.skipif(
    not POSTGRES_DSN,
    reason="set AKIN_TEST_POSTGRES_DSN to a disposable database to run Postgres tests",
)


def test_affected_rows_parses_command_tags() -> None:
    assert _affected_rows("UPDATE 1") == 1
    assert _affected_rows("DELETE 0") == 0
    assert _affected_rows("garbage") == 0


@requires_postgres
def test_postgres_round_trip() -> None:
    store = PostgresAkinStore(POSTGRES_DSN)
    service = AkinService(store, "akin-test")

    async def scenario():
        await service.ensure_ready()
        pool = await store._ensure_pool()
        async with pool.acquire() as conn:
            await conn.execute("TRUNCATE akin_abilities, akin_virtues, akin_flaws")
            await conn.execute("DELETE FROM akin_profile WHERE id = 'akin-test'")
        try:
            first = await service.upsert_profile({"name": "Akin", "arts": {"creo": 6}})
            second = await service.upsert_profile({"name": "Akin", "arts": {"creo": 6}})
            virtue = await service.virtues.create({"name": "Gentle Gift", "description": "...", "is_major": True})
            virtue = await service.virtues.update(virtue.id, {"name": "Gentle Gift", "description": "..."})
            await service.abilities.create({"name": "latin", "value": 4})
            await service.abilities.create({"name": "Awareness", "value": 3})
            with pytest.raises(NotFoundError):
                await service.flaws.update("flaw-missing", {"name": "x", "description": "y"})
            await service.flaws.delete("flaw-missing")
            state = await service.read_state()
        finally:
            await service.close()
        return first, second, virtue, state

    first, second, virtue, state = asyncio.run(scenario())

    assert first.created_at == second.created_at
    assert state.profile is not None
    assert state.profile.arts["creo"] == 6
    assert virtue.is_major is False
    assert [item.name for item in state.abilities] == ["Awareness", "latin"]
    assert state.flaws == []
