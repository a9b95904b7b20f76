from __future__ import annotations

import asyncio

from ..models import Ability, CompositeState, Flaw, Virtue
from .collection_store import CollectionStore
from .profile_store import ProfileStore


class StateAggregator:
    def __init__(
        self,
        profile: ProfileStore,
        abilities: CollectionStore[Ability],
        virtues: CollectionStore[Virtue],
        flaws: CollectionStore[Flaw],
    ) -> None:
        self.profile = profile
        self.abilities = abilities
        self.virtues = virtues
        self.flaws = flaws

    async def read_all(self) -> CompositeState:
        # The four reads touch disjoint tables; any failure fails the whole read
        # and the reads still in flight are cancelled before the error propagates.
        reads = [
            asyncio.ensure_future(self.profile.read()),
            asyncio.ensure_future(self.abilities.list()),
            asyncio.ensure_future(self.virtues.list()),
            asyncio.ensure_future(self.flaws.list()),
        ]
        try:
            profile, abilities, virtues, flaws = await asyncio.gather(*reads)
        except Exception:
            for read in reads:
                read.cancel()
            await asyncio.gather(*reads, return_exceptions=True)
            raise
        return CompositeState(profile=profile, abilities=abilities, virtues=virtues, flaws=flaws)
