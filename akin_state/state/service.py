from __future__ import annotations

from typing import Any, Dict, Mapping

from ..backend import AkinBackend
from ..kinds import ABILITIES, FLAWS, VIRTUES, get_kind
from ..models import DEFAULT_PROFILE_ID, Ability, CharacterProfile, CompositeState, Flaw, Virtue
from .aggregator import StateAggregator
from .collection_store import CollectionStore
from .profile_store import ProfileStore


class AkinService:
    """Wires one storage backend to the profile, collection and aggregate stores."""

    def __init__(self, backend: AkinBackend, profile_id: str = DEFAULT_PROFILE_ID) -> None:
        self.backend = backend
        self.profile = ProfileStore(backend, profile_id)
        self.abilities: CollectionStore[Ability] = CollectionStore(backend, ABILITIES)
        self.virtues: CollectionStore[Virtue] = CollectionStore(backend, VIRTUES)
        self.flaws: CollectionStore[Flaw] = CollectionStore(backend, FLAWS)
        self._collections: Dict[str, CollectionStore[Any]] = {
            ABILITIES.name: self.abilities,
            VIRTUES.name: self.virtues,
            FLAWS.name: self.flaws,
        }
        self.aggregator = StateAggregator(self.profile, self.abilities, self.virtues, self.flaws)

    async def ensure_ready(self) -> None:
        await self.backend.ensure_ready()

    async def close(self) -> None:
        await self.backend.close()

    def collection(self, kind_name: str) -> CollectionStore[Any]:
        return self._collections[get_kind(kind_name).name]

    async def read_state(self) -> CompositeState:
        return await self.aggregator.read_all()

    async def upsert_profile(self, payload: Mapping[str, Any] | None) -> CharacterProfile:
        return await self.profile.upsert(payload)
