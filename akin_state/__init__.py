"""AKIN character-state store: profile, abilities, virtues and flaws."""

__version__ = "1.0.0"

from .errors import AkinStateError, DecodeError, NotFoundError, StoreError, ValidationError
from .memory_store import InMemoryAkinStore
from .models import Ability, CharacterProfile, CompositeState, Flaw, ProfileInput, Virtue
from .state import AkinService, CollectionStore, ProfileStore, StateAggregator
from .store import SqliteAkinStore

__all__ = [
    "__version__",
    "Ability",
    "AkinService",
    "AkinStateError",
    "CharacterProfile",
    "CollectionStore",
    "CompositeState",
    "DecodeError",
    "Flaw",
    "InMemoryAkinStore",
    "NotFoundError",
    "ProfileInput",
    "ProfileStore",
    "SqliteAkinStore",
    "StateAggregator",
    "StoreError",
    "ValidationError",
    "Virtue",
]
