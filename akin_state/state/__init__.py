from .aggregator import StateAggregator
from .collection_store import CollectionStore
from .profile_store import ProfileStore
from .service import AkinService

__all__ = ["AkinService", "CollectionStore", "ProfileStore", "StateAggregator"]
