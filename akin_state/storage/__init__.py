from .items import AkinCollectionsMixin
from .profile import AkinProfileMixin
from .schema import AkinSchemaMixin

__all__ = [
    "AkinSchemaMixin",
    "AkinProfileMixin",
    "AkinCollectionsMixin",
]
