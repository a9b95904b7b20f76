from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from ..backend import AkinBackend
from ..codec import decode_profile, encode_profile
from ..errors import StoreError
from ..models import DEFAULT_PROFILE_ID, CharacterProfile, ProfileInput
from ..storage.utils import utc_now


logger = logging.getLogger("akin_state")


class ProfileStore:
    """Read and whole-record upsert of the singleton character profile."""

    def __init__(
        self,
        backend: AkinBackend,
        profile_id: str = DEFAULT_PROFILE_ID,
        *,
        clock: Callable[[], Any] = utc_now,
    ) -> None:
        self.backend = backend
        self.profile_id = profile_id
        self._clock = clock

    async def read(self) -> Optional[CharacterProfile]:
        row = await self.backend.fetch_profile_row(self.profile_id)
        return decode_profile(row)

    async def upsert(self, profile_input: ProfileInput | Mapping[str, Any] | None = None) -> CharacterProfile:
        if not isinstance(profile_input, ProfileInput):
            profile_input = ProfileInput.from_payload(profile_input)
        row = encode_profile(profile_input)
        await self.backend.upsert_profile_row(self.profile_id, row, self._clock())
        profile = await self.read()
        if profile is None:
            raise StoreError(f"Profile {self.profile_id} missing right after upsert")
        logger.info("Profile %s saved (name=%r)", self.profile_id, profile.name)
        return profile
