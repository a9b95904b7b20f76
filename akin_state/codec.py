"""Conversion between ``CharacterProfile`` and its persisted row.

The two structured attributes are stored as JSON text. Writes record exactly
what was supplied (``NULL`` when a map was omitted); reads always materialize the
full fixed key set, so callers never see a partial or missing map.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .errors import DecodeError
from .models import ART_KEYS, CHARACTERISTIC_KEYS, CharacterProfile, ProfileInput, ProfileRow
from .validation import coerce_int


logger = logging.getLogger("akin_state")


def _parse_blob(raw: Any, column: str) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return dict(raw)
    try:
        parsed = json.loads(str(raw))
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"{column} is not valid JSON") from exc
    if not isinstance(parsed, dict):
        raise DecodeError(f"{column} is not a JSON object")
    return parsed


def _score(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            return int(float(value.strip()))
    except (ValueError, OverflowError):
        return 0
    return 0


def _materialize(supplied: Optional[Mapping[str, Any]], keys: tuple[str, ...]) -> Dict[str, int]:
    if not supplied:
        return dict.fromkeys(keys, 0)
    return {key: _score(supplied.get(key, 0)) for key in keys}


def _decode_blob(raw: Any, column: str, profile_id: str) -> Optional[Dict[str, Any]]:
    if raw is None or raw == "":
        return None
    try:
        return _parse_blob(raw, column)
    except DecodeError as exc:
        logger.warning("Falling back to defaults for profile %s: %s", profile_id, exc)
        return None


def _timestamp(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def decode_profile(row: Optional[Mapping[str, Any]]) -> Optional[CharacterProfile]:
    if row is None:
        return None
    profile_id = str(row["id"])
    characteristics = _decode_blob(row.get("characteristics_json"), "characteristics_json", profile_id)
    arts = _decode_blob(row.get("arts_json"), "arts_json", profile_id)
    return CharacterProfile(
        id=profile_id,
        name=str(row.get("name") or ""),
        house=str(row.get("house") or ""),
        age=coerce_int(row.get("age")),
        characteristics=_materialize(characteristics, CHARACTERISTIC_KEYS),
        arts=_materialize(arts, ART_KEYS),
        spells=str(row.get("spells") or ""),
        notes=str(row.get("notes") or ""),
        created_at=_timestamp(row.get("created_at")),
        updated_at=_timestamp(row.get("updated_at")),
    )


def _encode_blob(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def encode_profile(profile_input: ProfileInput) -> ProfileRow:
    return ProfileRow(
        name="" if profile_input.name is None else str(profile_input.name),
        house="" if profile_input.house is None else str(profile_input.house),
        age=coerce_int(profile_input.age),
        characteristics_json=_encode_blob(profile_input.characteristics),
        arts_json=_encode_blob(profile_input.arts),
        spells="" if profile_input.spells is None else str(profile_input.spells),
        notes="" if profile_input.notes is None else str(profile_input.notes),
    )
