from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import ValidationError
from .models import Ability, Flaw, Virtue
from .validation import as_flag, coerce_int, is_blank, is_plain_text, optional_text


def _check_text(field: str, value: Any, missing: list[str], invalid: list[str]) -> None:
    if is_blank(value):
        missing.append(field)
    elif not is_plain_text(value):
        invalid.append(field)


def _ability_columns(payload: Mapping[str, Any]) -> Dict[str, Any]:
    missing: list[str] = []
    invalid: list[str] = []
    name = payload.get("name")
    raw_value = payload.get("value")
    value = coerce_int(raw_value)
    specialty = payload.get("specialty")
    _check_text("name", name, missing, invalid)
    if raw_value is None:
        missing.append("value")
    elif value is None:
        invalid.append("value")
    if specialty is not None and not is_plain_text(specialty):
        invalid.append("specialty")
    if missing or invalid:
        raise ValidationError(missing, invalid)
    return {
        "name": str(name),
        "value": value,
        "specialty": optional_text(specialty),
    }


def _merit_columns(payload: Mapping[str, Any]) -> Dict[str, Any]:
    missing: list[str] = []
    invalid: list[str] = []
    name = payload.get("name")
    description = payload.get("description")
    raw_page = payload.get("page")
    page = coerce_int(raw_page)
    _check_text("name", name, missing, invalid)
    _check_text("description", description, missing, invalid)
    if raw_page is not None and page is None:
        invalid.append("page")
    if missing or invalid:
        raise ValidationError(missing, invalid)
    return {
        "name": str(name),
        "description": str(description),
        "is_major": as_flag(payload.get("is_major", False)),
        "page": page,
    }


def _optional_int_column(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def _ability_from_row(row: Mapping[str, Any]) -> Ability:
    return Ability(
        id=str(row["id"]),
        name=str(row["name"]),
        value=int(row["value"]),
        specialty=optional_text(row["specialty"]),
    )


def _virtue_from_row(row: Mapping[str, Any]) -> Virtue:
    return Virtue(
        id=str(row["id"]),
        name=str(row["name"]),
        description=str(row["description"]),
        is_major=bool(row["is_major"]),
        page=_optional_int_column(row["page"]),
    )


def _flaw_from_row(row: Mapping[str, Any]) -> Flaw:
    return Flaw(
        id=str(row["id"]),
        name=str(row["name"]),
        description=str(row["description"]),
        is_major=bool(row["is_major"]),
        page=_optional_int_column(row["page"]),
    )


@dataclass(frozen=True, slots=True)
class CollectionKind:
    """Table layout and row rules for one child collection."""

    name: str
    label: str
    table: str
    id_prefix: str
    columns: tuple[str, ...]
    to_columns: Callable[[Mapping[str, Any]], Dict[str, Any]]
    from_row: Callable[[Mapping[str, Any]], Any]

    def new_id(self) -> str:
        return f"{self.id_prefix}-{uuid.uuid4()}"


ABILITIES = CollectionKind(
    name="abilities",
    label="ability",
    table="akin_abilities",
    id_prefix="abil",
    columns=("name", "value", "specialty"),
    to_columns=_ability_columns,
    from_row=_ability_from_row,
)

VIRTUES = CollectionKind(
    name="virtues",
    label="virtue",
    table="akin_virtues",
    id_prefix="virt",
    columns=("name", "description", "is_major", "page"),
    to_columns=_merit_columns,
    from_row=_virtue_from_row,
)

FLAWS = CollectionKind(
    name="flaws",
    label="flaw",
    table="akin_flaws",
    id_prefix="flaw",
    columns=("name", "description", "is_major", "page"),
    to_columns=_merit_columns,
    from_row=_flaw_from_row,
)

COLLECTION_KINDS: Dict[str, CollectionKind] = {kind.name: kind for kind in (ABILITIES, VIRTUES, FLAWS)}


def get_kind(name: str) -> CollectionKind:
    try:
        return COLLECTION_KINDS[name]
    except KeyError:
        raise KeyError(f"Unknown collection kind: {name}") from None
