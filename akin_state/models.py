from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional


DEFAULT_PROFILE_ID = "akin"

CHARACTERISTIC_KEYS: tuple[str, ...] = ("int", "per", "str", "sta", "pre", "com", "dex", "qik")

ART_KEYS: tuple[str, ...] = (
    "creo",
    "intellego",
    "muto",
    "perdo",
    "rego",
    "animal",
    "aquam",
    "auram",
    "corpus",
    "herbam",
    "ignem",
    "imaginem",
    "mentem",
    "terram",
    "vim",
)


@dataclass(slots=True)
class CharacterProfile:
    id: str
    name: str = ""
    house: str = ""
    age: Optional[int] = None
    characteristics: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(CHARACTERISTIC_KEYS, 0))
    arts: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(ART_KEYS, 0))
    spells: str = ""
    notes: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ProfileInput:
    """Partial profile body; ``None`` means the field was not supplied."""

    name: Optional[str] = None
    house: Optional[str] = None
    age: Any = None
    characteristics: Any = None
    arts: Any = None
    spells: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "ProfileInput":
        data = dict(payload or {})
        return cls(
            name=data.get("name"),
            house=data.get("house"),
            age=data.get("age"),
            characteristics=data.get("characteristics"),
            arts=data.get("arts"),
            spells=data.get("spells"),
            notes=data.get("notes"),
        )


@dataclass(slots=True)
class ProfileRow:
    """Column values written for the singleton profile row."""

    name: str
    house: str
    age: Optional[int]
    characteristics_json: Optional[str]
    arts_json: Optional[str]
    spells: str
    notes: str


@dataclass(slots=True)
class Ability:
    id: str
    name: str
    value: int
    specialty: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class Virtue:
    id: str
    name: str
    description: str
    is_major: bool = False
    page: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class Flaw:
    id: str
    name: str
    description: str
    is_major: bool = False
    page: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class CompositeState:
    """Profile plus all three collections, as returned by one aggregate read."""

    profile: Optional[CharacterProfile]
    abilities: List[Ability] = field(default_factory=list)
    virtues: List[Virtue] = field(default_factory=list)
    flaws: List[Flaw] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile.to_dict() if self.profile is not None else None,
            "abilities": [item.to_dict() for item in self.abilities],
            "virtues": [item.to_dict() for item in self.virtues],
            "flaws": [item.to_dict() for item in self.flaws],
        }
