from __future__ import annotations

from typing import Iterable


class AkinStateError(Exception):
    """Base class for character-state store failures."""


class ValidationError(AkinStateError):
    def __init__(
        self,
        missing_fields: Iterable[str] = (),
        invalid_fields: Iterable[str] = (),
    ) -> None:
        self.missing_fields = list(missing_fields)
        self.invalid_fields = list(invalid_fields)
        parts: list[str] = []
        if self.missing_fields:
            parts.append(f"Missing required fields: {', '.join(self.missing_fields)}")
        if self.invalid_fields:
            parts.append(f"Invalid fields: {', '.join(self.invalid_fields)}")
        super().__init__("; ".join(parts) or "Invalid input")


class NotFoundError(AkinStateError):
    def __init__(self, kind: str, item_id: str) -> None:
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} item not found: {item_id}")


class StoreError(AkinStateError):
    """Storage backend failure (connectivity, schema not ready, driver error)."""


class DecodeError(AkinStateError):
    """Malformed structured blob; recovered inside the profile codec."""
