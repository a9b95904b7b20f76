from __future__ import annotations

from typing import Any, Optional


# INTEGER columns are signed 32-bit on Postgres; SQLite stores the same range.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return not str(value).strip()


def is_plain_text(value: Any) -> bool:
    """True for values that read naturally as text (strings and numbers, not containers)."""
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _bounded(value: int) -> Optional[int]:
    if INT_MIN <= value <= INT_MAX:
        return value
    return None


def coerce_int(value: Any) -> Optional[int]:
    """Integer reading of ``value`` within the column range, or None when it has none (bools never count)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _bounded(value)
    if isinstance(value, float):
        return _bounded(int(value)) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return _bounded(int(value.strip()))
        except ValueError:
            return None
    return None


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def as_flag(value: Any) -> int:
    if isinstance(value, str):
        return 1 if value.strip().lower() in {"1", "true", "yes", "y", "on"} else 0
    return 1 if value else 0
