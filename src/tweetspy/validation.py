"""Argument validation helpers.

Validation never raises: each helper returns Valid or Invalid and the
caller decides whether to proceed or reply with the message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_MISSING = "Please supply a search query"
SWITCH_VALUES: dict[str, bool] = {"on": True, "off": False}


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Invalid:
    message: str


def require_argument(
    raw: str | None, missing: str = DEFAULT_MISSING
) -> Valid[str] | Invalid:
    """Return the trimmed argument, or Invalid if it is empty or blank."""
    if raw is None or not raw.strip():
        return Invalid(missing)
    return Valid(raw.strip())


def parse_switch(raw: str, error: str) -> Valid[bool] | Invalid:
    """Parse a case-insensitive 'on'/'off' value."""
    value = SWITCH_VALUES.get(raw.strip().lower())
    if value is None:
        return Invalid(error)
    return Valid(value)


def split_login(raw: str, missing: str) -> Valid[tuple[str, str]] | Invalid:
    """Split '<username> <password>'; the password keeps inner whitespace."""
    parts = raw.strip().split(maxsplit=1)
    if len(parts) != 2 or not parts[1].strip():
        return Invalid(missing)
    return Valid((parts[0], parts[1].strip()))


def parse_language(raw: str | None, error: str) -> Valid[str | None] | Invalid:
    """Blank clears the preference; otherwise exactly two characters."""
    if raw is None or not raw.strip():
        return Valid(None)
    value = raw.strip()
    if len(value) != 2:
        return Invalid(error)
    return Valid(value)
