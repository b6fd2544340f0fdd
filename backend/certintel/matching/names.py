"""certintel/matching/names.py

Name canonicalization for matching OCR'd recipient names to directory users.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

_LETTERS_ONLY = re.compile(r"[^a-z]+")
_LETTERS_AND_DIGITS = re.compile(r"[^a-z0-9]+")


def normalize(text: str | None, *, keep_numbers: bool = False) -> str:
    """Lower-case, collapse everything outside [a-z] (or [a-z0-9]) to single spaces, trim."""
    pattern = _LETTERS_AND_DIGITS if keep_numbers else _LETTERS_ONLY
    return pattern.sub(" ", (text or "").lower()).strip()


def tokens(text: str | None, *, keep_numbers: bool = False) -> list[str]:
    return normalize(text, keep_numbers=keep_numbers).split()


@dataclass(frozen=True)
class Person:
    id: str
    display_name: str = ""
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    email: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Person":
        """Accepts the portal's camelCase user documents or snake_case dicts."""
        def pick(*keys: str) -> str:
            for key in keys:
                value = data.get(key)
                if value:
                    return str(value)
            return ""

        return cls(
            id=pick("id", "_id"),
            display_name=pick("display_name", "displayName"),
            first_name=pick("first_name", "firstName"),
            middle_name=pick("middle_name", "middleName"),
            last_name=pick("last_name", "lastName"),
            email=pick("email") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "first_name": self.first_name,
            "middle_name": self.middle_name,
            "last_name": self.last_name,
            "email": self.email,
        }


def variant_set(person: Person | None) -> set[str]:
    """
    Plausible renderings of one person's name, normalized and deduplicated:
    first last, first middle last, first M last, F last, "last, first middle",
    display name. Missing parts drop out of the concatenation.
    """
    if person is None:
        return set()

    first = person.first_name or ""
    middle = person.middle_name or ""
    last = person.last_name or ""
    middle_initial = middle[:1]
    first_initial = first[:1]

    candidates = [
        f"{first} {last}",
        f"{first} {middle} {last}",
        f"{first} {middle_initial} {last}",
        f"{first_initial} {last}",
        f"{last}, {first} {middle}",
        person.display_name or "",
    ]
    return {v for v in (normalize(c) for c in candidates) if v}
