"""
directory/read.py
- Purpose: Read-side access to the user directory (certificate recipients).
- Design: The portal's user store is an external collaborator. Services depend
  on the DirectoryLookup protocol; InMemoryDirectoryReadRepo backs dev/tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Protocol

from certintel.matching.names import Person, normalize


class DirectoryLookup(Protocol):
    def search(self, query: str, limit: int = 10) -> list[Person]: ...

    def get_by_id(self, person_id: str) -> Person | None: ...


class InMemoryDirectoryReadRepo:
    def __init__(self, people: Iterable[Person] = ()):
        self._people = list(people)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryDirectoryReadRepo":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(Person.from_mapping(row) for row in data)

    def get_by_id(self, person_id: str) -> Person | None:
        for person in self._people:
            if person.id == person_id:
                return person
        return None

    def search(self, query: str, limit: int = 10) -> list[Person]:
        """Any query word (2+ letters) found in any name field or the email."""
        words = [w for w in normalize(query).split() if len(w) >= 2]
        if not words:
            return []

        hits = []
        for person in self._people:
            haystack = " ".join(
                normalize(v)
                for v in (person.display_name, person.first_name, person.middle_name, person.last_name, person.email)
            ).split()
            if any(w in haystack for w in words):
                hits.append(person)

        hits.sort(key=lambda p: (p.display_name or "").lower())
        return hits[:limit]
