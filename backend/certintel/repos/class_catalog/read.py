"""
class_catalog/read.py
- Purpose: Read-side access to the training-class catalog.
- Design: Catalog CRUD lives in the portal; this only reads. The returned
  list is owned by the caller and passed explicitly into matching calls.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Protocol

from certintel.matching.classes import TrainingClass


class ClassCatalogLookup(Protocol):
    def list_active(self) -> list[TrainingClass]: ...


class InMemoryClassCatalogReadRepo:
    def __init__(self, classes: Iterable[TrainingClass] = ()):
        self._classes = list(classes)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryClassCatalogReadRepo":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(
            TrainingClass(
                id=str(row.get("id") or row.get("_id") or ""),
                title=row.get("title") or row.get("name") or "",
                course_id=row.get("course_id") or row.get("courseId"),
            )
            for row in data
        )

    def list_active(self) -> list[TrainingClass]:
        return sorted(self._classes, key=lambda c: c.title.lower())
