"""certintel/matching/classes.py

Fuzzy lookup of an extracted class title in the training-class catalog.

The catalog is a plain sequence owned by the caller (rebuilt when the catalog
changes); nothing is cached here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from certintel.matching.names import normalize

CLASS_FUZZY_THRESHOLD = 45
CLASS_EXACT_SCORE = 100
CLASS_CONTAINMENT_SCORE = 85
CLASS_OVERLAP_WEIGHT = 70


@dataclass(frozen=True)
class TrainingClass:
    id: str
    title: str
    course_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "course_id": self.course_id}


@dataclass(frozen=True)
class ClassMatch:
    training_class: TrainingClass
    score: float
    matched_on: str  # "course_id" | "title"


def score_title(name: str, title: str) -> float:
    target = normalize(name, keep_numbers=True)
    option = normalize(title, keep_numbers=True)
    if not target or not option:
        return 0.0
    if option == target:
        return float(CLASS_EXACT_SCORE)
    if target in option or option in target:
        return float(CLASS_CONTAINMENT_SCORE - abs(len(option) - len(target)))

    target_words = target.split()
    option_words = set(option.split())
    overlap = sum(1 for w in target_words if w in option_words)
    return (overlap / len(target_words)) * CLASS_OVERLAP_WEIGHT if overlap else 0.0


def _same_code(a: str | None, b: str | None) -> bool:
    na = normalize(a, keep_numbers=True)
    return bool(na) and na == normalize(b, keep_numbers=True)


def find_training_class(
    name: str | None,
    catalog: Iterable[TrainingClass],
    *,
    course_identifier: str | None = None,
) -> ClassMatch | None:
    entries = list(catalog)

    if course_identifier:
        for entry in entries:
            if _same_code(entry.course_id, course_identifier):
                return ClassMatch(training_class=entry, score=float(CLASS_EXACT_SCORE), matched_on="course_id")

    if not name:
        return None

    best: ClassMatch | None = None
    for entry in entries:
        value = score_title(name, entry.title)
        if best is None or value > best.score:
            best = ClassMatch(training_class=entry, score=value, matched_on="title")
        if value >= CLASS_EXACT_SCORE:
            break

    if best is None or best.score < CLASS_FUZZY_THRESHOLD:
        return None
    return best
