"""
statuses.py
- Purpose: Central source of truth for auto-fill / matching statuses.
- Design: Keep portal-facing values stable and explicit.
"""

from enum import Enum


class FieldStatus(str, Enum):
    APPLIED = "applied"
    SUGGESTED = "suggested"
    CONFLICT = "conflict"


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def most_severe(cls, levels) -> "Severity":
        return max(levels, key=lambda s: s.rank, default=cls.SUCCESS)


_SEVERITY_RANK = {
    Severity.SUCCESS: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.DANGER: 3,
}


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ResolutionStatus(str, Enum):
    MATCHED = "matched"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"
