"""certintel/certificates/fields.py

Structured, partial record recovered from certificate text. Every field is
optional; absence is normal and never an error.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Optional


_VALUE_FIELDS = (
    "recipient_name",
    "training_class_name",
    "hours_logged",
    "course_identifier",
    "log_number",
    "course_date",
    "course_date_text",
)


@dataclass
class ExtractedCertificateFields:
    recipient_name: Optional[str] = None
    training_class_name: Optional[str] = None
    hours_logged: Optional[float] = None
    course_identifier: Optional[str] = None
    log_number: Optional[str] = None
    course_date: Optional[datetime] = None  # UTC midnight of the completion day
    course_date_text: Optional[str] = None  # raw match, only when parsing failed
    is_likely_known_template: bool = False
    template_marker_count: int = 0

    def populated(self) -> list[str]:
        return [name for name in _VALUE_FIELDS if getattr(self, name) is not None]

    def is_empty(self) -> bool:
        return not self.populated()

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        if self.course_date is not None:
            out["course_date"] = self.course_date.isoformat()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractedCertificateFields":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in (data or {}).items() if k in known}
        if isinstance(kwargs.get("course_date"), str):
            kwargs["course_date"] = datetime.fromisoformat(kwargs["course_date"])
        return cls(**kwargs)
