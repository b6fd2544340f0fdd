"""certintel/reconcile/types.py

Inputs/outputs of auto-fill reconciliation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from certintel.constants.statuses import FieldStatus, Severity
from certintel.matching.classes import TrainingClass
from certintel.matching.names import Person

# Target inputs of the portal's "add certificate" form
FORM_TRAINING_CLASS = "training_class"
FORM_START_DATE = "start_date"
FORM_END_DATE = "end_date"
FORM_HOURS = "hours"
FORM_COURSE_NUMBER = "course_number"

ALL_FORM_FIELDS = frozenset(
    {FORM_TRAINING_CLASS, FORM_START_DATE, FORM_END_DATE, FORM_HOURS, FORM_COURSE_NUMBER}
)


@dataclass(frozen=True)
class AutofillContext:
    class_catalog: Sequence[TrainingClass] = ()
    selected_person: Optional[Person] = None
    selected_display_name: Optional[str] = None  # what the form currently shows, if it differs
    form_fields: frozenset[str] = ALL_FORM_FIELDS


@dataclass(frozen=True)
class FieldOutcome:
    status: FieldStatus
    value: Any
    message: str
    severity: Severity


@dataclass
class ReconciliationOutcome:
    fields: dict[str, FieldOutcome] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)
    severity: Severity = Severity.SUCCESS
    applied_values: dict[str, Any] = field(default_factory=dict)
    offer_create_class: bool = False

    def record(self, name: str, status: FieldStatus, value: Any, message: str, severity: Severity) -> None:
        self.fields[name] = FieldOutcome(status=status, value=value, message=message, severity=severity)
        self.messages.append(message)

    @property
    def summary(self) -> str:
        return " • ".join(self.messages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "summary": self.summary,
            "messages": list(self.messages),
            "applied_values": dict(self.applied_values),
            "offer_create_class": self.offer_create_class,
            "fields": {
                name: {
                    "status": fo.status.value,
                    "value": fo.value,
                    "message": fo.message,
                    "severity": fo.severity.value,
                }
                for name, fo in self.fields.items()
            },
        }
