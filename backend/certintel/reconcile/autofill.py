"""certintel/reconcile/autofill.py

Decide what to do with each extracted field against live form state:
apply it, suggest it, or flag it as a conflict. The selected person is
never changed here; a mismatching recipient is only ever reported.
"""

from __future__ import annotations

import logging
import math

from certintel.certificates.fields import ExtractedCertificateFields
from certintel.constants.statuses import FieldStatus, Severity
from certintel.core import LowConfidenceExtraction
from certintel.matching.classes import find_training_class
from certintel.matching.names import normalize, variant_set
from certintel.reconcile.types import (
    FORM_COURSE_NUMBER,
    FORM_END_DATE,
    FORM_HOURS,
    FORM_START_DATE,
    FORM_TRAINING_CLASS,
    AutofillContext,
    ReconciliationOutcome,
)

logger = logging.getLogger("certintel.reconcile")

NO_FIELDS_MESSAGE = "No recognizable fields were found."
UNREADABLE_MESSAGE = "Unable to read text from certificate."


def _status_for(form_field: str, context: AutofillContext) -> FieldStatus:
    return FieldStatus.APPLIED if form_field in context.form_fields else FieldStatus.SUGGESTED


def _reconcile_class(fields: ExtractedCertificateFields, context: AutofillContext, out: ReconciliationOutcome) -> None:
    name = fields.training_class_name
    if not name and not fields.course_identifier:
        return

    match = find_training_class(name, context.class_catalog, course_identifier=fields.course_identifier)
    if match:
        entry = match.training_class
        status = _status_for(FORM_TRAINING_CLASS, context)
        if status is FieldStatus.APPLIED:
            out.applied_values["training_class_id"] = entry.id
            out.record("training_class", status, entry.id, f"Matched class: {entry.title}", Severity.SUCCESS)
        else:
            out.record("training_class", status, entry.id, f"Suggested class: {entry.title}", Severity.INFO)
    elif name:
        out.record("training_class", FieldStatus.SUGGESTED, name, f"Suggested class: {name}", Severity.WARNING)
        out.offer_create_class = True


def _reconcile_date(fields: ExtractedCertificateFields, context: AutofillContext, out: ReconciliationOutcome) -> None:
    if fields.course_date is not None:
        day = fields.course_date.date().isoformat()
        if FORM_START_DATE in context.form_fields:
            # single completion date: start and end are the same calendar day
            out.applied_values["start_date"] = day
            if FORM_END_DATE in context.form_fields:
                out.applied_values["end_date"] = day
            out.record("course_date", FieldStatus.APPLIED, day, f"Date set: {fields.course_date:%m/%d/%Y}", Severity.SUCCESS)
        else:
            out.record("course_date", FieldStatus.SUGGESTED, day, f"Suggested date: {fields.course_date:%m/%d/%Y}", Severity.INFO)
    elif fields.course_date_text:
        out.record(
            "course_date",
            FieldStatus.SUGGESTED,
            fields.course_date_text,
            f"Suggested date: {fields.course_date_text}",
            Severity.WARNING,
        )


def _reconcile_hours(fields: ExtractedCertificateFields, context: AutofillContext, out: ReconciliationOutcome) -> None:
    hours = fields.hours_logged
    if hours is None:
        return
    if not isinstance(hours, (int, float)) or not math.isfinite(hours) or hours < 0:
        logger.debug("reconcile.hours_rejected", extra={"hours": str(hours)})
        return

    value: int | float = int(hours) if float(hours).is_integer() else round(float(hours), 1)
    status = _status_for(FORM_HOURS, context)
    if status is FieldStatus.APPLIED:
        out.applied_values["hours_logged"] = value
        out.record("hours_logged", status, value, f"Hours set: {value}", Severity.SUCCESS)
    else:
        out.record("hours_logged", status, value, f"Suggested hours: {value}", Severity.INFO)


def _reconcile_course_identifier(fields: ExtractedCertificateFields, context: AutofillContext, out: ReconciliationOutcome) -> None:
    code = fields.course_identifier
    if not code:
        return
    status = _status_for(FORM_COURSE_NUMBER, context)
    if status is FieldStatus.APPLIED:
        out.applied_values["course_number"] = code
        out.record("course_identifier", status, code, f"Course number set: {code}", Severity.INFO)
    else:
        out.record("course_identifier", status, code, f"Suggested course number: {code}", Severity.INFO)


def _reconcile_recipient(fields: ExtractedCertificateFields, context: AutofillContext, out: ReconciliationOutcome) -> None:
    name = fields.recipient_name
    normalized = normalize(name)
    if not normalized:
        return

    person = context.selected_person
    candidates = set(variant_set(person))
    display = normalize(context.selected_display_name or (person.display_name if person else ""))
    if display:
        candidates.add(display)

    if not candidates:
        out.record("recipient_name", FieldStatus.SUGGESTED, name, f"Detected recipient: {name}", Severity.INFO)
    elif normalized in candidates:
        out.record("recipient_name", FieldStatus.APPLIED, name, f"Detected recipient: {name}", Severity.INFO)
    else:
        out.record(
            "recipient_name",
            FieldStatus.CONFLICT,
            name,
            f'Detected recipient "{name}" does not match the selected user.',
            Severity.WARNING,
        )


def _reconcile_log_number(fields: ExtractedCertificateFields, context: AutofillContext, out: ReconciliationOutcome) -> None:
    if fields.log_number:
        out.record("log_number", FieldStatus.SUGGESTED, fields.log_number, f"Log number: {fields.log_number}", Severity.INFO)


_STEPS = (
    _reconcile_class,
    _reconcile_date,
    _reconcile_hours,
    _reconcile_course_identifier,
    _reconcile_recipient,
    _reconcile_log_number,
)


def reconcile(extracted: ExtractedCertificateFields | None, context: AutofillContext | None = None) -> ReconciliationOutcome:
    context = context or AutofillContext()

    if extracted is None:
        out = ReconciliationOutcome(severity=Severity.DANGER)
        out.messages.append(UNREADABLE_MESSAGE)
        return out

    if (
        not extracted.is_likely_known_template
        and not extracted.recipient_name
        and not extracted.training_class_name
    ):
        raise LowConfidenceExtraction(
            details={
                "template_marker_count": extracted.template_marker_count,
                "populated": extracted.populated(),
            }
        )

    out = ReconciliationOutcome()
    for step in _STEPS:
        step(extracted, context, out)

    if not out.messages:
        out.messages.append(NO_FIELDS_MESSAGE)
        out.severity = Severity.WARNING
    else:
        out.severity = Severity.most_severe(fo.severity for fo in out.fields.values())

    logger.info(
        "reconcile.done",
        extra={
            "severity": out.severity.value,
            "applied": sorted(out.applied_values),
            "statuses": {name: fo.status.value for name, fo in out.fields.items()},
        },
    )
    return out
