from datetime import datetime, timezone

import pytest

from certintel.certificates.fields import ExtractedCertificateFields
from certintel.constants.statuses import FieldStatus, Severity
from certintel.core import LowConfidenceExtraction
from certintel.matching.classes import TrainingClass
from certintel.matching.names import Person
from certintel.reconcile.autofill import NO_FIELDS_MESSAGE, UNREADABLE_MESSAGE, reconcile
from certintel.reconcile.types import FORM_HOURS, FORM_START_DATE, AutofillContext

CATALOG = (TrainingClass(id="c1", title="Emergency Vehicle Operations", course_id="EVOC-101"),)


def test_recipient_conflict_is_reported_not_applied():
    selected = Person(id="p1", display_name="Jane Doe")
    fields = ExtractedCertificateFields(recipient_name="John Smith")

    out = reconcile(fields, AutofillContext(selected_person=selected))

    assert out.fields["recipient_name"].status is FieldStatus.CONFLICT
    assert 'Detected recipient "John Smith" does not match the selected user.' in out.messages
    assert out.severity is Severity.WARNING
    assert "recipient_name" not in out.applied_values
    assert selected == Person(id="p1", display_name="Jane Doe")


def test_recipient_matching_variant_is_applied():
    selected = Person(id="p1", display_name="Janie", first_name="Jane", middle_name="Anne", last_name="Doe")
    out = reconcile(ExtractedCertificateFields(recipient_name="Jane A. Doe"), AutofillContext(selected_person=selected))

    assert out.fields["recipient_name"].status is FieldStatus.APPLIED
    assert "Detected recipient: Jane A. Doe" in out.messages
    assert out.severity is Severity.INFO
    assert "recipient_name" not in out.applied_values


def test_recipient_without_selection_is_suggested():
    out = reconcile(ExtractedCertificateFields(recipient_name="John Smith"))
    assert out.fields["recipient_name"].status is FieldStatus.SUGGESTED
    assert out.fields["recipient_name"].severity is Severity.INFO


def test_full_known_certificate_fills_form():
    fields = ExtractedCertificateFields(
        recipient_name="Jane A. Doe",
        training_class_name="Emergency Vehicle Operations",
        hours_logged=12.0,
        log_number="EVOC-24-0091",
        course_date=datetime(2024, 3, 5, tzinfo=timezone.utc),
        is_likely_known_template=True,
        template_marker_count=2,
    )

    out = reconcile(fields, AutofillContext(class_catalog=CATALOG))

    assert out.applied_values == {
        "training_class_id": "c1",
        "start_date": "2024-03-05",
        "end_date": "2024-03-05",
        "hours_logged": 12,
    }
    assert "Matched class: Emergency Vehicle Operations" in out.messages
    assert "Date set: 03/05/2024" in out.messages
    assert "Hours set: 12" in out.messages
    assert "Log number: EVOC-24-0091" in out.messages
    assert out.offer_create_class is False
    assert out.summary == " • ".join(out.messages)


def test_unknown_class_is_suggested_with_create_offer():
    fields = ExtractedCertificateFields(training_class_name="Rope Rescue Technician")
    out = reconcile(fields, AutofillContext(class_catalog=CATALOG))

    assert out.fields["training_class"].status is FieldStatus.SUGGESTED
    assert out.offer_create_class is True
    assert out.severity is Severity.WARNING


def test_fractional_hours_rounded_to_one_decimal():
    fields = ExtractedCertificateFields(recipient_name="Sam Smith", hours_logged=3.333)
    out = reconcile(fields)
    assert out.applied_values["hours_logged"] == 3.3


def test_missing_form_inputs_downgrade_to_suggestions():
    fields = ExtractedCertificateFields(
        recipient_name="Sam Smith",
        hours_logged=8.0,
        course_date=datetime(2024, 1, 2, tzinfo=timezone.utc),
    )
    out = reconcile(fields, AutofillContext(form_fields=frozenset({FORM_START_DATE})))

    assert out.fields["hours_logged"].status is FieldStatus.SUGGESTED
    assert out.applied_values == {"start_date": "2024-01-02"}


def test_course_identifier_is_informational():
    fields = ExtractedCertificateFields(recipient_name="Sam Smith", course_identifier="FR-101")

    filled = reconcile(fields)
    assert filled.fields["course_identifier"].status is FieldStatus.APPLIED
    assert filled.fields["course_identifier"].severity is Severity.INFO
    assert filled.applied_values["course_number"] == "FR-101"
    assert "Course number set: FR-101" in filled.messages

    suggested = reconcile(fields, AutofillContext(form_fields=frozenset({FORM_HOURS})))
    assert suggested.fields["course_identifier"].status is FieldStatus.SUGGESTED
    assert "Suggested course number: FR-101" in suggested.messages
    assert "course_number" not in suggested.applied_values
    assert suggested.severity is Severity.INFO


def test_unparsed_date_is_only_suggested():
    fields = ExtractedCertificateFields(recipient_name="Sam Smith", course_date_text="Spring 2024")
    out = reconcile(fields, AutofillContext(form_fields=frozenset({FORM_START_DATE, FORM_HOURS})))

    assert out.fields["course_date"].status is FieldStatus.SUGGESTED
    assert out.severity is Severity.WARNING
    assert "start_date" not in out.applied_values


def test_stray_text_raises_low_confidence():
    with pytest.raises(LowConfidenceExtraction) as exc:
        reconcile(ExtractedCertificateFields(hours_logged=4.0))
    assert exc.value.status_code == 422


def test_template_without_fields_warns():
    fields = ExtractedCertificateFields(is_likely_known_template=True, template_marker_count=3)
    out = reconcile(fields)
    assert out.messages == [NO_FIELDS_MESSAGE]
    assert out.severity is Severity.WARNING


def test_failed_extraction_is_danger():
    out = reconcile(None)
    assert out.severity is Severity.DANGER
    assert out.messages == [UNREADABLE_MESSAGE]
