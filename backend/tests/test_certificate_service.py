import threading

import pytest

from certintel.constants.statuses import ConfidenceLevel, FieldStatus, ResolutionStatus
from certintel.core import ProcessingTimeout, UnreadableDocument
from certintel.documents.types import AcquiredText
from certintel.matching.names import Person
from certintel.repos.directory.read import InMemoryDirectoryReadRepo
from certintel.services.certificate_service import CertificateService, app_error_from_payload
from certintel.services.types import CertificateExtraction


def _acquired(text):
    return AcquiredText(
        text=text,
        strategy="pymupdf",
        mime_type="application/pdf",
        page_count=1,
        pages_with_text=1,
        used_ocr=False,
        pdf_char_count=len(text),
    )


@pytest.fixture
def svc(directory, catalog):
    return CertificateService(directory, catalog, timeout_seconds=5, backend="thread")


@pytest.fixture
def fake_text(monkeypatch, evoc_text):
    monkeypatch.setattr(
        "certintel.workers.extract_certificate.extract_text",
        lambda data, mime, trace_id=None: _acquired(evoc_text),
    )


def test_extract_certificate_fields(svc, fake_text):
    result = svc.extract_certificate_fields(b"%PDF-1.4 fake", "application/pdf")

    assert result.fields.recipient_name == "Jane A. Doe"
    assert result.fields.training_class_name == "Emergency Vehicle Operations"
    assert result.quality.level is ConfidenceLevel.HIGH
    assert result.raw_text.startswith("MARYLAND FIRE AND RESCUE INSTITUTE")


def test_extraction_result_survives_task_serialization(svc, fake_text):
    result = svc.extract_certificate_fields(b"%PDF-1.4 fake", "application/pdf")
    assert CertificateExtraction.from_dict(result.to_dict()) == result


def test_timeout_raises_processing_timeout(directory, catalog, monkeypatch):
    release = threading.Event()

    def slow(*_args, **_kwargs):
        release.wait(5)

    monkeypatch.setattr("certintel.workers.extract_certificate.run_extract_certificate", slow)
    svc = CertificateService(directory, catalog, timeout_seconds=0.05, backend="thread")
    try:
        with pytest.raises(ProcessingTimeout) as exc:
            svc.extract_certificate_fields(b"%PDF-1.4 fake", "application/pdf")
        assert exc.value.status_code == 504
    finally:
        release.set()


def test_resolve_recipient_matched(svc):
    res = svc.resolve_recipient("Robert Jones")

    assert res.status is ResolutionStatus.MATCHED
    assert res.match.person.id == "u1"
    assert [c.person.id for c in res.candidates] == ["u1"]


def test_resolve_recipient_ambiguous_is_never_auto_selected(catalog):
    directory = InMemoryDirectoryReadRepo(
        [Person(id="b", display_name="Robert Jones Smith", first_name="Robert", last_name="Jones Smith")]
    )
    svc = CertificateService(directory, catalog, backend="thread")

    res = svc.resolve_recipient("Robert Jones")

    assert res.status is ResolutionStatus.AMBIGUOUS
    assert res.match is None
    assert [c.person.id for c in res.candidates] == ["b"]
    assert svc.match_recipient("Robert Jones") is None
    assert [c.person.id for c in svc.rank_possible_recipients("Robert Jones")] == ["b"]


def test_resolve_recipient_not_found(svc):
    res = svc.resolve_recipient("Nobody Here")
    assert res.status is ResolutionStatus.NOT_FOUND
    assert res.message == 'No matching user found for "Nobody Here".'

    blank = svc.resolve_recipient("   ")
    assert blank.status is ResolutionStatus.NOT_FOUND
    assert blank.query is None


def test_presearch_resolves_detected_recipient(svc, fake_text):
    extraction, resolution = svc.presearch(b"%PDF-1.4 fake", "application/pdf")

    assert extraction.fields.log_number == "EVOC-24-0091"
    assert resolution.status is ResolutionStatus.MATCHED
    assert resolution.match.person.id == "u4"


def test_autofill_uses_selected_person_and_catalog(svc, fake_text):
    _, outcome = svc.autofill(b"%PDF-1.4 fake", "application/pdf", selected_person_id="u4")

    assert outcome.fields["recipient_name"].status is FieldStatus.APPLIED
    assert outcome.applied_values["training_class_id"] == "c1"
    assert outcome.applied_values["hours_logged"] == 12


def test_task_error_payload_rebuilds_typed_error():
    err = app_error_from_payload(
        {"code": "UNREADABLE_DOCUMENT", "reason": "x", "message": "Try again.", "status_code": 422}
    )
    assert isinstance(err, UnreadableDocument)
    assert err.message == "Try again."


def test_resolve_recipient_with_namesakes_is_ambiguous(catalog):
    directory = InMemoryDirectoryReadRepo(
        [
            Person(id="s1", display_name="John Smith", first_name="John", last_name="Smith"),
            Person(id="s2", display_name="John Smith", first_name="John", last_name="Smith", email="js2@example.org"),
        ]
    )
    svc = CertificateService(directory, catalog, backend="thread")

    res = svc.resolve_recipient("John Smith")

    assert res.status is ResolutionStatus.AMBIGUOUS
    assert res.match is None
    assert {c.person.id for c in res.candidates} == {"s1", "s2"}


# ---------------------------------------------------------------------
# Celery backend
# ---------------------------------------------------------------------

class _EagerTask:
    """Stands in for the registered task: runs it in-process via apply()."""

    def __init__(self, task):
        self.task = task

    def delay(self, *args):
        return self.task.apply(args=args)


class _StuckResult:
    id = "stuck-task"

    def __init__(self):
        self.revoked = False

    def get(self, timeout=None):
        from celery.exceptions import TimeoutError as CeleryTimeoutError

        raise CeleryTimeoutError("still running")

    def revoke(self):
        self.revoked = True


@pytest.fixture
def celery_svc(directory, catalog):
    return CertificateService(directory, catalog, timeout_seconds=1, backend="celery")


def test_celery_backend_returns_extraction(celery_svc, fake_text, monkeypatch):
    from certintel.tasks import certificate_pipeline

    monkeypatch.setattr(
        certificate_pipeline, "extract_certificate_task", _EagerTask(certificate_pipeline.extract_certificate_task)
    )

    result = celery_svc.extract_certificate_fields(b"%PDF-1.4 fake", "application/pdf")

    assert result.fields.recipient_name == "Jane A. Doe"
    assert result.fields.log_number == "EVOC-24-0091"


def test_celery_backend_rebuilds_task_error(celery_svc, monkeypatch):
    from certintel.tasks import certificate_pipeline

    def unreadable(data, mime, trace_id=None):
        raise UnreadableDocument()

    monkeypatch.setattr("certintel.workers.extract_certificate.extract_text", unreadable)
    monkeypatch.setattr(
        certificate_pipeline, "extract_certificate_task", _EagerTask(certificate_pipeline.extract_certificate_task)
    )

    with pytest.raises(UnreadableDocument) as exc:
        celery_svc.extract_certificate_fields(b"%PDF-1.4 fake", "application/pdf")
    assert exc.value.status_code == 422


def test_celery_backend_timeout_revokes_task(celery_svc, monkeypatch):
    from certintel.tasks import certificate_pipeline

    stuck = _StuckResult()

    class _Task:
        def delay(self, *args):
            return stuck

    monkeypatch.setattr(certificate_pipeline, "extract_certificate_task", _Task())

    with pytest.raises(ProcessingTimeout) as exc:
        celery_svc.extract_certificate_fields(b"%PDF-1.4 fake", "application/pdf")

    assert stuck.revoked is True
    assert exc.value.details == {"timeout_seconds": 1}
