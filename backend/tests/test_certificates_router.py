import io

import pytest
from fastapi.testclient import TestClient

from certintel.api.deps import get_catalog, get_directory
from certintel.core import UnreadableDocument
from certintel.documents.types import AcquiredText
from certintel.main import app


@pytest.fixture
def client(directory, catalog):
    app.dependency_overrides[get_directory] = lambda: directory
    app.dependency_overrides[get_catalog] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_text(monkeypatch, text):
    def fake_extract_text(data, mime, trace_id=None):
        return AcquiredText(
            text=text,
            strategy="tesseract",
            mime_type=mime,
            page_count=1,
            pages_with_text=1,
            used_ocr=True,
            ocr_char_count=len(text),
        )

    monkeypatch.setattr("certintel.workers.extract_certificate.extract_text", fake_extract_text)


def _files(content=b"\x89PNG fake", name="cert.png", content_type="image/png"):
    return {"certificateFile": (name, io.BytesIO(content), content_type)}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_extract_returns_fields(client, monkeypatch, evoc_text):
    _use_text(monkeypatch, evoc_text)

    resp = client.post("/api/certificates/extract", files=_files())
    assert resp.status_code == 200, resp.text

    body = resp.json()
    assert body["success"] is True
    assert body["extracted"]["recipientName"] == "Jane A. Doe"
    assert body["extracted"]["hoursLogged"] == 12.0
    assert body["extracted"]["logNumber"] == "EVOC-24-0091"
    assert body["quality"]["usedOcr"] is True
    assert "x-request-id" in resp.headers


def test_unreadable_maps_to_422(client, monkeypatch):
    def unreadable(data, mime, trace_id=None):
        raise UnreadableDocument()

    monkeypatch.setattr("certintel.workers.extract_certificate.extract_text", unreadable)

    resp = client.post("/api/certificates/extract", files=_files())

    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNREADABLE_DOCUMENT"


def test_wrong_file_type_is_415(client):
    resp = client.post("/api/certificates/extract", files=_files(b"hello", "cert.txt", "text/plain"))
    assert resp.status_code == 415
    assert resp.json()["error"]["code"] == "INVALID_FILE_TYPE"


def test_autofill_reports_conflict(client, monkeypatch, evoc_text):
    _use_text(monkeypatch, evoc_text)

    resp = client.post("/api/certificates/autofill", files=_files(), data={"selected_person_id": "u1"})
    assert resp.status_code == 200, resp.text

    autofill = resp.json()["autofill"]
    assert autofill["fields"]["recipient_name"]["status"] == "conflict"
    assert autofill["severity"] == "warning"
    assert autofill["applied_values"]["training_class_id"] == "c1"


def test_autofill_low_confidence_is_422(client, monkeypatch):
    _use_text(monkeypatch, "The quick brown fox jumps over the lazy dog near the river bank.")

    resp = client.post("/api/certificates/autofill", files=_files())

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "LOW_CONFIDENCE_EXTRACTION"


def test_presearch_includes_recipient(client, monkeypatch, evoc_text):
    _use_text(monkeypatch, evoc_text)

    resp = client.post("/api/certificates/presearch", files=_files())
    assert resp.status_code == 200, resp.text
    recipient = resp.json()["recipient"]
    assert recipient["status"] == "matched"
    assert recipient["match"]["id"] == "u4"


def test_match_by_name(client):
    resp = client.post("/api/certificates/match", json={"name": "Robert Jones"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "matched"
    assert body["match"]["displayName"] == "Rob Jones"


def test_autofill_unknown_selected_user_is_404(client, monkeypatch, evoc_text):
    _use_text(monkeypatch, evoc_text)

    resp = client.post("/api/certificates/autofill", files=_files(), data={"selected_person_id": "missing"})

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


def test_unexpected_failure_returns_generic_500(directory, catalog, monkeypatch):
    def broken(data, mime, trace_id=None):
        raise RuntimeError("tesseract segfaulted")

    monkeypatch.setattr("certintel.workers.extract_certificate.extract_text", broken)
    app.dependency_overrides[get_directory] = lambda: directory
    app.dependency_overrides[get_catalog] = lambda: catalog
    try:
        resp = TestClient(app, raise_server_exceptions=False).post("/api/certificates/extract", files=_files())
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": {
            "code": "INTERNAL_ERROR",
            "reason": "Internal server error",
            "message": "Unable to process certificate.",
        },
    }
