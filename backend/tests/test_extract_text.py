import pytest

from certintel.core import AppError, ErrorCode, UnreadableDocument
from certintel.documents.extract import extract_text, normalized_length
from certintel.documents.types import OcrText, PdfText

LONG_LAYER = "THIS CERTIFICATE AWARDED TO\nJane A. Doe\nHAS PASSED ALL COURSE WORK IN\nEmergency Vehicle Operations\n"


def _fail(*_args, **_kwargs):
    raise AssertionError("should not be called")


def _missing_tesseract(_data):
    raise AppError(code=ErrorCode.CONFIG_ERROR, reason="Missing dependency", status_code=500)


def test_unsupported_mime_rejected_before_parsing(monkeypatch):
    monkeypatch.setattr("certintel.documents.pdf_text.extract_pdf_text", _fail)
    monkeypatch.setattr("certintel.documents.ocr.ocr_image", _fail)

    with pytest.raises(AppError) as exc:
        extract_text(b"hello", "text/plain")

    assert exc.value.code == ErrorCode.INVALID_FILE_TYPE
    assert exc.value.status_code == 415


def test_empty_bytes_unreadable():
    with pytest.raises(UnreadableDocument):
        extract_text(b"", "image/png")


def test_whitespace_ocr_output_unreadable(monkeypatch):
    monkeypatch.setattr(
        "certintel.documents.ocr.ocr_image",
        lambda data: OcrText(text="  \n\t \n", page_count=1, pages_with_text=0),
    )

    with pytest.raises(UnreadableDocument) as exc:
        extract_text(b"\x89PNG fake", "image/png")
    assert exc.value.status_code == 422


def test_image_goes_through_ocr(monkeypatch):
    monkeypatch.setattr(
        "certintel.documents.ocr.ocr_image",
        lambda data: OcrText(text=LONG_LAYER, page_count=1, pages_with_text=1),
    )

    acquired = extract_text(b"\xff\xd8 fake jpeg", "IMAGE/JPEG; charset=binary")

    assert acquired.used_ocr is True
    assert acquired.mime_type == "image/jpeg"
    assert acquired.strategy == "tesseract"
    assert "Jane A. Doe" in acquired.text


def test_full_pdf_layer_skips_ocr(monkeypatch):
    monkeypatch.setattr(
        "certintel.documents.pdf_text.extract_pdf_text",
        lambda data: PdfText(text=LONG_LAYER, page_count=1, pages_with_text=1, strategy="pymupdf"),
    )
    monkeypatch.setattr("certintel.documents.ocr.ocr_pdf", _fail)

    acquired = extract_text(b"%PDF-1.4 fake", "application/pdf")

    assert normalized_length(LONG_LAYER) >= 80
    assert acquired.used_ocr is False
    assert acquired.strategy == "pymupdf"
    assert acquired.text == LONG_LAYER.strip()


def test_sparse_pdf_layer_triggers_ocr_and_joins_text(monkeypatch):
    monkeypatch.setattr(
        "certintel.documents.pdf_text.extract_pdf_text",
        lambda data: PdfText(text="AWARDED TO", page_count=1, pages_with_text=1, strategy="pymupdf"),
    )
    monkeypatch.setattr(
        "certintel.documents.ocr.ocr_pdf",
        lambda data: OcrText(text="Jane A. Doe", page_count=1, pages_with_text=1),
    )

    acquired = extract_text(b"%PDF-1.4 fake", "application/pdf")

    assert acquired.used_ocr is True
    assert acquired.text == "AWARDED TO\nJane A. Doe"
    assert acquired.strategy == "pymupdf+tesseract"
    assert acquired.pdf_char_count == len("AWARDED TO")


def test_missing_tesseract_tolerated_when_pdf_has_text(monkeypatch):
    monkeypatch.setattr(
        "certintel.documents.pdf_text.extract_pdf_text",
        lambda data: PdfText(text="AWARDED TO Jane Doe", page_count=1, pages_with_text=1, strategy="pdfplumber"),
    )
    monkeypatch.setattr("certintel.documents.ocr.ocr_pdf", _missing_tesseract)

    acquired = extract_text(b"%PDF-1.4 fake", "application/pdf")

    assert acquired.used_ocr is False
    assert acquired.text == "AWARDED TO Jane Doe"


def test_missing_tesseract_is_config_error_for_images(monkeypatch):
    monkeypatch.setattr("certintel.documents.ocr.ocr_image", _missing_tesseract)

    with pytest.raises(AppError) as exc:
        extract_text(b"\x89PNG fake", "image/png")
    assert exc.value.code == ErrorCode.CONFIG_ERROR
