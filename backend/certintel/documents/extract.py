"""certintel/documents/extract.py

Certificate bytes -> raw text.

Strategy:
1) PDF: embedded text layer (see pdf_text.py)
2) PDF whose layer is empty/sparse, or any image: Tesseract OCR (see ocr.py)
3) Text from every pass is joined with newlines; downstream parsing tolerates
   duplicated content.

One attempt per pass, no retries. Fails with UnreadableDocument when no pass
yields any non-whitespace text.
"""

import logging
import uuid

from certintel.core import AppError, ErrorCode, ErrorReason, UnreadableDocument
from certintel.core.config import settings
from certintel.documents import ocr, pdf_text
from certintel.documents.telemetry import ExtractionCallLog, log_extraction_call, now_ms
from certintel.documents.types import AcquiredText, OcrText

logger = logging.getLogger("certintel.documents.extract")

PDF_MIME_TYPES = frozenset({"application/pdf"})
IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})
SUPPORTED_MIME_TYPES = PDF_MIME_TYPES | IMAGE_MIME_TYPES


def normalize_mime_type(mime_type: str | None) -> str:
    return (mime_type or "").split(";", 1)[0].strip().lower()


def normalized_length(text: str | None) -> int:
    """Length with all whitespace runs collapsed to one space."""
    return len(" ".join((text or "").split()))


def _run_ocr(fn, file_bytes: bytes, *, have_fallback_text: bool) -> OcrText | None:
    try:
        return fn(file_bytes)
    except AppError as e:
        # Missing OCR engine only matters when nothing else was read
        if e.code == ErrorCode.CONFIG_ERROR and have_fallback_text:
            logger.warning("text.ocr_unavailable", extra={"error": str(e)})
            return None
        raise


def extract_text(file_bytes: bytes, mime_type: str, *, trace_id: str | None = None) -> AcquiredText:
    trace_id = trace_id or str(uuid.uuid4())
    mime = normalize_mime_type(mime_type)

    if mime not in SUPPORTED_MIME_TYPES:
        raise AppError(
            code=ErrorCode.INVALID_FILE_TYPE,
            reason=ErrorReason.UNSUPPORTED_FILE_TYPE.value,
            status_code=415,
            details={"mime_type": mime},
        )
    if not file_bytes:
        raise UnreadableDocument("The uploaded certificate file is empty.")

    start_ms = now_ms()
    parts: list[str] = []
    strategies: list[str] = []
    page_count = 0
    pages_with_text = 0
    pdf_chars = 0
    ocr_chars = 0
    used_ocr = False

    try:
        ocr_result: OcrText | None = None
        if mime in PDF_MIME_TYPES:
            layer = pdf_text.extract_pdf_text(file_bytes)
            page_count = layer.page_count
            pages_with_text = layer.pages_with_text
            pdf_chars = normalized_length(layer.text)
            if pdf_chars:
                parts.append(layer.text.strip())
                strategies.append(layer.strategy)

            if pdf_chars < settings.OCR_MIN_TEXT_CHARS:
                logger.info(
                    "text.pdf_layer_sparse",
                    extra={"pdf_char_count": pdf_chars, "min_chars": settings.OCR_MIN_TEXT_CHARS},
                )
                ocr_result = _run_ocr(ocr.ocr_pdf, file_bytes, have_fallback_text=bool(parts))
        else:
            ocr_result = _run_ocr(ocr.ocr_image, file_bytes, have_fallback_text=False)

        if ocr_result is not None:
            used_ocr = True
            page_count = max(page_count, ocr_result.page_count)
            pages_with_text = max(pages_with_text, ocr_result.pages_with_text)
            ocr_chars = normalized_length(ocr_result.text)
            if ocr_chars:
                parts.append(ocr_result.text.strip())
                strategies.append(ocr_result.strategy)

        text = "\n".join(parts)
        if not text.strip():
            raise UnreadableDocument(details={"mime_type": mime, "used_ocr": used_ocr})

    except AppError as e:
        log_extraction_call(
            ExtractionCallLog(
                trace_id=trace_id,
                mime_type=mime,
                strategy="+".join(strategies) or "none",
                byte_count=len(file_bytes),
                char_count=0,
                used_ocr=used_ocr,
                latency_ms=(now_ms() - start_ms),
                ok=False,
                error_type=type(e).__name__,
            )
        )
        raise

    acquired = AcquiredText(
        text=text,
        strategy="+".join(strategies),
        mime_type=mime,
        page_count=page_count,
        pages_with_text=pages_with_text,
        used_ocr=used_ocr,
        pdf_char_count=pdf_chars,
        ocr_char_count=ocr_chars,
    )
    log_extraction_call(
        ExtractionCallLog(
            trace_id=trace_id,
            mime_type=mime,
            strategy=acquired.strategy,
            byte_count=len(file_bytes),
            char_count=normalized_length(text),
            used_ocr=used_ocr,
            latency_ms=(now_ms() - start_ms),
            ok=True,
        )
    )
    return acquired
