"""certintel/documents/pdf_text.py

Deterministic PDF -> embedded text layer extraction.

Preferred strategy:
1) PyMuPDF (fitz)
2) pdfplumber
3) pypdf (very basic)

Scanned certificates usually have no text layer at all; that is not an error
here. The caller decides whether to fall back to OCR.
"""

import io
import logging

from certintel.core import AppError, ErrorCode, ErrorReason
from certintel.documents.types import PdfText

logger = logging.getLogger("certintel.documents.pdf_text")


def _collect(page_texts: list[str], page_count: int, strategy: str) -> PdfText:
    pages_with_text = sum(1 for t in page_texts if t.strip())
    return PdfText(
        text="\n\n".join(page_texts),
        page_count=page_count,
        pages_with_text=pages_with_text,
        strategy=strategy,
    )


def extract_pdf_text(pdf_bytes: bytes) -> PdfText:
    if not pdf_bytes:
        raise AppError(
            code=ErrorCode.VALIDATION_ERROR,
            reason=ErrorReason.INVALID_INPUT.value,
            message="Empty PDF bytes",
            status_code=400,
        )

    missing_backends = 0

    # 1) PyMuPDF
    try:
        import fitz  # type: ignore

        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            texts = [(doc.load_page(i).get_text("text") or "") for i in range(doc.page_count)]
            return _collect(texts, doc.page_count, "pymupdf")
    except ImportError:
        missing_backends += 1
    except Exception as e:
        logger.debug("pdf_text.backend_failed", extra={"backend": "pymupdf", "error": str(e)})

    # 2) pdfplumber
    try:
        import pdfplumber  # type: ignore

        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            texts = [(p.extract_text() or "") for p in pdf.pages]
            return _collect(texts, len(pdf.pages), "pdfplumber")
    except ImportError:
        missing_backends += 1
    except Exception as e:
        logger.debug("pdf_text.backend_failed", extra={"backend": "pdfplumber", "error": str(e)})

    # 3) pypdf (weak fallback)
    try:
        from pypdf import PdfReader  # type: ignore

        reader = PdfReader(io.BytesIO(pdf_bytes))
        texts = [(p.extract_text() or "") for p in reader.pages]
        return _collect(texts, len(reader.pages), "pypdf")
    except ImportError as e:
        missing_backends += 1
        if missing_backends == 3:
            raise AppError(
                code=ErrorCode.CONFIG_ERROR,
                reason=ErrorReason.MISSING_DEPENDENCY.value,
                message="No PDF extraction backend available. Install PyMuPDF (fitz) or pdfplumber.",
                status_code=500,
            ) from e
    except Exception as e:
        logger.debug("pdf_text.backend_failed", extra={"backend": "pypdf", "error": str(e)})

    # Every installed backend rejected the file; let OCR have a go.
    logger.warning("pdf_text.unparseable", extra={"byte_count": len(pdf_bytes)})
    return PdfText(text="", page_count=0, pages_with_text=0, strategy="none")
