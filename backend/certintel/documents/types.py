"""certintel/documents/types.py

Lightweight dataclasses for certificate text acquisition outputs.
Design goals:
- deterministic, single-pass extraction per backend
- enough bookkeeping (strategy, page counts) to explain what was read
"""


from dataclasses import dataclass


@dataclass(frozen=True)
class PdfText:
    text: str
    page_count: int
    pages_with_text: int
    strategy: str  # "pymupdf" | "pdfplumber" | "pypdf" | "none"


@dataclass(frozen=True)
class OcrText:
    text: str
    page_count: int
    pages_with_text: int
    strategy: str = "tesseract"


@dataclass(frozen=True)
class AcquiredText:
    text: str
    strategy: str  # passes joined with "+", e.g. "pymupdf+tesseract"
    mime_type: str
    page_count: int
    pages_with_text: int
    used_ocr: bool
    pdf_char_count: int = 0
    ocr_char_count: int = 0
