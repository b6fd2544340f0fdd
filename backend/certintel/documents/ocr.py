"""certintel/documents/ocr.py

Image OCR via Tesseract (pytesseract + Pillow).

PDFs without a usable text layer are rasterized first:
1) PyMuPDF pixmaps
2) pdf2image (needs poppler on the host)
"""

import io
import logging

import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError

from certintel.core import AppError, ErrorCode, ErrorReason
from certintel.core.config import settings
from certintel.documents.types import OcrText

logger = logging.getLogger("certintel.documents.ocr")

if settings.TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = settings.TESSERACT_CMD


def _prepare(img: Image.Image) -> Image.Image:
    # Phone photos carry EXIF rotation; grayscale helps Tesseract on colored seals/borders
    img = ImageOps.exif_transpose(img)
    return img.convert("L")


def _recognize(img: Image.Image) -> str:
    try:
        return pytesseract.image_to_string(img, lang=settings.OCR_LANG) or ""
    except pytesseract.TesseractNotFoundError as e:
        raise AppError(
            code=ErrorCode.CONFIG_ERROR,
            reason=ErrorReason.MISSING_DEPENDENCY.value,
            message="Tesseract OCR engine is not installed.",
            status_code=500,
        ) from e


def ocr_image(image_bytes: bytes) -> OcrText:
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            prepared = _prepare(img)
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("ocr.image_unreadable", extra={"error": str(e)})
        return OcrText(text="", page_count=0, pages_with_text=0)

    text = _recognize(prepared)
    return OcrText(text=text, page_count=1, pages_with_text=1 if text.strip() else 0)


def render_pdf_pages(pdf_bytes: bytes, *, dpi: int) -> list[Image.Image]:
    # 1) PyMuPDF
    try:
        import fitz  # type: ignore

        images: list[Image.Image] = []
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            for page in doc:
                pix = page.get_pixmap(dpi=dpi)
                images.append(Image.open(io.BytesIO(pix.tobytes("png"))))
        return images
    except Exception as e:
        logger.debug("ocr.render_failed", extra={"backend": "pymupdf", "error": str(e)})

    # 2) pdf2image
    try:
        from pdf2image import convert_from_bytes  # type: ignore

        return convert_from_bytes(pdf_bytes, dpi=dpi)
    except Exception as e:
        logger.warning("ocr.render_failed", extra={"backend": "pdf2image", "error": str(e)})
        return []


def ocr_pdf(pdf_bytes: bytes) -> OcrText:
    pages = render_pdf_pages(pdf_bytes, dpi=settings.OCR_DPI)
    texts = [_recognize(_prepare(img)) for img in pages]
    return OcrText(
        text="\n\n".join(texts),
        page_count=len(pages),
        pages_with_text=sum(1 for t in texts if t.strip()),
    )
