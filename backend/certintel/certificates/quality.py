"""certintel/certificates/quality.py

Cheap, explainable heuristics to score how trustworthy an extraction is.

The score is advisory: it becomes the confidence level shown next to the
auto-filled form. Hard refusals (UnreadableDocument, LowConfidenceExtraction)
are decided elsewhere.
"""

import re
import string
from dataclasses import dataclass

from certintel.certificates.fields import ExtractedCertificateFields
from certintel.constants.statuses import ConfidenceLevel
from certintel.core.config import settings
from certintel.documents.extract import normalized_length
from certintel.documents.types import AcquiredText


@dataclass(frozen=True)
class QualityReport:
    confidence: float  # 0.0 - 1.0
    level: ConfidenceLevel
    char_count: int
    word_count: int
    line_count: int
    printable_ratio: float
    template_marker_count: int
    field_count: int
    used_ocr: bool
    is_sparse: bool
    is_garbled_likely: bool
    notes: list[str]

    def to_dict(self) -> dict:
        return {
            "confidence": self.confidence,
            "level": self.level.value,
            "char_count": self.char_count,
            "word_count": self.word_count,
            "line_count": self.line_count,
            "printable_ratio": self.printable_ratio,
            "template_marker_count": self.template_marker_count,
            "field_count": self.field_count,
            "used_ocr": self.used_ocr,
            "is_sparse": self.is_sparse,
            "is_garbled_likely": self.is_garbled_likely,
            "notes": list(self.notes),
        }


def _printable_ratio(text: str) -> float:
    if not text:
        return 0.0
    printable = set(string.printable)
    good = sum(1 for ch in text if ch in printable)
    return good / max(1, len(text))


def _level_for(confidence: float) -> ConfidenceLevel:
    if confidence >= 0.70:
        return ConfidenceLevel.HIGH
    if confidence >= 0.40:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def score_extraction(acquired: AcquiredText, fields: ExtractedCertificateFields) -> QualityReport:
    raw = acquired.text or ""
    char_count = len(raw)
    word_count = len(re.findall(r"\w+", raw))
    line_count = raw.count("\n") + (1 if raw else 0)
    printable_ratio = _printable_ratio(raw)

    field_count = len(fields.populated())
    marker_count = fields.template_marker_count

    is_sparse = normalized_length(raw) < settings.OCR_MIN_TEXT_CHARS
    is_garbled_likely = (char_count > 0) and (printable_ratio < 0.85)

    notes: list[str] = []

    if field_count == 0:
        confidence = 0.05
        notes.append("No certificate fields recognized")
    elif field_count <= 2:
        confidence = 0.35
        notes.append(f"Recognized {field_count} field(s)")
    elif field_count <= 4:
        confidence = 0.60
        notes.append(f"Recognized {field_count} fields")
    else:
        confidence = 0.75
        notes.append(f"Recognized {field_count} fields")

    if fields.is_likely_known_template:
        confidence = min(0.95, confidence + 0.20)
        notes.append(f"Matches known certificate layout ({marker_count} markers)")
    elif marker_count == 1:
        confidence = min(0.90, confidence + 0.05)
        notes.append("Detected one certificate layout marker")

    if fields.recipient_name and fields.training_class_name:
        confidence = min(0.95, confidence + 0.05)

    if acquired.used_ocr:
        confidence = max(0.05, confidence - 0.05)
        notes.append("Text recovered by OCR")

    if is_garbled_likely:
        confidence = max(0.05, confidence - 0.25)
        notes.append("Text looks garbled (low printable ratio)")

    if is_sparse:
        confidence = min(confidence, 0.30)
        notes.append("Very little text was recovered")

    confidence = float(round(confidence, 3))
    return QualityReport(
        confidence=confidence,
        level=_level_for(confidence),
        char_count=char_count,
        word_count=word_count,
        line_count=line_count,
        printable_ratio=float(round(printable_ratio, 3)),
        template_marker_count=marker_count,
        field_count=field_count,
        used_ocr=acquired.used_ocr,
        is_sparse=is_sparse,
        is_garbled_likely=is_garbled_likely,
        notes=notes,
    )
