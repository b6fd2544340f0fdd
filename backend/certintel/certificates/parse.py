"""certintel/certificates/parse.py

Raw OCR / PDF text -> ExtractedCertificateFields.

Each field has an ordered list of independent strategies (anchor-line scan
first, regex fallbacks over a whitespace-collapsed "compact" copy second).
A strategy returns a value or None; the first value wins. Strategies never
raise for missing content, so one unreadable section never blocks the rest.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence, TypeVar

from dateutil import parser as date_parser

from certintel.certificates import patterns as P
from certintel.certificates.fields import ExtractedCertificateFields
from certintel.core.config import settings

logger = logging.getLogger("certintel.certificates.parse")

T = TypeVar("T")


@dataclass(frozen=True)
class CertificateText:
    lines: tuple[str, ...]
    compact: str

    @classmethod
    def from_raw(cls, raw_text: str | None) -> "CertificateText":
        normalized = (raw_text or "").replace("\r\n", "\n").replace("\r", "\n")
        lines = tuple(line.strip() for line in normalized.split("\n") if line.strip())
        return cls(lines=lines, compact=" ".join(normalized.split()))


Strategy = Callable[[CertificateText], Optional[T]]


def first_match(strategies: Sequence[Strategy], text: CertificateText) -> Optional[T]:
    for strategy in strategies:
        value = strategy(text)
        if value is not None:
            return value
    return None


def normalize_whitespace(value: str) -> str:
    return " ".join((value or "").split())


# ---------------------------------------------------------------------------
# Recipient name
# ---------------------------------------------------------------------------

def clean_name(candidate: str | None) -> str | None:
    """Strip non-name characters; accept only 2-6 word results that aren't template text."""
    s = P.NAME_DISALLOWED.sub(" ", candidate or "")
    s = normalize_whitespace(s).strip(" .,'-")
    words = [w for w in s.split() if re.search(r"[^\W\d_]", w)]
    if not (P.NAME_MIN_WORDS <= len(words) <= P.NAME_MAX_WORDS):
        return None
    name = " ".join(words)
    if P.NOT_A_NAME.search(name):
        return None
    return name


def _name_after_anchor(text: CertificateText, index: int, anchor_end: int) -> str | None:
    remainder = text.lines[index][anchor_end:].strip(" :-")
    chunks = ([remainder] if remainder else []) + list(text.lines[index + 1 : index + 3])

    acc = ""
    for chunk in chunks[:2]:
        stop = P.RECIPIENT_STOP.search(chunk)
        if stop:
            chunk = chunk[: stop.start()]
        acc = f"{acc} {chunk}".strip()
        name = clean_name(acc)
        if name:
            return name
        if stop:
            break
    return None


def _recipient_from_anchor_lines(text: CertificateText) -> str | None:
    for anchor in P.RECIPIENT_ANCHORS:
        for i, line in enumerate(text.lines):
            m = anchor.search(line)
            if not m:
                continue
            name = _name_after_anchor(text, i, m.end())
            if name:
                return name
    return None


def _recipient_from_compact(text: CertificateText) -> str | None:
    for pattern in P.RECIPIENT_FALLBACKS:
        for m in pattern.finditer(text.compact):
            name = clean_name(m.group("name"))
            if name:
                return name
    return None


RECIPIENT_STRATEGIES: tuple[Strategy, ...] = (
    _recipient_from_anchor_lines,
    _recipient_from_compact,
)


# ---------------------------------------------------------------------------
# Training class name
# ---------------------------------------------------------------------------

def clean_class_name(candidate: str | None) -> str | None:
    s = normalize_whitespace(candidate or "").strip(" .,;:-\"'“”")
    if len(s) < 3 or not re.search(r"[A-Za-z]", s):
        return None
    if P.COURSE_ID_STRUCTURED.fullmatch(s):
        return None
    return s


def _is_class_stop_line(line: str) -> bool:
    return bool(
        P.HOURS_LINE.search(line)
        or P.LOG_NUMBER_LINE.search(line)
        or P.COURSE_ID_STRUCTURED.search(line)
        or P.DATE_LABEL_LINE.search(line)
    )


def _class_after_anchor(text: CertificateText, index: int, anchor_end: int) -> str | None:
    collected: list[str] = []

    remainder = text.lines[index][anchor_end:].strip(" :-")
    if remainder:
        stop = P.CLASS_INLINE_STOP.search(remainder)
        head = remainder[: stop.start()] if stop else remainder
        if head.strip():
            collected.append(head)
        if stop:
            return clean_class_name(" ".join(collected))

    for line in text.lines[index + 1 :]:
        if len(collected) >= P.CLASS_MAX_LINES or _is_class_stop_line(line):
            break
        stop = P.CLASS_INLINE_STOP.search(line)
        if stop:
            head = line[: stop.start()]
            if head.strip():
                collected.append(head)
            break
        collected.append(line)
        if line.endswith(")"):
            break

    return clean_class_name(" ".join(collected)) if collected else None


def _class_from_anchor_lines(text: CertificateText) -> str | None:
    for anchor in P.CLASS_ANCHORS:
        for i, line in enumerate(text.lines):
            m = anchor.search(line)
            if not m:
                continue
            title = _class_after_anchor(text, i, m.end())
            if title:
                return title
    return None


def _class_from_labeled_line(text: CertificateText) -> str | None:
    for line in text.lines:
        m = P.CLASS_LABELED_LINE.match(line)
        if not m:
            continue
        title = m.group("title")
        stop = P.CLASS_INLINE_STOP.search(title)
        if stop:
            title = title[: stop.start()]
        title = clean_class_name(title)
        # "Course: EMS-202-..." is an identifier, not a title
        if title and " " in title:
            return title
    return None


def _class_from_compact(text: CertificateText) -> str | None:
    for pattern in P.CLASS_FALLBACKS:
        m = pattern.search(text.compact)
        if m:
            title = clean_class_name(m.group("title"))
            if title:
                return title
    return None


CLASS_STRATEGIES: tuple[Strategy, ...] = (
    _class_from_anchor_lines,
    _class_from_labeled_line,
    _class_from_compact,
)


# ---------------------------------------------------------------------------
# Hours
# ---------------------------------------------------------------------------

def _to_hours(raw: str) -> float | None:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _hours_labeled(text: CertificateText) -> float | None:
    for pattern in P.HOURS_LABELED:
        m = pattern.search(text.compact)
        if m:
            value = _to_hours(m.group("hours"))
            if value is not None:
                return value
    return None


def _hours_bare(text: CertificateText) -> float | None:
    for m in P.HOURS_BARE.finditer(text.compact):
        value = _to_hours(m.group("hours"))
        if value is not None:
            return value
    return None


HOURS_STRATEGIES: tuple[Strategy, ...] = (_hours_labeled, _hours_bare)


# ---------------------------------------------------------------------------
# Course identifier / log number
# ---------------------------------------------------------------------------

def _has_digit(value: str) -> bool:
    return any(ch.isdigit() for ch in value)


def _course_id_structured(text: CertificateText) -> str | None:
    m = P.COURSE_ID_STRUCTURED.search(text.compact)
    return m.group(0).upper() if m else None


def _course_id_labeled(text: CertificateText) -> str | None:
    for m in P.COURSE_ID_LABELED.finditer(text.compact):
        code = m.group("code")
        if _has_digit(code):
            return code.upper()
    return None


COURSE_ID_STRATEGIES: tuple[Strategy, ...] = (_course_id_structured, _course_id_labeled)


def _log_number_labeled(text: CertificateText) -> str | None:
    for m in P.LOG_NUMBER_LABELED.finditer(text.compact):
        code = m.group("code")
        if _has_digit(code):
            return code.upper()
    return None


LOG_NUMBER_STRATEGIES: tuple[Strategy, ...] = (_log_number_labeled,)


# ---------------------------------------------------------------------------
# Completion date
# ---------------------------------------------------------------------------

def _date_labeled(text: CertificateText) -> str | None:
    for pattern in P.DATE_LABELED:
        m = pattern.search(text.compact)
        if m:
            return normalize_whitespace(m.group("date"))
    return None


def _date_bare(text: CertificateText) -> str | None:
    for pattern in P.DATE_BARE:
        m = pattern.search(text.compact)
        if m:
            return normalize_whitespace(m.group(0))
    return None


DATE_STRATEGIES: tuple[Strategy, ...] = (_date_labeled, _date_bare)


def parse_date(raw: str, *, dayfirst: bool = False) -> datetime | None:
    """Tolerant parse to UTC midnight of the calendar day, or None."""
    cleaned = P.ORDINAL_SUFFIX.sub("", raw or "")
    cleaned = re.sub(r"\bof\b", " ", cleaned, flags=re.IGNORECASE)
    try:
        dt = date_parser.parse(cleaned, dayfirst=dayfirst)
    except (ValueError, OverflowError):
        return None
    return datetime(dt.year, dt.month, dt.day, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Template heuristic
# ---------------------------------------------------------------------------

def count_template_markers(compact: str) -> int:
    return sum(1 for pattern in P.TEMPLATE_MARKERS.values() if pattern.search(compact or ""))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def parse_fields(raw_text: str | None, *, dayfirst: bool | None = None) -> ExtractedCertificateFields:
    text = CertificateText.from_raw(raw_text)
    if not text.lines:
        return ExtractedCertificateFields()

    fields = ExtractedCertificateFields(
        recipient_name=first_match(RECIPIENT_STRATEGIES, text),
        training_class_name=first_match(CLASS_STRATEGIES, text),
        hours_logged=first_match(HOURS_STRATEGIES, text),
        course_identifier=first_match(COURSE_ID_STRATEGIES, text),
        log_number=first_match(LOG_NUMBER_STRATEGIES, text),
    )

    raw_date = first_match(DATE_STRATEGIES, text)
    if raw_date:
        parsed = parse_date(raw_date, dayfirst=settings.DATE_DAYFIRST if dayfirst is None else dayfirst)
        if parsed is not None:
            fields.course_date = parsed
        else:
            fields.course_date_text = raw_date

    fields.template_marker_count = count_template_markers(text.compact)
    fields.is_likely_known_template = fields.template_marker_count >= P.TEMPLATE_MIN_MARKERS

    logger.debug(
        "certificate.fields_parsed",
        extra={
            "populated": fields.populated(),
            "template_markers": fields.template_marker_count,
            "line_count": len(text.lines),
        },
    )
    return fields
