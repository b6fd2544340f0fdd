"""certintel/certificates/patterns.py

Compiled regexes for certificate field extraction.

Tuned against the state fire/rescue training institute certificate layout
("THIS CERTIFICATE AWARDED TO ... HAS PASSED ALL EXAMINATIONS AND COMPLETED
ALL COURSE WORK IN ... LOG NUMBER ..."), with generic fallbacks for other
certificate wording. Order inside each list is priority order.
"""

import re

_I = re.IGNORECASE

# ---------------------------------------------------------------------------
# Date fragments (shared by recipient stops and date extraction)
# ---------------------------------------------------------------------------

_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_DATE_MONTH_FIRST = rf"\b{_MONTH}\.?\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}\b"
_DATE_DAY_FIRST = rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+(?:of\s+)?{_MONTH}\.?,?\s+\d{{4}}\b"
_DATE_ISO = r"(?<![\w\-/.])\d{4}-\d{2}-\d{2}(?![\w/])"
_DATE_NUMERIC = r"(?<![\w\-/.])\d{1,2}[/\-.]\d{1,2}[/\-.](?:\d{4}|\d{2})(?![\w/])"
_ANY_DATE = rf"(?:{_DATE_ISO}|{_DATE_MONTH_FIRST}|{_DATE_DAY_FIRST}|{_DATE_NUMERIC})"

# ---------------------------------------------------------------------------
# Recipient
# ---------------------------------------------------------------------------

RECIPIENT_ANCHORS = [
    re.compile(r"\bthis\s+certificate\s+(?:is\s+)?awarded\s+to\b\s*:?", _I),
    re.compile(r"\bawarded\s+to\b\s*:?", _I),
    re.compile(r"\bpresented\s+to\b\s*:?", _I),
    re.compile(r"\bthis\s+is\s+to\s+certify\s+that\b", _I),
    re.compile(r"\bcertif(?:y|ies)\s+that\b", _I),
    re.compile(r"\b(?:participant|recipient|student)(?:\s+name)?\s*:", _I),
    re.compile(r"\bcompleted\s+by\b\s*:?", _I),
]

RECIPIENT_STOP = re.compile(
    r"\b(?:has\s+(?:passed|successfully|completed|satisfactorily|attended)"
    r"|for\s+(?:successfully|successful|completing|completion)"
    r"|course\s*work"
    r"|in\s+recognition"
    r"|who\s+has)\b"
    # a date (or any digit) right after the name: "John Smith on March 3, 2024"
    rf"|(?:\bon\s+)?(?:{_DATE_MONTH_FIRST}|\d)",
    _I,
)

# Characters that can appear in a person's name (Latin letters incl. accented)
NAME_DISALLOWED = re.compile(r"[^A-Za-zÀ-ɏ .'\-]+")

# Words that mean the candidate is template text, not a name
NOT_A_NAME = re.compile(
    r"\b(?:certificate|certify|certifies|awarded|presented|course|class|training"
    r"|hours?|date|number|completion|examinations?)\b",
    _I,
)

NAME_MIN_WORDS = 2
NAME_MAX_WORDS = 6

_NAME = r"(?P<name>[A-Za-z][A-Za-z.'\-]*(?:\s+[A-Za-z][A-Za-z.'\-]*){1,5}?)"
_NAME_TAIL = r"(?=\s+(?:has|for|who|upon|in\s+recognition|successfully|completed|attended)\b)"
# Labeled forms ("Participant: X Date: ..."): the name ends at the next label
_LABEL_TAIL = r"(?=\s+(?:has|course|class|date|hours?|for|log)\b|\s*$)"

RECIPIENT_FALLBACKS = [
    re.compile(rf"\bawarded\s+to\s*:?\s+{_NAME}{_NAME_TAIL}", _I),
    re.compile(rf"\bpresented\s+to\s*:?\s+{_NAME}{_NAME_TAIL}", _I),
    re.compile(rf"\bcertif(?:y|ies)\s+that\s+{_NAME}{_NAME_TAIL}", _I),
    re.compile(rf"\b(?:participant|recipient|student)(?:\s+name)?\s*:\s*{_NAME}{_LABEL_TAIL}", _I),
    re.compile(rf"\bcompleted\s+by\s*:?\s*{_NAME}{_LABEL_TAIL}", _I),
]

# ---------------------------------------------------------------------------
# Training class
# ---------------------------------------------------------------------------

CLASS_ANCHORS = [
    re.compile(r"\bcompleted\s+all\s+course\s*work\s+in\b\s*:?", _I),
    re.compile(r"\bpassed\s+all\s+course\s*work\s+in\b\s*:?", _I),
    re.compile(r"\bcourse\s*work\s+in\b\s*:?", _I),
    re.compile(r"\bfor\s+(?:the\s+)?successful(?:ly)?\s+complet(?:ion|ing)\s+(?:of\s+)?(?:the\s+)?(?:course\s+)?:?", _I),
    re.compile(r"\bhas\s+successfully\s+completed\s+(?:the\s+)?(?:course|class|training)?\s*(?:entitled|titled)?\s*:?", _I),
]

CLASS_LABELED_LINE = re.compile(r"^(?:course|class|training|program)\s*(?:title|name)?\s*[:\-]\s*(?P<title>.+)$", _I)

# Lines that end the title block
HOURS_LINE = re.compile(r"^\(?\s*\d+(?:\.\d+)?\s*(?:hours?|hrs?)\b", _I)
LOG_NUMBER_LINE = re.compile(r"^log\s*(?:number|no\b|#)", _I)
DATE_LABEL_LINE = re.compile(r"^(?:(?:completion|course|class|issued?|award(?:ed)?|training)\s+)?date\b", _I)

# Inline tails that end a title sharing a line with other content
CLASS_INLINE_STOP = re.compile(
    r"\s+(?:on|held|consisting\s+of|dated?)\s+"
    r"|\(\s*\d+(?:\.\d+)?\s*(?:hours?|hrs?)"
    r"|\b\d+(?:\.\d+)?\s*(?:hours?|hrs?)\b"
    r"|\b(?:course|class)\s*(?:id|number|no\b)"
    r"|\blog\s*(?:number|no\b|#)",
    _I,
)

CLASS_MAX_LINES = 4

_TITLE_END = (
    r"(?=\s*\(\s*\d"
    r"|\s+\d+(?:\.\d+)?\s*(?:hours?|hrs?)\b"
    r"|\s+(?:on|held|consisting|dated?)\b"
    r"|\s+(?:course|class)\s*(?:id|number|no)\b"
    r"|\s+log\s*(?:number|no)\b"
    r"|[.;](?:\s|$)"
    r"|$)"
)

CLASS_FALLBACKS = [
    re.compile(rf"\bcourse\s*work\s+in\s+(?P<title>.{{3,120}}?){_TITLE_END}", _I),
    re.compile(
        r"\bsuccessfully\s+completed\s+(?:the\s+)?(?:course\s+|class\s+|training\s+)?(?:entitled\s+|titled\s+)?"
        rf"[\"“']?(?P<title>[A-Za-z0-9][^\"”]{{2,120}}?)[\"”']?{_TITLE_END}",
        _I,
    ),
]

# ---------------------------------------------------------------------------
# Hours
# ---------------------------------------------------------------------------

_NUMBER = r"(?<![\w.\-])(?P<hours>\d+(?:\.\d+)?)"

HOURS_LABELED = [
    re.compile(rf"\btotal\s+(?:(?:instructional|contact|training|credit|ce|ceu)\s+)?hours?\s*:?\s*{_NUMBER}", _I),
    re.compile(rf"\b(?:instructional|contact|credit|ce|ceu|training)\s+hours?\s*:?\s*{_NUMBER}", _I),
    re.compile(rf"\bhours?\s*:\s*{_NUMBER}", _I),
]

HOURS_BARE = re.compile(rf"{_NUMBER}\s*(?:hours?|hrs?)\b", _I)

# ---------------------------------------------------------------------------
# Course identifier / log number
# ---------------------------------------------------------------------------

# e.g. EMS-202-S025-2025
COURSE_ID_STRUCTURED = re.compile(r"\b[A-Z]{2,6}-\d{2,4}-[A-Z]{1,3}\d{2,4}-\d{2,4}\b", _I)

COURSE_ID_LABELED = re.compile(
    r"\b(?:course|class|program)\s*(?:identifier|id|number|no\.?|#|code)\s*[:#.]?\s*"
    r"(?P<code>[A-Z0-9][A-Z0-9\-./]*[A-Z0-9]|[A-Z0-9])",
    _I,
)

LOG_NUMBER_LABELED = re.compile(
    r"\blog\s*(?:number|no\.?|#)\s*[:#]?\s*(?P<code>[A-Z0-9][A-Z0-9\-]*[A-Z0-9]|[A-Z0-9])",
    _I,
)

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

DATE_LABELED = [
    re.compile(
        rf"\b(?:completion|course|class|issued?|award(?:ed)?|training)\s+date\s*[:\-]?\s*(?P<date>{_ANY_DATE})",
        _I,
    ),
    re.compile(rf"\b(?:completed|issued|awarded)\s+on\s*:?\s*(?P<date>{_ANY_DATE})", _I),
    re.compile(rf"\bdate\s*:\s*(?P<date>{_ANY_DATE})", _I),
]

DATE_BARE = [
    re.compile(_DATE_MONTH_FIRST, _I),
    re.compile(_DATE_DAY_FIRST, _I),
    re.compile(_DATE_ISO),
    re.compile(_DATE_NUMERIC),
]

ORDINAL_SUFFIX = re.compile(r"(?<=\d)(?:st|nd|rd|th)\b", _I)

# ---------------------------------------------------------------------------
# Known-template markers
# ---------------------------------------------------------------------------

TEMPLATE_MARKERS = {
    "award_phrase": re.compile(r"\bawarded\s+to\b", _I),
    "passed_examinations": re.compile(r"\bhas\s+passed\s+all\s+examinations\b", _I),
    "completed_course_work": re.compile(r"\bcompleted\s+all\s+course\s*work\s+in\b", _I),
    "log_number": re.compile(r"\blog\s+number\b", _I),
    "structured_course_id": COURSE_ID_STRUCTURED,
}

TEMPLATE_MIN_MARKERS = 2
