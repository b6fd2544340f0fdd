# certintel/core/__init__.py
from certintel.core.errors import (
    AppError,
    LowConfidenceExtraction,
    ProcessingTimeout,
    UnreadableDocument,
    bad_request,
    not_found,
)
from certintel.core.error_codes import ErrorCode
from certintel.core.error_reasons import ErrorReason

__all__ = [
    "AppError",
    "ErrorCode",
    "ErrorReason",
    "LowConfidenceExtraction",
    "ProcessingTimeout",
    "UnreadableDocument",
    "bad_request",
    "not_found",
]
