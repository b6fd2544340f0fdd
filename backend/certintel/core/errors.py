"""
errors.py
- Purpose: AppError used across services/extractors for consistent errors.
- Pattern: raise AppError(...) in the pipeline, handler converts to JSON response.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import status as http_status
from certintel.core.error_codes import ErrorCode
from certintel.core.error_reasons import ErrorReason


def _reason_text(reason: str | ErrorReason) -> str:
    return reason.value if isinstance(reason, ErrorReason) else str(reason)


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def __str__(self) -> str:
        return self.message or _reason_text(self.reason)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code,
                "reason": _reason_text(self.reason),
                "message": self.message if self.message else _reason_text(self.reason),
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


class UnreadableDocument(AppError):
    """No pass (PDF text layer or OCR) produced any text. User must re-upload."""

    def __init__(self, message: str | None = None, *, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCode.UNREADABLE_DOCUMENT,
            reason=ErrorReason.UNREADABLE_DOCUMENT.value,
            status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            message=message or "Unable to read text from certificate. Try a clearer PDF or image.",
        )


class LowConfidenceExtraction(AppError):
    """Text was recovered but looks nothing like a known certificate. Ask for manual entry."""

    def __init__(self, message: str | None = None, *, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCode.LOW_CONFIDENCE_EXTRACTION,
            reason=ErrorReason.LOW_CONFIDENCE_EXTRACTION.value,
            status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            message=message or "Certificate layout was not recognized. Please enter the details manually.",
        )


class ProcessingTimeout(AppError):
    """OCR/parsing exceeded the time budget. Safe to retry by resubmitting."""

    def __init__(self, message: str | None = None, *, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCode.PROCESSING_TIMEOUT,
            reason=ErrorReason.PROCESSING_TIMEOUT.value,
            status_code=http_status.HTTP_504_GATEWAY_TIMEOUT,
            details=details,
            message=message or "Reading the certificate took too long. Please try again.",
        )


# Convenience constructors (keeps services and validators short)
def bad_request(reason: str | ErrorReason = ErrorReason.INVALID_INPUT, *, code: ErrorCode = ErrorCode.VALIDATION_ERROR, details: dict | None = None, message: str | None = None) -> AppError:
    return AppError(code=code, reason=_reason_text(reason), status_code=http_status.HTTP_400_BAD_REQUEST, details=details, message=message)


def not_found(reason: str | ErrorReason = ErrorReason.RESOURCE_NOT_FOUND, *, message: str | None = None, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.NOT_FOUND, reason=_reason_text(reason), status_code=http_status.HTTP_404_NOT_FOUND, details=details, message=message)
