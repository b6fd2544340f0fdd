"""
error_reasons.py
- Purpose: Human-friendly "reason" strings.
- Keep these stable; they are surfaced next to the certificate upload form.
"""

from enum import Enum


class ErrorReason(str, Enum):
    INVALID_INPUT = "Invalid input"
    RESOURCE_NOT_FOUND = "Resource not found"

    FILE_MISSING = "Certificate file is required"
    UNSUPPORTED_FILE_TYPE = "Invalid file type. Only JPG, PNG and PDF files are allowed."
    FILE_TOO_LARGE = "Certificate file is too large"
    UNREADABLE_DOCUMENT = "Unable to read text from certificate"
    LOW_CONFIDENCE_EXTRACTION = "Certificate layout not recognized"
    PROCESSING_TIMEOUT = "Certificate processing timed out"
    INTERNAL_ERROR = "Internal server error"
    MISSING_DEPENDENCY = "Missing dependency"
