"""
file_validators.py
- Purpose: Centralized validation for certificate uploads (type + size).
- Design: Raise AppError with stable error codes for UI + logs.
"""

from fastapi import UploadFile

from certintel.core import AppError, ErrorCode, ErrorReason, bad_request
from certintel.core.config import settings
from certintel.documents.extract import SUPPORTED_MIME_TYPES, normalize_mime_type


def validate_certificate_upload(file: UploadFile | None) -> str:
    """Presence + content-type check. Returns the normalized MIME type."""
    if not file or not file.filename:
        raise AppError(code=ErrorCode.FILE_MISSING, reason=ErrorReason.FILE_MISSING.value, status_code=422)

    content_type = normalize_mime_type(file.content_type)
    if content_type not in SUPPORTED_MIME_TYPES:
        raise AppError(
            code=ErrorCode.INVALID_FILE_TYPE,
            reason=ErrorReason.UNSUPPORTED_FILE_TYPE.value,
            status_code=415,
            details={"content_type": content_type},
        )
    return content_type


def read_certificate_upload(file: UploadFile, *, max_bytes: int | None = None) -> bytes:
    """
    Read the upload with a hard size cap.
    UploadFile doesn't reliably expose size, so read one byte past the limit.
    """
    limit = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES
    try:
        content = file.file.read(limit + 1)
    except OSError as e:
        raise bad_request(message="Failed to read uploaded certificate file") from e

    if len(content) > limit:
        raise AppError(
            code=ErrorCode.FILE_TOO_LARGE,
            reason=ErrorReason.FILE_TOO_LARGE.value,
            status_code=413,
            details={"max_bytes": limit},
        )
    return content
