import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from certintel.core import AppError, ErrorCode
from certintel.validations.file_validators import read_certificate_upload, validate_certificate_upload


def _upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename, headers=Headers({"content-type": content_type}))


@pytest.mark.parametrize("content_type", ["application/pdf", "image/png", "image/jpeg", "image/jpg"])
def test_allowed_types(content_type):
    assert validate_certificate_upload(_upload(b"x", "cert", content_type)) == content_type


def test_rejects_other_types():
    with pytest.raises(AppError) as exc:
        validate_certificate_upload(_upload(b"x", "cert.docx", "application/msword"))
    assert exc.value.code == ErrorCode.INVALID_FILE_TYPE
    assert exc.value.status_code == 415


def test_missing_file():
    with pytest.raises(AppError) as exc:
        validate_certificate_upload(None)
    assert exc.value.code == ErrorCode.FILE_MISSING


def test_size_cap():
    assert read_certificate_upload(_upload(b"12345", "a.pdf", "application/pdf"), max_bytes=5) == b"12345"

    with pytest.raises(AppError) as exc:
        read_certificate_upload(_upload(b"123456", "a.pdf", "application/pdf"), max_bytes=5)
    assert exc.value.code == ErrorCode.FILE_TOO_LARGE
    assert exc.value.status_code == 413
