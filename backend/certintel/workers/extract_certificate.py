"""certintel/workers/extract_certificate.py

Worker entrypoint: certificate bytes -> text -> fields -> quality.

OCR is the long pole, so the API never runs this on the request thread:
run_with_timeout() hands it to a bounded thread pool and waits at most the
configured budget. The Celery task calls run_extract_certificate() directly.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from functools import lru_cache

from certintel.certificates.parse import parse_fields
from certintel.certificates.quality import score_extraction
from certintel.core import ProcessingTimeout
from certintel.core.config import settings
from certintel.core.request_context import set_context
from certintel.documents.extract import extract_text
from certintel.services.types import CertificateExtraction

logger = logging.getLogger("certintel.workers.extract_certificate")


def run_extract_certificate(file_bytes: bytes, mime_type: str, *, trace_id: str | None = None) -> CertificateExtraction:
    if trace_id is None:
        trace_id = str(uuid.uuid4())
    set_context(document_id=trace_id, mime_type=mime_type)

    logger.info("certificate.extract.start", extra={"byte_count": len(file_bytes or b"")})
    acquired = extract_text(file_bytes, mime_type, trace_id=trace_id)
    fields = parse_fields(acquired.text)
    quality = score_extraction(acquired, fields)
    logger.info(
        "certificate.extract.done",
        extra={
            "strategy": acquired.strategy,
            "populated": fields.populated(),
            "template": fields.is_likely_known_template,
            "confidence": quality.confidence,
        },
    )
    return CertificateExtraction(fields=fields, raw_text=acquired.text.strip(), acquired=acquired, quality=quality)


@lru_cache(maxsize=1)
def get_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=settings.EXTRACTION_MAX_WORKERS, thread_name_prefix="cert-extract")


def run_with_timeout(
    file_bytes: bytes,
    mime_type: str,
    *,
    timeout_seconds: float,
    trace_id: str | None = None,
    executor: ThreadPoolExecutor | None = None,
) -> CertificateExtraction:
    trace_id = trace_id or str(uuid.uuid4())
    pool = executor or get_executor()

    # Copy contextvars so worker-thread log lines keep the request_id
    ctx = contextvars.copy_context()
    future = pool.submit(ctx.run, run_extract_certificate, file_bytes, mime_type, trace_id=trace_id)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError as e:
        # A running OCR call can't be interrupted; it finishes in the background and is discarded.
        future.cancel()
        logger.warning("certificate.extract.timeout", extra={"timeout_seconds": timeout_seconds, "trace_id": trace_id})
        raise ProcessingTimeout(details={"timeout_seconds": timeout_seconds}) from e
