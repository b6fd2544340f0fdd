from __future__ import annotations

import base64
import binascii
import logging

from certintel.celery_app import celery_app
from certintel.core import AppError, bad_request
from certintel.core.request_context import clear_context, set_context

logger = logging.getLogger("certintel.tasks.certificate_pipeline")


def error_payload(exc: AppError) -> dict:
    body = exc.to_dict()["error"]
    # plain strings only: the eager path skips the JSON round trip
    body["code"] = getattr(exc.code, "value", exc.code)
    body["status_code"] = exc.status_code
    return body


@celery_app.task(
    name="certintel.tasks.certificate_pipeline.extract_certificate_task",
    bind=True,
)
def extract_certificate_task(self, payload_b64: str, mime_type: str, trace_id: str | None = None):
    """
    Off-process variant of the API's thread-pool extraction.
    No retries: a bad scan will not get better on a second pass, and the
    caller is already waiting on the result with its own timeout.
    """
    set_context(task_id=getattr(self.request, "id", None), document_id=trace_id, mime_type=mime_type)
    from certintel.workers.extract_certificate import run_extract_certificate

    try:
        logger.info("task.start", extra={"task": "extract_certificate_task"})
        try:
            file_bytes = base64.b64decode(payload_b64, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise bad_request(message="Certificate payload is not valid base64.") from e

        result = run_extract_certificate(file_bytes, mime_type, trace_id=trace_id)
        logger.info(
            "task.done",
            extra={"task": "extract_certificate_task", "confidence": result.quality.confidence},
        )
        return {"ok": True, "result": result.to_dict()}

    except AppError as e:
        logger.warning("task.app_error", extra={"task": "extract_certificate_task", "error": str(e)})
        return {"ok": False, "error": error_payload(e)}
    finally:
        clear_context()
