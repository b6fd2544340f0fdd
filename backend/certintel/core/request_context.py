"""
Request/Task context helpers.

We keep a small context (request_id, task_id, document_id, mime_type) in
ContextVars. The FastAPI middleware, the extraction workers and Celery tasks
all set these values so log lines for one certificate are correlatable.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_task_id: ContextVar[Optional[str]] = ContextVar("task_id", default=None)
_document_id: ContextVar[Optional[str]] = ContextVar("document_id", default=None)
_mime_type: ContextVar[Optional[str]] = ContextVar("mime_type", default=None)


def set_context(
    *,
    request_id: Optional[str] = None,
    task_id: Optional[str] = None,
    document_id: Optional[str] = None,
    mime_type: Optional[str] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if task_id is not None:
        _task_id.set(task_id)
    if document_id is not None:
        _document_id.set(document_id)
    if mime_type is not None:
        _mime_type.set(mime_type)


def clear_context() -> None:
    _request_id.set(None)
    _task_id.set(None)
    _document_id.set(None)
    _mime_type.set(None)


def get_context() -> Dict[str, Any]:
    ctx: Dict[str, Any] = {}
    rid = _request_id.get()
    tid = _task_id.get()
    did = _document_id.get()
    mime = _mime_type.get()

    if rid:
        ctx["request_id"] = rid
    if tid:
        ctx["task_id"] = tid
    if did:
        ctx["document_id"] = did
    if mime:
        ctx["mime_type"] = mime
    return ctx
