"""
Central logging configuration.

Goals:
- One shared logging setup for the API, the extraction workers and Celery.
- JSON logs to stdout for easy aggregation.
- Correlate logs with request_id / task_id / document_id.

Standard-library logging only; the formatter is referenced by dotted path
from dictConfig.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.config import dictConfig

from certintel.core.request_context import get_context


# LogRecord attributes that are never copied into the JSON payload
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)

# Third-party loggers that are chatty at INFO/DEBUG while parsing PDFs
_NOISY_LOGGERS = ("pdfminer", "PIL", "fitz", "pypdf")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # Include contextvars (request/task/document)
        base.update(get_context())

        # Include any `extra={...}` fields; never dump raw certificate bytes
        for k, v in record.__dict__.items():
            if k in _RESERVED_ATTRS or k.startswith("_") or k in base:
                continue
            if isinstance(v, (bytes, bytearray)):
                base[k] = f"<{len(v)} bytes>"
                continue
            try:
                json.dumps(v)
                base[k] = v
            except (TypeError, ValueError):
                base[k] = str(v)

        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False)


def configure_logging(level: str | None = None) -> None:
    """
    Call once at process startup (API + Celery worker).
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    loggers: dict[str, dict] = {
        # Uvicorn loggers
        "uvicorn": {"level": level, "handlers": ["console"], "propagate": False},
        "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": level, "handlers": ["console"], "propagate": False},
        # Celery loggers
        "celery": {"level": level, "handlers": ["console"], "propagate": False},
    }
    for name in _NOISY_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "certintel.core.logging_config.JsonFormatter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stdout,
                }
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }
    )
