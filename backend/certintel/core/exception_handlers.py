"""
exception_handlers.py
- Purpose: Convert AppError (and generic exceptions) into consistent API responses.

Every failure maps to a short actionable message; raw exception text never
reaches the portal. Errors are logged with request context.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from certintel.core import AppError, ErrorCode, ErrorReason

logger = logging.getLogger("certintel.exceptions")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "app_error",
        extra={
            "path": str(getattr(request.url, "path", "")),
            "method": request.method,
            "status_code": exc.status_code,
            "code": getattr(exc, "code", None),
            "reason": str(exc),
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"success": False, **exc.to_dict()})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={"path": str(getattr(request.url, "path", "")), "method": request.method},
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "reason": ErrorReason.INTERNAL_ERROR.value,
                "message": "Unable to process certificate.",
            },
        },
    )
