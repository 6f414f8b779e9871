"""
Custom exception handlers for FastAPI.
Provides clear, actionable error messages for validation, receipt pipeline
and server errors without leaking upstream details.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from carline.core.exceptions import ReceiptProcessingError
from carline.core.observability import sentry_capture_exception

logger = logging.getLogger(__name__)


def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Never echo submitted values: the body carries the receipt image
    details = [
        {k: v for k, v in error.items() if k not in ("input", "ctx", "url")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation error",
            "details": jsonable_encoder(details),
        },
    )


def receipt_exception_handler(request: Request, exc: ReceiptProcessingError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error,
            "details": exc.public_message,
        },
    )


def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    sentry_capture_exception(exc, tags={"path": request.url.path})
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "details": "An unexpected error occurred.",
        },
    )
