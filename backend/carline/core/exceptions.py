"""Error taxonomy of the receipt processing pipeline.

Every error carries an HTTP status code and a message that is safe to
show to the caller. Diagnostic detail (upstream status text, raw
response fragments) lives on dedicated attributes and only ever
reaches the logs and Sentry.
"""

from __future__ import annotations

from typing import Optional


class ReceiptProcessingError(Exception):
    """Base class for all receipt pipeline errors."""

    status_code: int = 500
    error: str = "Internal server error"
    public_message: str = "Failed to process receipt. Please try again or enter data manually."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.public_message)


class InvalidImageFormat(ReceiptProcessingError):
    """The submitted image is not a plausible base64 payload."""

    status_code = 400
    error = "Bad request"
    public_message = "Invalid image format. Please provide a valid base64 encoded image."


class ServiceNotConfigured(ReceiptProcessingError):
    """The completion service credential is missing."""

    public_message = "AI service is not configured. Please contact administrator."


class UpstreamServiceError(ReceiptProcessingError):
    """Non-success response, empty completion or transport failure."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_text: Optional[str] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = status_code
        self.status_text = status_text
        self.body = body


class ResponseParseError(ReceiptProcessingError):
    """No JSON object could be located in, or parsed from, the completion text."""

    def __init__(self, message: str, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ReceiptProcessingFailed(ReceiptProcessingError):
    """Opaque failure surfaced to callers for any stage 3-5 error."""


__all__ = [
    "ReceiptProcessingError",
    "InvalidImageFormat",
    "ServiceNotConfigured",
    "UpstreamServiceError",
    "ResponseParseError",
    "ReceiptProcessingFailed",
]
