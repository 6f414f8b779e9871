"""Receipt image sanity checks.

Receipt photos arrive as base64 strings, optionally wrapped in a
``data:image/<subtype>;base64,`` URL. The check performed here is a
cheap gate run before any call to the completion service: it rejects
payloads that are obviously not base64 or too short to be an image.
It does not decode the bytes, so a well-formed string that is not a
real image still passes.
"""

from __future__ import annotations

import re

from carline.core.exceptions import InvalidImageFormat

MIN_BASE64_LENGTH = 100

_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")
_BASE64_BODY = re.compile(r"[A-Za-z0-9+/]*={0,2}")


def clean_base64(image: str) -> str:
    """Strip a leading ``data:image/...;base64,`` prefix if present."""
    return _DATA_URL_PREFIX.sub("", image, count=1)


def is_valid_base64_image(image: str) -> bool:
    """Return True when ``image`` passes the base64 alphabet and length checks."""
    if not isinstance(image, str):
        return False
    cleaned = clean_base64(image)
    if _BASE64_BODY.fullmatch(cleaned) is None:
        return False
    return len(cleaned) >= MIN_BASE64_LENGTH


def validate_receipt_image(image: str) -> str:
    """Validate a submitted receipt image and return the prefix-free base64.

    :raises InvalidImageFormat: if the payload fails the checks
    """
    if not is_valid_base64_image(image):
        raise InvalidImageFormat()
    return clean_base64(image)
