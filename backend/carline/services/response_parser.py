"""Locate and parse the JSON object embedded in a completion.

Models are told to answer with JSON only, but they still wrap the
object in markdown fences or add a sentence before or after it. The
parser takes the span from the first ``{`` to the last ``}`` and hands
it to ``json.loads``.

Known limitation: the span is chosen greedily, so a completion that
contains two separate JSON-like fragments yields one span covering
both, which then fails to parse. A syntactically valid object with
wrong values is not caught here; that is the normaliser's job.
"""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from carline.core.exceptions import ResponseParseError
from carline.models.schemas import ExtractedReceiptFields


logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

# Fragment of the raw completion kept on errors for diagnosis
MAX_FRAGMENT = 500


def extract_json_object(text: str) -> dict:
    """Return the JSON object embedded in ``text``.

    :raises ResponseParseError: if no ``{...}`` span exists or it is not valid JSON
    """
    match = _JSON_OBJECT.search(text or "")
    if match is None:
        logger.error("[receipt:parse] no JSON object in completion text=%r", (text or "")[:MAX_FRAGMENT])
        raise ResponseParseError("Could not extract JSON from response", raw_text=(text or "")[:MAX_FRAGMENT])
    candidate = match.group(0)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.error("[receipt:parse] invalid JSON err=%s fragment=%r", exc, candidate[:MAX_FRAGMENT])
        raise ResponseParseError(f"Invalid JSON in response: {exc}", raw_text=candidate[:MAX_FRAGMENT]) from exc
    return data


def parse_receipt_fields(text: str) -> ExtractedReceiptFields:
    """Parse completion text into loosely-typed receipt fields."""
    data = extract_json_object(text)
    try:
        return ExtractedReceiptFields.model_validate(data)
    except ValidationError as exc:
        logger.error("[receipt:parse] unexpected JSON shape err=%s", exc)
        raise ResponseParseError(f"Unexpected JSON shape: {exc}", raw_text=text[:MAX_FRAGMENT]) from exc
