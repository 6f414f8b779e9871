"""Normalisation, confidence scoring and review policy for extracted receipts.

The checks here are deterministic and independent of the model:

* **Amount** outside ``(0, 1_000_000]`` is logged as suspicious but kept
  as reported. Large purchases are rare but real.
* **Date** in the future or more than a year in the past is replaced by
  today and logged. A date that does not parse is treated the same way.
* **Category** outside ``ExpenseCategory`` becomes ``other``.

Confidence is a weighted completeness score over the fields as the model
returned them (before normalisation), not a probability that the values
are right. A receipt needs review when the score is below the threshold
or when the amount or date is missing.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Optional

from carline.core.config import Settings
from carline.models.enums import ExpenseCategory
from carline.models.schemas import ExtractedReceiptFields, ReceiptResult, ValidatedReceiptFields
from carline.utils.helpers import one_year_before, parse_iso_date, utc_today


logger = logging.getLogger(__name__)

MAX_PLAUSIBLE_AMOUNT = 1_000_000
DEFAULT_CONFIDENCE_THRESHOLD: float = Settings.model_fields["RECEIPT_CONFIDENCE_THRESHOLD"].default

# Credit per signal; weights sum to 1.0
WEIGHT_AMOUNT = 0.40
WEIGHT_DATE = 0.30
WEIGHT_MERCHANT = 0.15
WEIGHT_CATEGORY = 0.10
WEIGHT_DETAILS = 0.05

Clock = Callable[[], dt.date]


def _is_suspicious_amount(amount: float) -> bool:
    return amount <= 0 or amount > MAX_PLAUSIBLE_AMOUNT


def normalize_date(value: Optional[str], today: dt.date) -> Optional[str]:
    """Return ``value`` as ``YYYY-MM-DD`` inside the trailing one-year window.

    Out-of-window and unparseable dates are replaced with ``today``.
    """
    if value is None:
        return None
    parsed = parse_iso_date(value)
    if parsed is None or parsed > today or parsed < one_year_before(today):
        logger.warning("[receipt:validate] suspicious date detected: %s; using %s", value, today.isoformat())
        return today.isoformat()
    return parsed.isoformat()


def normalize_category(value: Optional[str]) -> Optional[ExpenseCategory]:
    if value is None:
        return None
    try:
        return ExpenseCategory(value)
    except ValueError:
        logger.info("[receipt:validate] unknown category %r mapped to other", value)
        return ExpenseCategory.OTHER


def validate_extracted_fields(fields: ExtractedReceiptFields, clock: Clock = utc_today) -> ValidatedReceiptFields:
    """Apply the normalisation rules to every field of an extraction."""
    if fields.amount is not None and _is_suspicious_amount(fields.amount):
        logger.warning("[receipt:validate] suspicious amount detected: %s", fields.amount)

    return ValidatedReceiptFields(
        amount=fields.amount,
        date=normalize_date(fields.date, clock()),
        merchant=fields.merchant,
        category=normalize_category(fields.category),
        description=fields.description,
        items=fields.items,
    )


def calculate_confidence(fields: ExtractedReceiptFields) -> float:
    """Return the weighted completeness score of ``fields`` in ``[0, 1]``."""
    score = 0.0
    if fields.amount is not None and fields.amount > 0:
        score += WEIGHT_AMOUNT
    if fields.date is not None:
        score += WEIGHT_DATE
    if fields.merchant is not None:
        score += WEIGHT_MERCHANT
    if fields.category is not None:
        score += WEIGHT_CATEGORY
    if fields.description is not None or fields.has_items:
        score += WEIGHT_DETAILS
    # round away float noise from summing the weights
    return min(round(score, 4), 1.0)


def needs_review(
    fields: ExtractedReceiptFields,
    confidence: float,
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> bool:
    return confidence < threshold or fields.amount is None or fields.date is None


def assemble_result(
    validated: ValidatedReceiptFields,
    confidence: float,
    review: bool,
    today: dt.date,
) -> ReceiptResult:
    """Fill the defaults for absent fields and build the outgoing record."""
    return ReceiptResult(
        amount=validated.amount if validated.amount is not None else 0,
        date=validated.date if validated.date is not None else today.isoformat(),
        merchant=validated.merchant,
        category=validated.category if validated.category is not None else ExpenseCategory.OTHER,
        description=validated.description,
        confidence=confidence,
        needs_review=review,
    )


def score_and_assemble(
    extracted: ExtractedReceiptFields,
    clock: Clock = utc_today,
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> ReceiptResult:
    """Run normalisation, scoring and review policy on one extraction."""
    today = clock()
    validated = validate_extracted_fields(extracted, clock=lambda: today)
    confidence = calculate_confidence(extracted)
    review = needs_review(extracted, confidence, threshold)
    return assemble_result(validated, confidence, review, today)
