"""Pydantic schemas for the receipt pipeline and its HTTP surface.

Pydantic models are used for validating and serialising data that
crosses a boundary: the loosely-typed JSON returned by the completion
service, the outbound request sent to it, and the request/response
bodies of the API. Each boundary gets its own model so that the shape
exposed through the API can evolve independently of what the model
returns.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import ExpenseCategory, ServiceStatus


def _coerce_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _coerce_text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for blanks and non-scalar values."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


# ---------------------------------------------------------------------------
# Completion service boundary


class LineItem(BaseModel):
    """Individual line item on a receipt."""

    name: str
    quantity: Optional[float] = None
    price: Optional[float] = None

    @field_validator("quantity", "price", mode="before")
    @classmethod
    def _numeric(cls, value: Any) -> Optional[float]:
        return _coerce_number(value)


class ExtractedReceiptFields(BaseModel):
    """Candidate values parsed from the completion text.

    Every field is optional; an absent field is ``None`` and is never
    conflated with zero or an empty string. Values of an unexpected shape
    are turned into ``None`` here rather than failing the whole receipt.
    """

    model_config = ConfigDict(extra="ignore")

    amount: Optional[float] = None
    date: Optional[str] = None
    merchant: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    items: Optional[List[LineItem]] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> Optional[float]:
        return _coerce_number(value)

    @field_validator("date", "merchant", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _coerce_text(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> Optional[str]:
        text = _coerce_text(value)
        return text.lower() if text is not None else None

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, value: Any) -> Optional[List[Any]]:
        if value is None or not isinstance(value, list):
            return None
        items: List[Any] = []
        for entry in value:
            if isinstance(entry, LineItem):
                items.append(entry)
                continue
            if isinstance(entry, str):
                entry = {"name": entry}
            if not isinstance(entry, dict):
                continue
            name = _coerce_text(entry.get("name"))
            if name is None:
                continue
            items.append({**entry, "name": name})
        return items

    @property
    def has_items(self) -> bool:
        return self.items is not None and len(self.items) > 0


class ValidatedReceiptFields(ExtractedReceiptFields):
    """Extraction after normalisation: the category is a known member or absent."""

    category: Optional[ExpenseCategory] = None  # type: ignore[assignment]


class ExtractionRequest(BaseModel):
    """Outbound payload for the completion service."""

    model: str
    prompt: str
    image_url: str = Field(description="data URL carrying the cleaned base64 image")
    max_tokens: int
    temperature: float

    def messages(self) -> List[Dict[str, Any]]:
        """Return the single user message combining instruction and image."""
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": self.prompt},
                    {"type": "image_url", "image_url": {"url": self.image_url}},
                ],
            }
        ]


# ---------------------------------------------------------------------------
# API request/response schemas


class ProcessReceiptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    image: str = Field(min_length=1, description="Base64 encoded image, optionally a data URL")
    car_id: UUID = Field(alias="carId")


class ReceiptResult(BaseModel):
    """Structured expense record handed to the expense-creation client."""

    model_config = ConfigDict(populate_by_name=True)

    amount: float
    date: str = Field(description="ISO calendar date, YYYY-MM-DD")
    merchant: Optional[str] = None
    category: ExpenseCategory = ExpenseCategory.OTHER
    description: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    needs_review: bool = Field(alias="needsReview")


class HealthStatus(BaseModel):
    status: ServiceStatus
    configured: bool
