"""Enumeration types used by the receipt AI service.

Enumerations constrain the values that can leave the pipeline. When
modifying ``ExpenseCategory`` remember that the extraction prompt lists
the same values, and that the expense-creation client maps them onto
its own category records.
"""

from enum import Enum


class ExpenseCategory(str, Enum):
    """Categories a receipt can be classified into."""

    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    CARWASH = "carwash"
    PARTS = "parts"
    INSURANCE = "insurance"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ServiceStatus(str, Enum):
    """Availability of the completion service as reported by the health route."""

    AVAILABLE = "available"
    NOT_CONFIGURED = "not_configured"
