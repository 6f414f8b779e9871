"""Common dependencies for FastAPI routes.

The receipt service is built once per process from the global
``settings`` and shared by every request; it holds no per-request
state. Tests replace it through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from carline.core.config import settings
from carline.services.receipt_service import ReceiptService


@lru_cache(maxsize=1)
def get_receipt_service() -> ReceiptService:
    """Return the process-wide receipt service."""
    return ReceiptService(settings)
