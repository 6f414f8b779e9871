from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Add backend folder to sys.path so `import carline...` works in tests when running from backend root
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from receipt_fixtures import VALID_IMAGE  # noqa: E402


@pytest.fixture
def valid_image() -> str:
    return VALID_IMAGE


@pytest.fixture
def scenario_a() -> dict[str, Any]:
    return {
        "amount": 500,
        "date": "2024-01-15",
        "merchant": "ОККО",
        "category": "fuel",
        "description": "Заправка",
        "items": [],
    }
