"""Shared builders for receipt pipeline tests.

Kept out of ``conftest.py`` so test modules can import them directly.
"""

from __future__ import annotations

import datetime as dt
import json
from typing import Any, Callable, Optional

import httpx

from carline.core.config import Settings
from carline.services.completion_client import CompletionClient
from carline.services.receipt_service import ReceiptService

# 1x1 PNG padded past the 100 character minimum
VALID_IMAGE = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg"
    "AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"
    "AAAAAAAAAAAAAAAAAAAAAAAAAAAA=="
)

# Fixed "today" so that 2024-01-15 sits inside the one-year window
TODAY = dt.date(2024, 2, 1)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "OPENAI_API_KEY": "test-api-key",
        "OPENAI_BASE_URL": "https://llm.test/v1",
        "SENTRY_DSN": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def completion_body(content: Optional[str]) -> dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


def completion_for(fields: dict[str, Any]) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering every call with ``fields`` serialised as the completion text."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=completion_body(json.dumps(fields, ensure_ascii=False)))

    return handler


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def make_client(transport: httpx.MockTransport, config: Optional[Settings] = None) -> CompletionClient:
    config = config or make_settings()
    return CompletionClient.from_settings(config, http_client=httpx.AsyncClient(transport=transport))


def make_service(
    handler: Callable[[httpx.Request], httpx.Response],
    config: Optional[Settings] = None,
    today: dt.date = TODAY,
) -> tuple[ReceiptService, RecordingTransport]:
    config = config or make_settings()
    transport = RecordingTransport(handler)
    client = make_client(transport, config) if config.openai_configured else None
    return ReceiptService(config, client=client, clock=lambda: today), transport
