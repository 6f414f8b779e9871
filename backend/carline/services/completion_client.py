"""Client for the external vision-capable completion service.

This is the only network boundary of the receipt pipeline. One call is
made per receipt and it is never retried here (``max_retries=0``); the
caller decides whether to submit the receipt again. The transport
timeout configured through ``OPENAI_TIMEOUT_SECONDS`` is the only
deadline applied to the call.

Every failure mode (non-success status, transport error, empty
completion) is raised as ``UpstreamServiceError`` with the upstream
detail attached for operators.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from carline.core.config import Settings
from carline.core.exceptions import UpstreamServiceError
from carline.models.schemas import ExtractionRequest


logger = logging.getLogger(__name__)

# Upper bound on how much of an upstream error body ends up in logs
MAX_LOGGED_BODY = 500


class CompletionClient:
    """Thin wrapper over the OpenAI chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_settings(cls, config: Settings, http_client: Optional[httpx.AsyncClient] = None) -> "CompletionClient":
        if not config.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY is required to build a completion client")
        return cls(
            api_key=config.OPENAI_API_KEY,
            base_url=config.OPENAI_BASE_URL,
            timeout=config.OPENAI_TIMEOUT_SECONDS,
            http_client=http_client,
        )

    async def complete(self, request: ExtractionRequest) -> str:
        """Send ``request`` and return the text of the first completion choice."""
        try:
            completion = await self._client.chat.completions.create(
                model=request.model,
                messages=request.messages(),
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except openai.APIStatusError as exc:
            status_text = exc.response.reason_phrase
            body = exc.response.text[:MAX_LOGGED_BODY]
            logger.error(
                "[receipt:completion] upstream error status=%s text=%s body=%s",
                exc.status_code,
                status_text,
                body,
            )
            raise UpstreamServiceError(
                f"OpenAI API error: {status_text}",
                status_code=exc.status_code,
                status_text=status_text,
                body=body,
            ) from exc
        except openai.APIConnectionError as exc:
            logger.error("[receipt:completion] transport failure err=%s", exc)
            raise UpstreamServiceError(f"OpenAI API request failed: {exc}") from exc
        except openai.APIError as exc:
            logger.error("[receipt:completion] unexpected upstream response err=%s", exc)
            raise UpstreamServiceError(f"OpenAI API error: {exc}") from exc

        if not isinstance(completion, ChatCompletion):
            # non-JSON 200 bodies (e.g. a gateway HTML page) come back as plain text
            body = str(completion)[:MAX_LOGGED_BODY]
            logger.error("[receipt:completion] unexpected response body=%s", body)
            raise UpstreamServiceError("Unexpected response from OpenAI API", body=body)

        choices = completion.choices or []
        message = choices[0].message if choices else None
        content = message.content if message is not None else None
        if not content:
            logger.error("[receipt:completion] empty completion choices=%d", len(choices))
            raise UpstreamServiceError("No content in OpenAI response")
        return content

    async def aclose(self) -> None:
        await self._client.close()
