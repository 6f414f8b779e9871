"""Receipt processing service.

This service turns a photographed receipt into a ``ReceiptResult`` that
the expense screens can pre-fill. The stages run strictly in order:

1. validate the base64 payload (``carline.utils.image_validation``)
2. build the extraction request (``carline.utils.prompts``)
3. call the completion service (``CompletionClient``)
4. parse the embedded JSON (``carline.services.response_parser``)
5. normalise, score and apply the review policy
   (``carline.services.receipt_validation``)

An invalid image is reported to the caller as such. A missing credential
fails fast before any network call. Any failure in stages 3-5 is logged
with its full detail, reported to Sentry and surfaced as a single
``ReceiptProcessingFailed``; callers never see upstream internals.

The service keeps no per-request state, so one instance can serve
concurrent requests. The outbound call is the only await point.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from carline.core.config import Settings
from carline.core.exceptions import ReceiptProcessingFailed, ServiceNotConfigured
from carline.core.observability import sentry_breadcrumb, sentry_capture_exception
from carline.models.enums import ServiceStatus
from carline.models.schemas import HealthStatus, ReceiptResult
from carline.services.completion_client import CompletionClient
from carline.services.receipt_validation import Clock, score_and_assemble
from carline.services.response_parser import parse_receipt_fields
from carline.utils.helpers import utc_today
from carline.utils.image_validation import validate_receipt_image
from carline.utils.prompts import build_extraction_request


logger = logging.getLogger(__name__)


class ReceiptService:
    """Runs the receipt extraction pipeline for one configuration."""

    def __init__(
        self,
        config: Settings,
        client: Optional[CompletionClient] = None,
        clock: Clock = utc_today,
    ) -> None:
        self.config = config
        self.clock = clock
        self._client = client
        if not config.openai_configured:
            logger.warning("OPENAI_API_KEY is not set. AI features will be disabled.")

    @property
    def configured(self) -> bool:
        return self.config.openai_configured

    def _get_client(self) -> CompletionClient:
        if self._client is None:
            self._client = CompletionClient.from_settings(self.config)
        return self._client

    def get_health_status(self) -> HealthStatus:
        """Report whether the completion service credential is present (no network call)."""
        return HealthStatus(
            status=ServiceStatus.AVAILABLE if self.configured else ServiceStatus.NOT_CONFIGURED,
            configured=self.configured,
        )

    async def process_receipt(self, image: str, car_id: Optional[UUID] = None) -> ReceiptResult:
        """Extract a scored expense record from a base64 receipt image.

        :raises InvalidImageFormat: if the image fails the base64/length check
        :raises ServiceNotConfigured: if no completion service credential is set
        :raises ReceiptProcessingFailed: for any completion, parse or validation failure
        """
        clean_image = validate_receipt_image(image)

        if not self.configured:
            logger.error("[receipt] processing requested but OPENAI_API_KEY is not set car_id=%s", car_id)
            raise ServiceNotConfigured()

        request = build_extraction_request(clean_image, self.config)
        sentry_breadcrumb("receipt", "extraction request built", data={"model": request.model}, config=self.config)

        try:
            raw_text = await self._get_client().complete(request)
            sentry_breadcrumb("receipt", "completion received", data={"chars": len(raw_text)}, config=self.config)
            extracted = parse_receipt_fields(raw_text)
            result = score_and_assemble(
                extracted,
                clock=self.clock,
                threshold=self.config.RECEIPT_CONFIDENCE_THRESHOLD,
            )
        except Exception as exc:
            logger.exception("[receipt] error processing receipt car_id=%s err=%s", car_id, exc)
            sentry_capture_exception(
                exc,
                tags={"stage": "receipt", "error_type": type(exc).__name__},
                config=self.config,
            )
            raise ReceiptProcessingFailed() from exc

        logger.info(
            "[receipt] processed car_id=%s confidence=%.2f needs_review=%s category=%s",
            car_id,
            result.confidence,
            result.needs_review,
            result.category.value,
        )
        return result

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
