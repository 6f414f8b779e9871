"""API routes for AI receipt processing.

Authentication and the car ownership check are performed by the
gateway in front of this service; ``carId`` is accepted as part of the
request envelope and only used for log correlation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from carline.api.dependencies import get_receipt_service
from carline.models.schemas import HealthStatus, ProcessReceiptRequest, ReceiptResult
from carline.services.receipt_service import ReceiptService

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post(
    "/process-receipt",
    response_model=ReceiptResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def process_receipt(
    payload: ProcessReceiptRequest,
    service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptResult:
    """Extract amount, date, merchant and category from a receipt photo."""
    return await service.process_receipt(payload.image, car_id=payload.car_id)


@router.get("/health", response_model=HealthStatus)
async def ai_health(service: ReceiptService = Depends(get_receipt_service)) -> HealthStatus:
    """Report whether the completion service is configured."""
    return service.get_health_status()
