#!/usr/bin/env python
"""Run the receipt extraction pipeline against a local image file.

Usage:
  python backend/scripts/scan_receipt.py photo.jpg [--car-id <UUID>] [--json]

Requires OPENAI_API_KEY (environment or .env). Exit codes:
  0  receipt processed, result printed
  1  image rejected or processing failed
  2  service not configured
"""
from __future__ import annotations

import argparse
import asyncio
import base64
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence
from uuid import UUID

# Make `import carline` work when run as a plain script from the repo root
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from carline.core.config import Settings  # noqa: E402
from carline.core.exceptions import ReceiptProcessingError, ServiceNotConfigured  # noqa: E402
from carline.models.schemas import ReceiptResult  # noqa: E402
from carline.services.receipt_service import ReceiptService  # noqa: E402

logger = logging.getLogger(__name__)


def encode_image(path: Path) -> str:
    return base64.b64encode(path.read_bytes()).decode("ascii")


async def scan(service: ReceiptService, image: str, car_id: Optional[UUID]) -> ReceiptResult:
    try:
        return await service.process_receipt(image, car_id=car_id)
    finally:
        await service.aclose()


def main(argv: Optional[Sequence[str]] = None, service: Optional[ReceiptService] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract expense data from a receipt photo")
    parser.add_argument("image", type=Path, help="Path to the receipt image (jpeg/png)")
    parser.add_argument("--car-id", type=UUID, default=None, help="Car the expense belongs to (logged only)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    if not args.image.is_file():
        print(f"Image not found: {args.image}", file=sys.stderr)
        return 1

    service = service or ReceiptService(Settings())
    try:
        result = asyncio.run(scan(service, encode_image(args.image), args.car_id))
    except ServiceNotConfigured as exc:
        print(exc.public_message, file=sys.stderr)
        return 2
    except ReceiptProcessingError as exc:
        print(exc.public_message, file=sys.stderr)
        return 1

    if args.json:
        json.dump(result.model_dump(mode="json", by_alias=True), sys.stdout, indent=2, ensure_ascii=False)
        print()
    else:
        print(f"amount:      {result.amount:.2f}")
        print(f"date:        {result.date}")
        print(f"merchant:    {result.merchant or '-'}")
        print(f"category:    {result.category.value}")
        print(f"description: {result.description or '-'}")
        print(f"confidence:  {result.confidence:.0%}")
        print(f"review:      {'needed' if result.needs_review else 'not needed'}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
