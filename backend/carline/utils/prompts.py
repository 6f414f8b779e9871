"""Default prompt and request construction for receipt extraction.

Keeping the prompt in a central location makes it easier to iterate
on its content and keeps it consistent with ``ExpenseCategory``. The
prompt asks for JSON only; the response parser still tolerates prose
or code fences around the object because models do not always comply.
"""

from __future__ import annotations

from textwrap import dedent

from carline.core.config import Settings
from carline.models.enums import ExpenseCategory
from carline.models.schemas import ExtractionRequest

IMAGE_MEDIA_TYPE = "image/jpeg"


def get_receipt_extraction_prompt() -> str:
    """Return the instruction sent alongside every receipt image.

    The model is asked for a fixed set of keys, ``null`` for anything it
    cannot read, the receipt total (not change given) as the amount, and
    its best guess of the category from merchant and items.
    """
    categories = ", ".join(f'"{value}"' for value in ExpenseCategory.values())
    return dedent(
        f"""
        Analyze this receipt image and extract the following information in JSON format:
        {{
          "amount": number (total amount),
          "date": "YYYY-MM-DD" format,
          "merchant": string (store/company name),
          "category": string (one of: {categories}),
          "description": string (brief description),
          "items": array of items if visible, each {{"name": string, "quantity": number, "price": number}}
        }}

        Important:
        - Return only valid JSON
        - If you can't find a field, use null
        - For amount, use the total (not including change)
        - Guess the most likely category based on merchant/items
        - Be confident in your extraction
        """
    ).strip()


def build_image_url(clean_image: str) -> str:
    """Wrap prefix-free base64 into a data URL the completion service accepts."""
    return f"data:{IMAGE_MEDIA_TYPE};base64,{clean_image}"


def build_extraction_request(clean_image: str, config: Settings) -> ExtractionRequest:
    """Assemble the outbound request for an already validated image."""
    return ExtractionRequest(
        model=config.RECEIPT_MODEL,
        prompt=get_receipt_extraction_prompt(),
        image_url=build_image_url(clean_image),
        max_tokens=config.RECEIPT_MAX_TOKENS,
        temperature=config.RECEIPT_TEMPERATURE,
    )
