from __future__ import annotations

import pytest

from carline.core.exceptions import InvalidImageFormat
from carline.utils.image_validation import (
    MIN_BASE64_LENGTH,
    clean_base64,
    is_valid_base64_image,
    validate_receipt_image,
)


def test_plain_base64_is_returned_unchanged(valid_image):
    assert validate_receipt_image(valid_image) == valid_image


@pytest.mark.parametrize("subtype", ["jpeg", "png", "webp", "heic"])
def test_data_url_prefix_is_stripped(valid_image, subtype):
    assert validate_receipt_image(f"data:image/{subtype};base64,{valid_image}") == valid_image


def test_exact_minimum_length_is_accepted():
    image = "A" * MIN_BASE64_LENGTH
    assert validate_receipt_image(image) == image


@pytest.mark.parametrize(
    "image",
    [
        "",
        "invalid-base64",
        "A" * (MIN_BASE64_LENGTH - 1),
        "data:image/jpeg;base64," + "A" * (MIN_BASE64_LENGTH - 1),
    ],
)
def test_short_payloads_are_rejected(image):
    with pytest.raises(InvalidImageFormat):
        validate_receipt_image(image)


@pytest.mark.parametrize(
    "image",
    [
        "A" * 150 + "-_",  # url-safe alphabet is not accepted
        "A" * 150 + " ",
        "A" * 75 + "\n" + "A" * 75,
        "A" * 150 + "===",  # at most two pad characters
        "A" * 75 + "==" + "A" * 75,  # padding only at the end
        "data:application/pdf;base64," + "A" * 150,  # only image data URLs are stripped
    ],
)
def test_non_base64_characters_are_rejected(image):
    assert is_valid_base64_image(image) is False
    with pytest.raises(InvalidImageFormat):
        validate_receipt_image(image)


def test_non_string_input_is_rejected():
    assert is_valid_base64_image(None) is False  # type: ignore[arg-type]


def test_clean_base64_only_strips_leading_prefix(valid_image):
    assert clean_base64(valid_image) == valid_image
    assert clean_base64("data:image/png;base64,abc") == "abc"


def test_invalid_image_error_is_a_client_error():
    err = InvalidImageFormat()
    assert err.status_code == 400
    assert "base64" in err.public_message
