import io

import pytest
from PIL import Image

from portfolio.services.validator import validate_image


def make_image(fmt, size=(32, 16)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "fmt, mime_type, extension",
    [
        ("PNG", "image/png", ".png"),
        ("JPEG", "image/jpeg", ".jpg"),
        ("GIF", "image/gif", ".gif"),
        ("WEBP", "image/webp", ".webp"),
    ],
)
def test_accepts_allowed_images(fmt, mime_type, extension):
    result = validate_image(make_image(fmt))

    assert result.is_valid is True
    assert result.mime_type == mime_type
    assert result.extension == extension
    assert (result.width, result.height) == (32, 16)


def test_rejects_empty_file():
    result = validate_image(b"")
    assert result.is_valid is False
    assert result.error == "No file provided"


def test_rejects_oversized_file():
    result = validate_image(b"x" * (5 * 1024 * 1024 + 1))
    assert result.is_valid is False
    assert result.error == "File too large. Maximum size is 5MB."


def test_rejects_script():
    result = validate_image(b"#!/bin/bash\nrm -rf /\n")
    assert result.is_valid is False
    assert result.error == "Invalid file type. Only images are allowed."


def test_rejects_non_web_image_format():
    result = validate_image(make_image("BMP"))
    assert result.is_valid is False
    assert "Invalid file type" in result.error


def test_rejects_corrupted_png():
    result = validate_image(make_image("PNG")[:40])
    assert result.is_valid is False
    assert result.mime_type == "image/png"
    assert result.error == "Image file is corrupted or unreadable."
