"""Shared pytest fixtures for the smartocr test suite."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from smartocr.config.settings import Settings
from smartocr.interfaces.ocr_provider import IOCRProvider
from smartocr.models.ocr import OCRImage


def make_png_bytes(size: tuple[int, int] = (64, 32)) -> bytes:
    img = Image.new("RGB", size, (255, 255, 255))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def make_settings(**overrides) -> Settings:
    """Build Settings that ignore the real environment's .env file.

    All keys default to empty so no vendor is configured unless a test
    opts in explicitly.
    """
    defaults = {
        "ocrspace_api_key": "",
        "google_vision_api_key": "",
        "openai_api_key": "",
        "azure_vision_api_key": "",
        "azure_vision_endpoint": "",
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def make_ocr_provider(
    name: str,
    *,
    available: bool = True,
    confidence: float = 0.9,
    text: str = "Hello World",
    raises: Exception | None = None,
    local: bool = False,
) -> IOCRProvider:
    """Create a mock OCR provider with configurable behaviour."""
    mock = MagicMock(spec=IOCRProvider)
    mock.get_provider_name.return_value = name
    mock.is_available.return_value = available
    mock.get_confidence.return_value = confidence
    mock.is_local.return_value = local

    if raises is not None:
        mock.extract_text = AsyncMock(side_effect=raises)
    else:
        mock.extract_text = AsyncMock(return_value=text)
    return mock


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def sample_image(png_bytes: bytes) -> OCRImage:
    return OCRImage.from_bytes(png_bytes, filename="notes.png")


@pytest.fixture
def settings_factory():
    """Return :func:`make_settings` for tests that need custom Settings."""
    return make_settings


@pytest.fixture
def provider_factory():
    """Return :func:`make_ocr_provider` for building stub providers."""
    return make_ocr_provider
