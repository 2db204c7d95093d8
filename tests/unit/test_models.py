"""Unit tests for the image/result models, media helpers and error hierarchy."""

from __future__ import annotations

import hashlib
import json

import pytest
from pydantic import ValidationError

from smartocr.models.ocr import ExtractionResult, OCRImage, ProviderFailure
from smartocr.models.policy import FallbackPolicy
from smartocr.utils.errors import (
    AllProvidersFailedError,
    ConfigurationError,
    NoTextDetectedError,
    NotConfiguredError,
    PollingTimeoutError,
    SmartOCRError,
    TransportError,
    VendorProcessingError,
)
from smartocr.utils.media import detect_media_type, to_base64, to_data_uri


# ======================================================================
# OCRImage
# ======================================================================


class TestOCRImage:
    def test_from_bytes_populates_metadata(self, png_bytes: bytes) -> None:
        image = OCRImage.from_bytes(png_bytes, filename="scan.png")

        assert image.filename == "scan.png"
        assert image.content_type == "image/png"
        assert image.file_size == len(png_bytes)
        assert image.image_hash == hashlib.sha256(png_bytes).hexdigest()
        assert image.image_data == png_bytes

    def test_explicit_content_type_wins(self, png_bytes: bytes) -> None:
        image = OCRImage.from_bytes(png_bytes, content_type="image/x-custom")
        assert image.content_type == "image/x-custom"

    def test_image_data_excluded_from_dump(self, png_bytes: bytes) -> None:
        dumped = OCRImage.from_bytes(png_bytes).model_dump()
        assert "image_data" not in dumped
        assert "_image_data" not in dumped
        assert set(dumped) == {"filename", "content_type", "file_size", "image_hash"}

    def test_frozen(self, sample_image: OCRImage) -> None:
        with pytest.raises(ValidationError):
            sample_image.filename = "other.png"

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OCRImage(filename="x", content_type="image/png", file_size=-1, image_hash="0")


# ======================================================================
# ExtractionResult
# ======================================================================


class TestExtractionResult:
    def test_json_serialisation(self) -> None:
        result = ExtractionResult(
            text="Hello World",
            confidence=0.92,
            service="OCR.space",
            processing_time_ms=12.5,
            failed_attempts=[ProviderFailure(service="OpenAI Vision", error="quota")],
        )

        payload = json.loads(result.model_dump_json())

        assert payload == {
            "text": "Hello World",
            "confidence": 0.92,
            "service": "OCR.space",
            "processing_time_ms": 12.5,
            "failed_attempts": [{"service": "OpenAI Vision", "error": "quota"}],
        }

    def test_failed_attempts_default_empty(self) -> None:
        result = ExtractionResult(text="x", confidence=1.0, service="s", processing_time_ms=0)
        assert result.failed_attempts == ()

    def test_failed_attempts_immutable(self) -> None:
        result = ExtractionResult(
            text="x",
            confidence=0.5,
            service="s",
            processing_time_ms=0,
            failed_attempts=[ProviderFailure(service="a", error="boom")],
        )

        assert isinstance(result.failed_attempts, tuple)
        with pytest.raises(AttributeError):
            result.failed_attempts.append(ProviderFailure(service="b", error="late"))

    @pytest.mark.parametrize("confidence", [-0.1, 1.01])
    def test_confidence_bounds(self, confidence: float) -> None:
        with pytest.raises(ValidationError):
            ExtractionResult(text="x", confidence=confidence, service="s", processing_time_ms=0)


# ======================================================================
# FallbackPolicy
# ======================================================================


class TestFallbackPolicy:
    def test_values(self) -> None:
        assert [p.value for p in FallbackPolicy] == [
            "chain",
            "chain_then_local",
            "local_if_unconfigured",
            "single",
        ]

    def test_string_lookup(self) -> None:
        assert FallbackPolicy("chain_then_local") is FallbackPolicy.CHAIN_THEN_LOCAL


# ======================================================================
# Media helpers
# ======================================================================


class TestMediaHelpers:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            (b"\x89PNG\r\n\x1a\n" + b"\x00" * 8, "image/png"),
            (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
            (b"\xff\xd8\xff\xe0" + b"\x00" * 8, "image/jpeg"),
            (b"GIF89a" + b"\x00" * 8, "image/gif"),
            (b"BM" + b"\x00" * 10, "image/bmp"),
            (b"II*\x00" + b"\x00" * 8, "image/tiff"),
            (b"MM\x00*" + b"\x00" * 8, "image/tiff"),
            (b"unknown bytes", "image/jpeg"),
        ],
    )
    def test_detect_media_type(self, header: bytes, expected: str) -> None:
        assert detect_media_type(header) == expected

    def test_to_base64_has_no_prefix(self) -> None:
        assert to_base64(b"abc") == "YWJj"

    def test_to_data_uri(self, png_bytes: bytes) -> None:
        uri = to_data_uri(png_bytes)
        assert uri.startswith("data:image/png;base64,")
        assert uri.endswith(to_base64(png_bytes))


# ======================================================================
# Error hierarchy
# ======================================================================


class TestErrors:
    @pytest.mark.parametrize(
        "error_cls",
        [
            NotConfiguredError,
            TransportError,
            VendorProcessingError,
            NoTextDetectedError,
            PollingTimeoutError,
            ConfigurationError,
        ],
    )
    def test_subclasses_base(self, error_cls: type[SmartOCRError]) -> None:
        assert issubclass(error_cls, SmartOCRError)

    def test_str_prefixes_provider(self) -> None:
        err = NoTextDetectedError(provider_name="OCR.space")
        assert str(err) == "[OCR.space] No text detected in image"
        assert err.message == "No text detected in image"

    def test_str_without_provider(self) -> None:
        assert str(NotConfiguredError()) == "OCR provider is not configured"

    def test_transport_error_status(self) -> None:
        err = TransportError("HTTP 503", provider_name="Google Cloud Vision", status_code=503)
        assert err.status_code == 503
        assert err.provider_name == "Google Cloud Vision"

    def test_polling_timeout_attempts(self) -> None:
        assert PollingTimeoutError(attempts=30).attempts == 30

    def test_all_providers_failed_message(self) -> None:
        err = AllProvidersFailedError(last_provider="Azure Computer Vision", last_error="boom")

        assert err.last_provider == "Azure Computer Vision"
        assert err.last_error == "boom"
        assert str(err) == (
            "Failed to extract text from image using any available service "
            "(last: Azure Computer Vision: boom)"
        )
