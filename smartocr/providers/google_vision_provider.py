"""Google Cloud Vision provider.

Sends the image base64-encoded inside a JSON ``images:annotate`` request
with a single ``TEXT_DETECTION`` feature.  The API key travels as the
``key`` query parameter.  The first text annotation holds the full-page
text; the rest are per-word boxes and are ignored.
"""

from __future__ import annotations

import httpx

from smartocr.interfaces.ocr_provider import IOCRProvider
from smartocr.models.ocr import OCRImage
from smartocr.providers._http import DEFAULT_TIMEOUT, http_session, parse_json, send
from smartocr.utils.errors import (
    NoTextDetectedError,
    NotConfiguredError,
    SmartOCRError,
    VendorProcessingError,
)
from smartocr.utils.logging import get_logger
from smartocr.utils.media import to_base64

GOOGLE_VISION_URL = "https://vision.googleapis.com/v1/images:annotate"


class GoogleVisionOCRProvider(IOCRProvider):
    """OCR provider backed by the Google Cloud Vision REST API."""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        confidence: float = 0.95,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._confidence = confidence
        self._timeout = timeout
        self._logger = get_logger(__name__)

    async def extract_text(self, image: OCRImage) -> str:
        name = self.get_provider_name()
        if not self.is_available():
            raise NotConfiguredError("Google Vision API key not configured", provider_name=name)
        if image.image_data is None:
            raise SmartOCRError("No image data provided", provider_name=name)

        payload = {
            "requests": [
                {
                    "image": {"content": to_base64(image.image_data)},
                    "features": [{"type": "TEXT_DETECTION", "maxResults": 1}],
                }
            ]
        }

        async with http_session(self._http, self._timeout) as client:
            response = await send(
                client,
                "POST",
                GOOGLE_VISION_URL,
                provider_name=name,
                label="Google Vision API",
                params={"key": self._api_key},
                json=payload,
            )
        result = parse_json(response, provider_name=name, label="Google Vision API")

        responses = result.get("responses") or [{}]
        first = responses[0] if isinstance(responses, list) else None
        if not isinstance(first, dict):
            raise VendorProcessingError(
                "Google Vision returned an unexpected response shape",
                provider_name=name,
            )

        # Per-image failures come back inside a 200 response.
        error = first.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise VendorProcessingError(
                f"Google Vision processing error: {message or 'Unknown error'}",
                provider_name=name,
            )

        annotations = first.get("textAnnotations") or []
        head = annotations[0] if isinstance(annotations, list) and annotations else {}
        text = head.get("description") if isinstance(head, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise NoTextDetectedError(provider_name=name)

        self._logger.debug("google_vision_parsed", annotations=len(annotations))
        return text

    def get_provider_name(self) -> str:
        return "Google Cloud Vision"

    def is_available(self) -> bool:
        return bool(self._api_key)

    def get_confidence(self) -> float:
        return self._confidence
