"""OCR.space provider.

Multipart upload to ``https://api.ocr.space/parse/image`` with the API key
sent as a form field.  Engine 2 is used by default; it handles mixed
layouts and tables better than engine 1.
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

OCR_SPACE_URL = "https://api.ocr.space/parse/image"


class OCRSpaceOCRProvider(IOCRProvider):
    """OCR provider backed by the OCR.space REST API.

    Parameters
    ----------
    api_key:
        OCR.space API key.  Empty means "not configured".
    http_client:
        Optional shared ``httpx.AsyncClient``.
    language:
        OCR.space language code (``eng``, ``ger``, ...).
    engine:
        OCR.space engine number, 1 or 2.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        language: str = "eng",
        engine: int = 2,
        confidence: float = 0.92,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._language = language
        self._engine = engine
        self._confidence = confidence
        self._timeout = timeout
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IOCRProvider interface
    # ------------------------------------------------------------------

    async def extract_text(self, image: OCRImage) -> str:
        name = self.get_provider_name()
        if not self.is_available():
            raise NotConfiguredError("OCR.space API key not configured", provider_name=name)
        if image.image_data is None:
            raise SmartOCRError("No image data provided", provider_name=name)

        data = {
            "apikey": self._api_key,
            "language": self._language,
            "isOverlayRequired": "false",
            "detectOrientation": "true",
            "isTable": "true",
            "scale": "true",
            "OCREngine": str(self._engine),
        }
        files = {"file": (image.filename, image.image_data, image.content_type)}

        async with http_session(self._http, self._timeout) as client:
            response = await send(
                client,
                "POST",
                OCR_SPACE_URL,
                provider_name=name,
                label="OCR.space API",
                data=data,
                files=files,
            )
        result = parse_json(response, provider_name=name, label="OCR.space API")

        if result.get("IsErroredOnProcessing"):
            raise VendorProcessingError(
                f"OCR.space processing error: {_error_message(result)}",
                provider_name=name,
            )

        parsed = result.get("ParsedResults") or []
        text = (parsed[0].get("ParsedText") or "").strip() if parsed else ""
        if not text:
            raise NoTextDetectedError(provider_name=name)

        self._logger.debug("ocr_space_parsed", characters=len(text))
        return text

    def get_provider_name(self) -> str:
        return "OCR.space"

    def is_available(self) -> bool:
        return bool(self._api_key)

    def get_confidence(self) -> float:
        return self._confidence


def _error_message(result: dict) -> str:
    # ErrorMessage arrives as either a string or a list of strings.
    message = result.get("ErrorMessage")
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message)
    return message or "Unknown error"
