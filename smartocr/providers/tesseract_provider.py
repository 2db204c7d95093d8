"""Local Tesseract OCR engine.

Wraps pytesseract so the orchestrator can fall back to an in-process engine
when every external vendor fails or none is configured (see
:class:`~smartocr.models.policy.FallbackPolicy`).  Tesseract calls block,
so each extraction runs in a worker thread to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import io
import time

import pytesseract
from PIL import Image

from smartocr.interfaces.ocr_provider import IOCRProvider
from smartocr.models.ocr import OCRImage
from smartocr.utils.errors import NoTextDetectedError, SmartOCRError, VendorProcessingError
from smartocr.utils.logging import get_logger


class TesseractOCRProvider(IOCRProvider):
    """OCR provider backed by Google Tesseract via pytesseract.

    Available only when the ``tesseract`` binary is installed and on PATH.
    Its fixed confidence is lower than the cloud vendors' because it
    struggles with photos, skew and handwriting.
    """

    def __init__(self, language: str = "eng", confidence: float = 0.70) -> None:
        self._language = language
        self._confidence = confidence
        self._logger = get_logger(__name__)

    async def extract_text(self, image: OCRImage) -> str:
        name = self.get_provider_name()
        if image.image_data is None:
            raise SmartOCRError("No image data provided", provider_name=name)

        start = time.perf_counter()
        try:
            text = await asyncio.to_thread(self._run_tesseract, image.image_data)
        except (pytesseract.TesseractError, OSError) as exc:
            raise VendorProcessingError(
                f"Tesseract OCR failed: {exc}",
                provider_name=name,
            ) from exc

        if not text:
            raise NoTextDetectedError(provider_name=name)

        self._logger.info(
            "tesseract_extraction_complete",
            language=self._language,
            characters=len(text),
            processing_time=round(time.perf_counter() - start, 3),
        )
        return text

    def get_provider_name(self) -> str:
        return "Tesseract (Local)"

    def is_available(self) -> bool:
        """Check that the Tesseract binary can be executed."""
        try:
            pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError):
            return False
        return True

    def get_confidence(self) -> float:
        return self._confidence

    def is_local(self) -> bool:
        return True

    def _run_tesseract(self, image_bytes: bytes) -> str:
        with Image.open(io.BytesIO(image_bytes)) as img:
            text = pytesseract.image_to_string(img.convert("RGB"), lang=self._language)
        return text.strip()
