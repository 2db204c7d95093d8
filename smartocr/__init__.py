"""smartocr -- multi-provider OCR client with a sequential fallback chain.

Typical use::

    settings = Settings()
    async with httpx.AsyncClient() as client:
        service = build_ocr_service(settings, load_config(settings=settings), client)
        result = await service.extract_text(OCRImage.from_bytes(data))
"""

from smartocr.config import Settings, load_config
from smartocr.factory import build_ocr_providers, build_ocr_service
from smartocr.models import ExtractionResult, FallbackPolicy, OCRImage, ProviderFailure
from smartocr.services import OCRService

__version__ = "0.1.0"

__all__ = [
    "ExtractionResult",
    "FallbackPolicy",
    "OCRImage",
    "OCRService",
    "ProviderFailure",
    "Settings",
    "build_ocr_providers",
    "build_ocr_service",
    "load_config",
]
