"""OCR provider implementations.

Five implementations of IOCRProvider, assembled in priority order by
smartocr/factory.py:
    1. OCRSpaceOCRProvider      -- multipart upload, key as a form field.
    2. OpenAIVisionOCRProvider  -- chat completion with a base64 data URI.
    3. GoogleVisionOCRProvider  -- JSON + base64, key as a query parameter.
    4. AzureVisionOCRProvider   -- raw bytes, then submit-and-poll.
    5. TesseractOCRProvider     -- local engine, used only when the fallback
                                   policy allows it.
"""

from smartocr.providers.azure_vision_provider import AzureVisionOCRProvider
from smartocr.providers.google_vision_provider import GoogleVisionOCRProvider
from smartocr.providers.ocr_space_provider import OCRSpaceOCRProvider
from smartocr.providers.openai_vision_provider import OpenAIVisionOCRProvider
from smartocr.providers.tesseract_provider import TesseractOCRProvider

__all__ = [
    "AzureVisionOCRProvider",
    "GoogleVisionOCRProvider",
    "OCRSpaceOCRProvider",
    "OpenAIVisionOCRProvider",
    "TesseractOCRProvider",
]
