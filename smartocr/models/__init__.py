"""Pydantic models for OCR input and output."""

from smartocr.models.ocr import ExtractionResult, OCRImage, ProviderFailure
from smartocr.models.policy import FallbackPolicy

__all__ = ["ExtractionResult", "FallbackPolicy", "OCRImage", "ProviderFailure"]
