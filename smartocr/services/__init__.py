"""Service layer -- the OCR fallback orchestrator."""

from smartocr.services.ocr_service import OCRService

__all__ = ["OCRService"]
