"""Public interface definitions for OCR providers.

Every vendor API is accessed exclusively through :class:`IOCRProvider`.
Concrete adapters live in ``smartocr/providers/`` and are assembled into an
ordered chain by ``smartocr/factory.py``.  Unit tests inject
``MagicMock(spec=IOCRProvider)`` stubs instead of real vendors.
"""

from smartocr.interfaces.ocr_provider import IOCRProvider

__all__ = ["IOCRProvider"]
