"""Abstract base class for OCR providers.

Defines the contract every vendor adapter implements.  The orchestrator
(smartocr/services/ocr_service.py) only ever talks to this interface, so
adding a vendor means adding one concrete class and one factory entry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from smartocr.models.ocr import OCRImage


# Concrete implementations: OCRSpaceOCRProvider, GoogleVisionOCRProvider,
# OpenAIVisionOCRProvider, AzureVisionOCRProvider, TesseractOCRProvider.
# Located in: smartocr/providers/
class IOCRProvider(ABC):
    """Contract for services that extract text from a single image.

    Every concrete provider must be able to:
    * Report its availability from configuration alone (no network call).
    * Accept an ``OCRImage`` and return the extracted text.
    * Declare the fixed confidence the orchestrator attaches to its results.
    """

    @abstractmethod
    async def extract_text(self, image: OCRImage) -> str:
        """Run OCR on *image* and return the extracted text.

        Parameters
        ----------
        image:
            The image to process.  ``image.image_data`` contains the raw
            bytes; ``image.content_type`` indicates the format.

        Returns
        -------
        str
            The extracted text, never empty.

        Raises
        ------
        smartocr.utils.errors.NotConfiguredError
            If called while :meth:`is_available` is false.
        smartocr.utils.errors.TransportError
            If the vendor returns a non-success HTTP status.
        smartocr.utils.errors.VendorProcessingError
            If the vendor reports an internal processing failure.
        smartocr.utils.errors.NoTextDetectedError
            If the response carries no text.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"OCR.space"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the required credentials/config are non-empty.

        Must not perform network I/O.
        """

    @abstractmethod
    def get_confidence(self) -> float:
        """Return the fixed confidence score (0-1) asserted for this vendor."""

    def is_local(self) -> bool:
        """Return ``True`` for engines that run in-process rather than over HTTP."""
        return False
