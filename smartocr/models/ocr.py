"""Image input and extraction result models.

Pydantic v2 models with frozen config: an :class:`OCRImage` goes in, an
:class:`ExtractionResult` comes out.  Neither is mutated after creation,
so results can be handed to any number of callers without copying.
"""

from __future__ import annotations

import hashlib

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from smartocr.utils.media import detect_media_type


class OCRImage(BaseModel):
    """A single in-memory image supplied by the caller.

    Carries metadata in serialised form; the raw bytes live in a private
    attribute so ``model_dump()`` output stays small.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str
    file_size: int = Field(ge=0)
    # SHA-256 hex digest of the raw bytes.
    image_hash: str
    _image_data: bytes | None = PrivateAttr(default=None)

    @property
    def image_data(self) -> bytes | None:
        """Return the raw image bytes (excluded from serialisation)."""
        return self._image_data

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        filename: str = "image",
        content_type: str | None = None,
    ) -> OCRImage:
        """Build an image from raw bytes, sniffing the MIME type if not given."""
        image = cls(
            filename=filename,
            content_type=content_type or detect_media_type(data),
            file_size=len(data),
            image_hash=hashlib.sha256(data).hexdigest(),
        )
        # Private attributes are not settable through the constructor.
        image.__pydantic_private__["_image_data"] = data
        return image


class ProviderFailure(BaseModel):
    """One provider that failed before the orchestrator found a success."""

    model_config = ConfigDict(frozen=True)

    service: str
    error: str


class ExtractionResult(BaseModel):
    """The result of one successful extraction.

    ``confidence`` is the provider's fixed heuristic score, not a measured
    accuracy.  ``processing_time_ms`` is wall-clock time from the start of
    the orchestrator call, so it includes time spent on failed providers.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    service: str
    processing_time_ms: float = Field(ge=0.0)
    failed_attempts: tuple[ProviderFailure, ...] = ()
