"""OpenAI vision provider.

Uses the official ``openai`` async SDK to send the image as a base64 data
URI alongside a transcription prompt.  The model is told to copy text
verbatim, never summarise, and ``temperature=0`` keeps output stable
across retries by the caller.
"""

from __future__ import annotations

import httpx
import openai

from smartocr.interfaces.ocr_provider import IOCRProvider
from smartocr.models.ocr import OCRImage
from smartocr.providers._http import DEFAULT_TIMEOUT
from smartocr.utils.errors import (
    NoTextDetectedError,
    NotConfiguredError,
    SmartOCRError,
    TransportError,
    VendorProcessingError,
)
from smartocr.utils.logging import get_logger
from smartocr.utils.media import to_data_uri

_TRANSCRIBE_PROMPT = """\
Extract ALL text from this image.
Preserve the exact formatting, line breaks and structure, including headers,
labels, bullet markers and any inline markup such as ##Heading## tags.
Do not summarise, translate, correct or interpret anything: return only the
raw text exactly as it appears. If there is no text, return an empty reply."""


class OpenAIVisionOCRProvider(IOCRProvider):
    """OCR provider backed by an OpenAI vision-capable chat model.

    Parameters
    ----------
    api_key:
        OpenAI API key.  Empty means "not configured".
    http_client:
        Optional shared ``httpx.AsyncClient`` handed to the SDK.
    client:
        Pre-built ``openai.AsyncOpenAI``; built lazily from *api_key* when omitted.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        client: openai.AsyncOpenAI | None = None,
        model: str = "gpt-4o",
        max_tokens: int = 4000,
        confidence: float = 0.95,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._confidence = confidence
        self._timeout = timeout
        self._logger = get_logger(__name__)

    async def extract_text(self, image: OCRImage) -> str:
        name = self.get_provider_name()
        if not self.is_available():
            raise NotConfiguredError("OpenAI API key not configured", provider_name=name)
        if image.image_data is None:
            raise SmartOCRError("No image data provided", provider_name=name)

        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": _TRANSCRIBE_PROMPT},
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": to_data_uri(image.image_data, image.content_type),
                                    "detail": "high",
                                },
                            },
                        ],
                    }
                ],
                max_tokens=self._max_tokens,
                temperature=0,
            )
        except openai.APIStatusError as exc:
            raise TransportError(
                f"OpenAI API error: {exc.status_code} {exc.message}",
                provider_name=name,
                status_code=exc.status_code,
            ) from exc
        except openai.APIConnectionError as exc:
            raise TransportError(
                f"OpenAI API request failed: {exc}",
                provider_name=name,
            ) from exc
        except openai.APIError as exc:
            raise VendorProcessingError(
                f"OpenAI API error: {exc}",
                provider_name=name,
            ) from exc

        choices = response.choices or []
        content = choices[0].message.content if choices else None
        text = (content or "").strip()
        if not text:
            raise NoTextDetectedError("No text extracted from image", provider_name=name)

        self._logger.debug("openai_vision_parsed", model=self._model, characters=len(text))
        return text

    def get_provider_name(self) -> str:
        return "OpenAI Vision"

    def is_available(self) -> bool:
        return bool(self._api_key)

    def get_confidence(self) -> float:
        return self._confidence

    def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            self._client = openai.AsyncOpenAI(
                api_key=self._api_key,
                http_client=self._http,
                timeout=self._timeout,
                max_retries=0,  # one HTTP call per provider attempt
            )
        return self._client
