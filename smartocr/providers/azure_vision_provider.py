"""Azure Computer Vision (Read API v3.2) provider.

The Read API is asynchronous: the image is submitted as raw bytes, Azure
answers ``202 Accepted`` with an ``Operation-Location`` header, and the
result must be polled from that URL until the operation reaches a terminal
status.

    submit ──► poll ──► notStarted / running ──► (sleep, poll again)
                 │
                 ├──► succeeded ──► join readResults[*].lines[*].text
                 └──► failed    ──► VendorProcessingError

Polling is bounded: after ``max_poll_attempts`` non-terminal answers the
adapter gives up with :class:`PollingTimeoutError` and performs no further
requests.  There is no cancellation hook; the attempt cap is the only exit.
"""

from __future__ import annotations

import asyncio

import httpx

from smartocr.interfaces.ocr_provider import IOCRProvider
from smartocr.models.ocr import OCRImage
from smartocr.providers._http import DEFAULT_TIMEOUT, http_session, parse_json, send
from smartocr.utils.errors import (
    NoTextDetectedError,
    NotConfiguredError,
    PollingTimeoutError,
    SmartOCRError,
    VendorProcessingError,
)
from smartocr.utils.logging import get_logger

_READ_PATH = "/vision/v3.2/read/analyze"
_POLL_INTERVAL = 1.0  # seconds between polls
_MAX_POLL_ATTEMPTS = 30
_PENDING_STATUSES = frozenset({"notStarted", "running"})


class AzureVisionOCRProvider(IOCRProvider):
    """OCR provider backed by the Azure Computer Vision Read API.

    Parameters
    ----------
    api_key:
        Subscription key sent as ``Ocp-Apim-Subscription-Key``.
    endpoint:
        Resource endpoint, e.g. ``https://myres.cognitiveservices.azure.com``.
    http_client:
        Optional shared ``httpx.AsyncClient``.
    poll_interval:
        Seconds to wait before each poll (default 1.0).
    max_poll_attempts:
        Number of polls before giving up (default 30).
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        http_client: httpx.AsyncClient | None = None,
        *,
        poll_interval: float = _POLL_INTERVAL,
        max_poll_attempts: int = _MAX_POLL_ATTEMPTS,
        confidence: float = 0.95,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint.rstrip("/")
        self._http = http_client
        self._poll_interval = poll_interval
        self._max_poll_attempts = max_poll_attempts
        self._confidence = confidence
        self._timeout = timeout
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IOCRProvider interface
    # ------------------------------------------------------------------

    async def extract_text(self, image: OCRImage) -> str:
        name = self.get_provider_name()
        if not self.is_available():
            raise NotConfiguredError(
                "Azure Vision API key or endpoint not configured",
                provider_name=name,
            )
        if image.image_data is None:
            raise SmartOCRError("No image data provided", provider_name=name)

        async with http_session(self._http, self._timeout) as client:
            operation_url = await self._submit(client, image.image_data)
            result = await self._poll(client, operation_url)

        return self._parse_read_result(result)

    def get_provider_name(self) -> str:
        return "Azure Computer Vision"

    def is_available(self) -> bool:
        return bool(self._api_key and self._endpoint)

    def get_confidence(self) -> float:
        return self._confidence

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _submit(self, client: httpx.AsyncClient, image_bytes: bytes) -> str:
        """POST the raw bytes and return the operation URL to poll."""
        name = self.get_provider_name()
        response = await send(
            client,
            "POST",
            f"{self._endpoint}{_READ_PATH}",
            provider_name=name,
            label="Azure Vision API",
            headers={
                "Ocp-Apim-Subscription-Key": self._api_key,
                "Content-Type": "application/octet-stream",
            },
            content=image_bytes,
        )
        operation_url = response.headers.get("Operation-Location")
        if not operation_url:
            raise VendorProcessingError(
                "No operation location returned from Azure",
                provider_name=name,
            )
        self._logger.debug("azure_read_submitted", operation=operation_url)
        return operation_url

    async def _poll(self, client: httpx.AsyncClient, operation_url: str) -> dict:
        """Poll *operation_url* until a terminal status or the attempt cap."""
        name = self.get_provider_name()
        status = None
        for attempt in range(1, self._max_poll_attempts + 1):
            await asyncio.sleep(self._poll_interval)

            response = await send(
                client,
                "GET",
                operation_url,
                provider_name=name,
                label="Azure Vision result",
                headers={"Ocp-Apim-Subscription-Key": self._api_key},
            )
            result = parse_json(response, provider_name=name, label="Azure Vision result")
            status = result.get("status")

            if status == "succeeded":
                self._logger.debug("azure_read_succeeded", attempts=attempt)
                return result
            if status == "failed":
                raise VendorProcessingError("Azure Vision analysis failed", provider_name=name)
            if status not in _PENDING_STATUSES:
                raise VendorProcessingError(
                    f"Azure Vision returned unexpected status: {status!r}",
                    provider_name=name,
                )

        self._logger.warning(
            "azure_read_poll_exhausted",
            attempts=self._max_poll_attempts,
            last_status=status,
        )
        raise PollingTimeoutError(
            f"Azure Vision analysis timed out after {self._max_poll_attempts} polls",
            provider_name=name,
            attempts=self._max_poll_attempts,
        )

    def _parse_read_result(self, result: dict) -> str:
        pages = (result.get("analyzeResult") or {}).get("readResults") or []
        lines = [
            line.get("text", "")
            for page in pages
            for line in page.get("lines") or []
        ]
        text = "\n".join(lines).strip()
        if not text:
            raise NoTextDetectedError(provider_name=self.get_provider_name())
        return text
