"""HTTP plumbing shared by the vendor adapters.

Adapters accept an injected ``httpx.AsyncClient`` for connection pooling and
testability (``httpx.MockTransport``).  When none is injected they open a
short-lived client for the duration of one call.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from smartocr.utils.errors import TransportError, VendorProcessingError

DEFAULT_TIMEOUT = 30.0


@asynccontextmanager
async def http_session(
    client: httpx.AsyncClient | None,
    timeout: float = DEFAULT_TIMEOUT,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a fresh one that is closed afterwards."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    provider_name: str,
    label: str,
    **kwargs: Any,
) -> httpx.Response:
    """Send one request; network failures, bad URLs and non-2xx raise TransportError."""
    try:
        response = await client.request(method, url, **kwargs)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise TransportError(
            f"{label} request failed: {exc}",
            provider_name=provider_name,
        ) from exc

    if not response.is_success:
        raise TransportError(
            f"{label} error: {response.status_code} {response.reason_phrase}",
            provider_name=provider_name,
            status_code=response.status_code,
        )
    return response


def parse_json(response: httpx.Response, *, provider_name: str, label: str) -> dict[str, Any]:
    """Decode a JSON object body or raise VendorProcessingError."""
    try:
        body = response.json()
    except ValueError as exc:
        raise VendorProcessingError(
            f"{label} returned a non-JSON body",
            provider_name=provider_name,
        ) from exc
    if not isinstance(body, dict):
        raise VendorProcessingError(
            f"{label} returned {type(body).__name__} instead of a JSON object",
            provider_name=provider_name,
        )
    return body
