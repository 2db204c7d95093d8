"""Custom exception hierarchy for smartocr.

All application exceptions inherit from :class:`SmartOCRError`, which
carries an optional ``provider_name`` so error handlers can identify which
vendor (e.g. "OCR.space", "Azure Computer Vision") caused the failure.

    SmartOCRError  (base -- catch-all for any smartocr error)
    +-- NotConfiguredError       (missing credentials / no provider configured)
    +-- TransportError           (vendor returned a non-success HTTP status)
    +-- VendorProcessingError    (vendor reported an internal processing failure)
    +-- NoTextDetectedError      (call succeeded but the result field was empty)
    +-- PollingTimeoutError      (async vendor never reached a terminal status)
    +-- AllProvidersFailedError  (orchestrator exhausted every provider)
    +-- ConfigurationError       (invalid configuration at startup)

Adapters raise the first five; the orchestrator treats every one of them as
"try the next provider" and only surfaces :class:`AllProvidersFailedError`
or :class:`NotConfiguredError` to the caller.
"""

from __future__ import annotations


class SmartOCRError(Exception):
    """Base exception for all smartocr errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[OCR.space] No text detected in image``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Adapter-level errors
# ---------------------------------------------------------------------------

class NotConfiguredError(SmartOCRError):
    """Raised when a provider lacks credentials, or no provider is configured."""

    def __init__(
        self,
        message: str = "OCR provider is not configured",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class TransportError(SmartOCRError):
    """Raised when a vendor HTTP call returns a non-success status."""

    def __init__(
        self,
        message: str = "Vendor API request failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self._status_code = status_code
        super().__init__(message=message, provider_name=provider_name)

    @property
    def status_code(self) -> int | None:
        return self._status_code


class VendorProcessingError(SmartOCRError):
    """Raised when the vendor accepts the request but reports a processing failure."""

    def __init__(
        self,
        message: str = "Vendor failed to process the image",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NoTextDetectedError(SmartOCRError):
    """Raised when a call succeeds but the expected text field is absent or empty."""

    def __init__(
        self,
        message: str = "No text detected in image",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PollingTimeoutError(SmartOCRError):
    """Raised when an asynchronous vendor never reports a terminal status."""

    def __init__(
        self,
        message: str = "Vendor analysis did not complete in time",
        provider_name: str | None = None,
        attempts: int = 0,
    ) -> None:
        self._attempts = attempts
        super().__init__(message=message, provider_name=provider_name)

    @property
    def attempts(self) -> int:
        return self._attempts


# ---------------------------------------------------------------------------
# Orchestration / configuration errors
# ---------------------------------------------------------------------------

class AllProvidersFailedError(SmartOCRError):
    """Raised by the orchestrator once every configured provider has failed.

    ``last_provider`` and ``last_error`` name the final failure in the chain;
    earlier failures are available on the log stream only.
    """

    def __init__(
        self,
        last_provider: str,
        last_error: str,
    ) -> None:
        self._last_provider = last_provider
        self._last_error = last_error
        super().__init__(
            message=(
                "Failed to extract text from image using any available service "
                f"(last: {last_provider}: {last_error})"
            ),
        )

    @property
    def last_provider(self) -> str:
        return self._last_provider

    @property
    def last_error(self) -> str:
        return self._last_error


class ConfigurationError(SmartOCRError):
    """Raised when configuration is invalid at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
