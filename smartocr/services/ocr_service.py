"""OCR orchestration service with a sequential provider fallback chain.

Holds a priority-ordered tuple of configured providers and tries each in
turn until one returns text.  The first success wins outright; there is no
confidence gate, because every vendor's confidence is a fixed heuristic.

    TryingProvider[0] ──ok──► Success
          │fail
          ▼
    TryingProvider[1] ──ok──► Success
          │fail
          ▼
         ...        ──fail──► AllFailed

Providers are never called concurrently: once one succeeds, the remaining
vendors are not billed.  The provider tuple is fixed at construction, so a
single service instance can serve concurrent callers without locking.
"""

from __future__ import annotations

import time
from collections.abc import Sequence

from smartocr.interfaces.ocr_provider import IOCRProvider
from smartocr.models.ocr import ExtractionResult, OCRImage, ProviderFailure
from smartocr.models.policy import FallbackPolicy
from smartocr.utils.errors import AllProvidersFailedError, NotConfiguredError, SmartOCRError
from smartocr.utils.logging import get_logger


class OCRService:
    """Orchestrates OCR extraction across multiple providers.

    Parameters
    ----------
    providers:
        Adapters in preference order.  Adapters whose
        :meth:`~IOCRProvider.is_available` is false are dropped here, once.
        Any adapter whose :meth:`~IOCRProvider.is_local` is true is treated
        as a local engine, not an external vendor.
    local_provider:
        Optional in-process engine, placed according to *policy* after any
        local engines found in *providers*.  Always treated as local.
    policy:
        How external vendors and the local engine are combined.
    """

    def __init__(
        self,
        providers: Sequence[IOCRProvider],
        local_provider: IOCRProvider | None = None,
        policy: FallbackPolicy = FallbackPolicy.CHAIN,
    ) -> None:
        self._policy = FallbackPolicy(policy)
        self._logger = get_logger(__name__)

        available = [p for p in providers if p.is_available()]
        external = tuple(p for p in available if not p.is_local())
        local = tuple(p for p in available if p.is_local())
        if local_provider is not None and local_provider.is_available():
            local += (local_provider,)
        self._external_count = len(external)

        self._providers = self._resolve_chain(external, local)

        self._logger.info(
            "ocr_service_configured",
            policy=self._policy.value,
            providers=self.get_available_providers(),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def policy(self) -> FallbackPolicy:
        return self._policy

    @property
    def providers(self) -> tuple[IOCRProvider, ...]:
        return self._providers

    async def extract_text(self, image: OCRImage) -> ExtractionResult:
        """Run OCR on *image* using the provider fallback chain.

        Returns
        -------
        ExtractionResult
            Text, fixed confidence and name of the first provider that
            succeeded, plus every failure recorded before it.

        Raises
        ------
        NotConfiguredError
            If the chain is empty.  No provider is called.
        AllProvidersFailedError
            If every provider in the chain failed.  Chained from the last
            provider's exception.
        """
        start = time.perf_counter()

        if not self._providers:
            self._logger.error("ocr_no_providers_configured", policy=self._policy.value)
            raise NotConfiguredError("No OCR provider configured")

        failures: list[ProviderFailure] = []
        last_exc: Exception | None = None

        for provider in self._providers:
            name = provider.get_provider_name()
            self._logger.info("ocr_provider_attempting", provider=name)
            try:
                text = await provider.extract_text(image)
            except Exception as exc:
                # Any adapter failure means "try the next provider".
                last_exc = exc
                failures.append(ProviderFailure(service=name, error=_describe(exc)))
                self._logger.warning(
                    "ocr_provider_failed",
                    provider=name,
                    error_type=type(exc).__name__,
                    error=_describe(exc),
                )
                continue

            elapsed_ms = (time.perf_counter() - start) * 1000
            self._logger.info(
                "ocr_provider_succeeded",
                provider=name,
                processing_time_ms=round(elapsed_ms, 1),
                failed_before=len(failures),
            )
            return ExtractionResult(
                text=text,
                confidence=provider.get_confidence(),
                service=name,
                processing_time_ms=elapsed_ms,
                failed_attempts=tuple(failures),
            )

        last = failures[-1]
        self._logger.error(
            "ocr_all_providers_failed",
            attempts=len(failures),
            last_provider=last.service,
            last_error=last.error,
        )
        raise AllProvidersFailedError(last.service, last.error) from last_exc

    def get_available_providers(self) -> list[str]:
        """Return the names of the providers in the chain, in order."""
        return [p.get_provider_name() for p in self._providers]

    def has_external_providers(self) -> bool:
        """Return ``True`` if at least one external vendor is configured."""
        return self._external_count > 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _resolve_chain(
        self,
        external: tuple[IOCRProvider, ...],
        local: tuple[IOCRProvider, ...],
    ) -> tuple[IOCRProvider, ...]:
        if self._policy is FallbackPolicy.SINGLE:
            return external[:1]
        if self._policy is FallbackPolicy.CHAIN_THEN_LOCAL:
            return external + local
        if self._policy is FallbackPolicy.LOCAL_IF_UNCONFIGURED:
            return external or local
        return external


def _describe(exc: Exception) -> str:
    # SmartOCRError.__str__ already carries the provider prefix; keep the bare message.
    if isinstance(exc, SmartOCRError):
        return exc.message
    return str(exc) or type(exc).__name__
