"""Provider and service assembly.

Builds vendor adapters from :class:`Settings` plus the YAML tunables and
wires them into an :class:`OCRService`.  The host application calls
:func:`build_ocr_service` once at startup and shares the result; nothing
here is cached at module level.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import structlog

from smartocr.config.loader import DEFAULT_CONFIG
from smartocr.config.settings import Settings
from smartocr.interfaces.ocr_provider import IOCRProvider
from smartocr.models.policy import FallbackPolicy
from smartocr.providers.azure_vision_provider import AzureVisionOCRProvider
from smartocr.providers.google_vision_provider import GoogleVisionOCRProvider
from smartocr.providers.ocr_space_provider import OCRSpaceOCRProvider
from smartocr.providers.openai_vision_provider import OpenAIVisionOCRProvider
from smartocr.providers.tesseract_provider import TesseractOCRProvider
from smartocr.services.ocr_service import OCRService
from smartocr.utils.errors import ConfigurationError

_logger = structlog.get_logger(logger_name=__name__)

_ProviderBuilder = Callable[..., IOCRProvider]


def _ocr_config(config: dict | None) -> dict[str, Any]:
    ocr = dict(DEFAULT_CONFIG["ocr"])
    if config:
        ocr.update(config.get("ocr", {}))
    return ocr


def _confidence(ocr: dict, key: str) -> float:
    defaults = DEFAULT_CONFIG["ocr"]["confidence"]
    return float(ocr.get("confidence", {}).get(key, defaults[key]))


def _build_ocr_space(settings: Settings, ocr: dict, client: httpx.AsyncClient | None) -> IOCRProvider:
    opts = ocr.get("ocr_space", {})
    return OCRSpaceOCRProvider(
        api_key=settings.ocrspace_api_key,
        http_client=client,
        language=opts.get("language", "eng"),
        engine=int(opts.get("engine", 2)),
        confidence=_confidence(ocr, "ocr_space"),
        timeout=settings.http_timeout,
    )


def _build_openai_vision(settings: Settings, ocr: dict, client: httpx.AsyncClient | None) -> IOCRProvider:
    opts = ocr.get("openai_vision", {})
    return OpenAIVisionOCRProvider(
        api_key=settings.openai_api_key,
        http_client=client,
        model=opts.get("model", "gpt-4o"),
        max_tokens=int(opts.get("max_tokens", 4000)),
        confidence=_confidence(ocr, "openai_vision"),
        timeout=settings.http_timeout,
    )


def _build_google_vision(settings: Settings, ocr: dict, client: httpx.AsyncClient | None) -> IOCRProvider:
    return GoogleVisionOCRProvider(
        api_key=settings.google_vision_api_key,
        http_client=client,
        confidence=_confidence(ocr, "google_vision"),
        timeout=settings.http_timeout,
    )


def _build_azure_vision(settings: Settings, ocr: dict, client: httpx.AsyncClient | None) -> IOCRProvider:
    opts = ocr.get("azure_vision", {})
    return AzureVisionOCRProvider(
        api_key=settings.azure_vision_api_key,
        endpoint=settings.azure_vision_endpoint,
        http_client=client,
        poll_interval=float(opts.get("poll_interval", 1.0)),
        max_poll_attempts=int(opts.get("max_poll_attempts", 30)),
        confidence=_confidence(ocr, "azure_vision"),
        timeout=settings.http_timeout,
    )


# Closed set of known vendors, keyed by the names used in provider_priority.
PROVIDER_BUILDERS: dict[str, _ProviderBuilder] = {
    "ocr_space": _build_ocr_space,
    "openai_vision": _build_openai_vision,
    "google_vision": _build_google_vision,
    "azure_vision": _build_azure_vision,
}


def build_ocr_providers(
    settings: Settings,
    config: dict | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> list[IOCRProvider]:
    """Instantiate every known external adapter in configured priority order.

    Unconfigured adapters are included; :class:`OCRService` drops them.

    Raises
    ------
    ConfigurationError
        If ``provider_priority`` names an unknown vendor or repeats one.
    """
    ocr = _ocr_config(config)
    priority = list(ocr.get("provider_priority") or [])

    unknown = [name for name in priority if name not in PROVIDER_BUILDERS]
    if unknown:
        raise ConfigurationError(
            f"Unknown OCR provider(s) in provider_priority: {', '.join(unknown)}. "
            f"Known: {', '.join(PROVIDER_BUILDERS)}"
        )
    if len(set(priority)) != len(priority):
        raise ConfigurationError("provider_priority lists a provider more than once")

    return [PROVIDER_BUILDERS[name](settings, ocr, http_client) for name in priority]


def build_ocr_service(
    settings: Settings,
    config: dict | None = None,
    http_client: httpx.AsyncClient | None = None,
    policy: FallbackPolicy | str | None = None,
) -> OCRService:
    """Assemble the orchestrator.

    The policy is taken from, in order: the *policy* argument, the
    ``ocr.fallback_policy`` config key, then ``settings.ocr_fallback_policy``.
    The local Tesseract engine is only built when the policy can use it.
    """
    ocr = _ocr_config(config)
    raw_policy = policy or (config or {}).get("ocr", {}).get("fallback_policy") or settings.ocr_fallback_policy
    try:
        resolved = FallbackPolicy(raw_policy)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown fallback policy: {raw_policy!r}") from exc

    providers = build_ocr_providers(settings, config, http_client)

    local: IOCRProvider | None = None
    if resolved in (FallbackPolicy.CHAIN_THEN_LOCAL, FallbackPolicy.LOCAL_IF_UNCONFIGURED):
        opts = ocr.get("tesseract", {})
        local = TesseractOCRProvider(
            language=opts.get("language", "eng"),
            confidence=_confidence(ocr, "tesseract"),
        )
        if not local.is_available():
            _logger.warning("local_ocr_unavailable", provider=local.get_provider_name())

    _logger.debug(
        "ocr_service_building",
        policy=resolved.value,
        configured_vendors=settings.get_configured_vendors(),
    )
    return OCRService(providers=providers, local_provider=local, policy=resolved)
