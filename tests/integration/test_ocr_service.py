"""Integration tests for OCRService multi-provider fallback chain."""

from __future__ import annotations

import pytest

from smartocr.models.ocr import ExtractionResult
from smartocr.models.policy import FallbackPolicy
from smartocr.services.ocr_service import OCRService
from smartocr.utils.errors import (
    AllProvidersFailedError,
    NoTextDetectedError,
    NotConfiguredError,
    TransportError,
)


class TestOCRFallbackChain:
    """Tests for OCRService provider fallback and selection logic."""

    @pytest.mark.asyncio
    async def test_first_success_short_circuits(self, provider_factory, sample_image) -> None:
        """First provider succeeds, later providers are never called."""
        first = provider_factory("provider-a", text="FIRST")
        second = provider_factory("provider-b", text="SECOND")

        service = OCRService(providers=[first, second])
        result = await service.extract_text(sample_image)

        assert result.text == "FIRST"
        assert result.service == "provider-a"
        assert result.failed_attempts == ()
        first.extract_text.assert_awaited_once_with(sample_image)
        second.extract_text.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", [1, 2, 3])
    async def test_k_failures_recorded_before_success(
        self, provider_factory, sample_image, failing: int,
    ) -> None:
        """First k providers fail; exactly k failures precede the result."""
        providers = [
            provider_factory(f"bad-{i}", raises=TransportError("boom", provider_name=f"bad-{i}"))
            for i in range(failing)
        ]
        providers.append(provider_factory("good", text="OK"))
        trailing = provider_factory("unused")
        providers.append(trailing)

        service = OCRService(providers=providers)
        result = await service.extract_text(sample_image)

        assert result.service == "good"
        assert len(result.failed_attempts) == failing
        assert [f.service for f in result.failed_attempts] == [f"bad-{i}" for i in range(failing)]
        assert all(f.error == "boom" for f in result.failed_attempts)
        trailing.extract_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_providers_raises_not_configured(self, sample_image) -> None:
        service = OCRService(providers=[])

        with pytest.raises(NotConfiguredError):
            await service.extract_text(sample_image)

    @pytest.mark.asyncio
    async def test_unavailable_providers_are_dropped(self, provider_factory, sample_image) -> None:
        """Unconfigured providers never enter the chain and are never called."""
        missing = provider_factory("missing-key", available=False)
        service = OCRService(providers=[missing])

        assert service.get_available_providers() == []
        assert service.has_external_providers() is False
        with pytest.raises(NotConfiguredError):
            await service.extract_text(sample_image)
        missing.extract_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_fail_reports_last_provider(self, provider_factory, sample_image) -> None:
        first = provider_factory("provider-a", raises=RuntimeError("network down"))
        last_exc = NoTextDetectedError(provider_name="provider-b")
        second = provider_factory("provider-b", raises=last_exc)

        service = OCRService(providers=[first, second])

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await service.extract_text(sample_image)

        err = exc_info.value
        assert err.last_provider == "provider-b"
        assert err.last_error == "No text detected in image"
        assert "provider-b" in str(err)
        assert "No text detected in image" in str(err)
        assert err.__cause__ is last_exc
        first.extract_text.assert_awaited_once()
        second.extract_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_hello_world_stub_round_trip(self, provider_factory, sample_image) -> None:
        stub = provider_factory("Stub OCR", text="Hello World", confidence=0.92)

        result = await OCRService(providers=[stub]).extract_text(sample_image)

        assert isinstance(result, ExtractionResult)
        assert result.text == "Hello World"
        assert result.service == "Stub OCR"
        assert result.confidence == pytest.approx(0.92)
        assert result.processing_time_ms >= 0

    @pytest.mark.asyncio
    async def test_exception_without_message_still_described(
        self, provider_factory, sample_image,
    ) -> None:
        only = provider_factory("provider-a", raises=TimeoutError())

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await OCRService(providers=[only]).extract_text(sample_image)

        assert exc_info.value.last_error == "TimeoutError"


class TestFallbackPolicies:
    """How external vendors combine with the local engine under each policy."""

    def test_chain_excludes_local(self, provider_factory) -> None:
        ext = provider_factory("ext")
        local = provider_factory("local")

        service = OCRService([ext], local_provider=local, policy=FallbackPolicy.CHAIN)

        assert service.get_available_providers() == ["ext"]

    def test_chain_then_local_appends_local_last(self, provider_factory) -> None:
        a = provider_factory("a")
        b = provider_factory("b")
        local = provider_factory("local")

        service = OCRService([a, b], local_provider=local, policy=FallbackPolicy.CHAIN_THEN_LOCAL)

        assert service.get_available_providers() == ["a", "b", "local"]

    def test_local_if_unconfigured_with_external(self, provider_factory) -> None:
        ext = provider_factory("ext")
        local = provider_factory("local")

        service = OCRService(
            [ext], local_provider=local, policy=FallbackPolicy.LOCAL_IF_UNCONFIGURED,
        )

        assert service.get_available_providers() == ["ext"]

    def test_local_if_unconfigured_without_external(self, provider_factory) -> None:
        ext = provider_factory("ext", available=False)
        local = provider_factory("local")

        service = OCRService(
            [ext], local_provider=local, policy=FallbackPolicy.LOCAL_IF_UNCONFIGURED,
        )

        assert service.get_available_providers() == ["local"]
        assert service.has_external_providers() is False

    def test_single_keeps_only_first_configured(self, provider_factory) -> None:
        skipped = provider_factory("skipped", available=False)
        a = provider_factory("a")
        b = provider_factory("b")

        service = OCRService([skipped, a, b], policy="single")

        assert service.policy is FallbackPolicy.SINGLE
        assert service.get_available_providers() == ["a"]

    def test_unavailable_local_is_ignored(self, provider_factory) -> None:
        local = provider_factory("local", available=False)

        service = OCRService([], local_provider=local, policy=FallbackPolicy.CHAIN_THEN_LOCAL)

        assert service.providers == ()

    @pytest.mark.asyncio
    async def test_single_does_not_fall_back(self, provider_factory, sample_image) -> None:
        a = provider_factory("a", raises=TransportError("503", provider_name="a"))
        b = provider_factory("b")

        service = OCRService([a, b], policy=FallbackPolicy.SINGLE)

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await service.extract_text(sample_image)

        assert exc_info.value.last_provider == "a"
        b.extract_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_local_used_after_external_failures(self, provider_factory, sample_image) -> None:
        ext = provider_factory("ext", raises=RuntimeError("quota"))
        local = provider_factory("local", text="from tesseract", confidence=0.7)

        service = OCRService([ext], local_provider=local, policy=FallbackPolicy.CHAIN_THEN_LOCAL)
        result = await service.extract_text(sample_image)

        assert result.service == "local"
        assert result.confidence == pytest.approx(0.7)
        assert [f.service for f in result.failed_attempts] == ["ext"]

    def test_local_engine_in_provider_list_is_not_external(self, provider_factory) -> None:
        local = provider_factory("local", local=True)
        ext = provider_factory("ext")

        chain = OCRService([local, ext], policy=FallbackPolicy.CHAIN)
        then_local = OCRService([local, ext], policy=FallbackPolicy.CHAIN_THEN_LOCAL)

        assert chain.get_available_providers() == ["ext"]
        assert then_local.get_available_providers() == ["ext", "local"]

    def test_only_local_engine_counts_as_unconfigured(self, provider_factory) -> None:
        local = provider_factory("local", local=True)

        service = OCRService([local], policy=FallbackPolicy.LOCAL_IF_UNCONFIGURED)

        assert service.has_external_providers() is False
        assert service.get_available_providers() == ["local"]
