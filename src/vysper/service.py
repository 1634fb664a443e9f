"""Entry points for text, transcription and screenshot requests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import functools
import time
from typing import Any, Sequence

from vysper import probes
from vysper.builder import HistoryItem, RequestBuilder
from vysper.classifier import ErrorClassification
from vysper.config import Settings, load_settings, mask_api_key
from vysper.context import SkillContextProvider
from vysper.errors import NotInitialized, RetriesExhausted
from vysper.fallback import FallbackResponder
from vysper.llm.client import Transport, create_transports
from vysper.llm.types import (
    CONNECTION_TEST_PARAMETERS,
    CompletionRequest,
    RequestKind,
    ResultEnvelope,
    ResultMetadata,
    ScreenshotInput,
    Turn,
)
from vysper.logger import get_logger, log_performance
from vysper.retry import BackoffPolicy, RetryOrchestrator
from vysper.state import ServiceState

log = get_logger("llm")

CONNECTION_TEST_PROMPT = 'Test connection. Please respond with "OK".'


@dataclass(frozen=True)
class ConnectionTestResult:
    success: bool
    response: str | None = None
    latency_ms: int | None = None
    error: str | None = None
    classification: ErrorClassification | None = None
    connectivity: probes.ConnectivityReport | None = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "response": self.response,
            "latency_ms": self.latency_ms,
            "error": self.error,
            "classification": self.classification.to_dict() if self.classification else None,
            "connectivity": self.connectivity.to_dict() if self.connectivity else None,
        }


class LLMService:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transports: Sequence[Transport] | None = None,
        provider: SkillContextProvider | None = None,
        state: ServiceState | None = None,
        orchestrator: RetryOrchestrator | None = None,
        fallback: FallbackResponder | None = None,
        connectivity_targets: Sequence[probes.ProbeTarget] | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._state = state or ServiceState()
        self._builder = RequestBuilder(provider)
        self._fallback = fallback or FallbackResponder()
        if transports is None:
            transports = create_transports(self._settings.transport_mode, timeout_s=self._settings.timeout_s)
        self._transports = list(transports)
        self._orchestrator = orchestrator or self._default_orchestrator()
        self._connectivity_targets = list(connectivity_targets or probes.default_targets(self._settings.api_host))
        self.initialize()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def state(self) -> ServiceState:
        return self._state

    def initialize(self) -> bool:
        masked = mask_api_key(self._settings.api_key)
        if self._settings.transport_mode == "mock":
            self._state.mark_initialized()
            log.info("Mock transport selected; credentials not required")
            return True
        if not self._settings.api_key_configured:
            log.warning(
                f"Gemini API key not configured | key_exists={bool(self._settings.api_key)} "
                "hint='Set GEMINI_API_KEY in your .env file'"
            )
            return False
        self._state.mark_initialized()
        log.info(f"Generative client initialized | model={self._settings.model} api_key={masked}")
        return True

    def update_api_key(self, api_key: str) -> bool:
        self._settings = self._settings.with_api_key(api_key)
        self._state.mark_uninitialized()
        initialized = self.initialize()
        log.info(f"API key updated and client reinitialized | api_key={mask_api_key(api_key)}")
        return initialized

    async def process_text(
        self,
        text: str,
        skill: str,
        history: Sequence[HistoryItem] | None = None,
        language: str | None = None,
    ) -> ResultEnvelope:
        return await self._process(RequestKind.PLAIN, text, text, skill, history, language)

    async def process_transcription(
        self,
        text: str,
        skill: str,
        history: Sequence[HistoryItem] | None = None,
        language: str | None = None,
    ) -> ResultEnvelope:
        return await self._process(RequestKind.TRANSCRIPTION, text, text, skill, history, language)

    async def process_screenshot(
        self,
        image: bytes,
        mime_type: str | None,
        prompt: str,
        skill: str,
        history: Sequence[HistoryItem] | None = None,
        language: str | None = None,
    ) -> ResultEnvelope:
        screenshot = ScreenshotInput(image=image, mime_type=mime_type, prompt=prompt or "")
        return await self._process(RequestKind.VISION, screenshot, prompt or "", skill, history, language)

    async def _process(
        self,
        kind: RequestKind,
        user_input: str | ScreenshotInput,
        input_text: str,
        skill: str,
        history: Sequence[HistoryItem] | None,
        language: str | None,
    ) -> ResultEnvelope:
        if not self._state.initialized:
            raise NotInitialized("LLM service not initialized. Check Gemini API key configuration.")

        started = time.monotonic()
        request_id = self._state.next_request_id()
        log.info(
            f"Processing {kind.value} request | request_id={request_id} skill={skill} "
            f"input_length={len(input_text) if isinstance(input_text, str) else 0} "
            f"has_history={bool(history)} language={language or 'not specified'}"
        )

        try:
            request = self._builder.build(kind, user_input, skill, history, language)
            text = await self._orchestrator.run(
                request,
                self._transports,
                endpoint=self._settings.endpoint_url(),
                max_attempts=self._settings.max_retries,
                attempt_timeout_s=self._settings.timeout_s,
            )
        except RetriesExhausted as exc:
            self._state.record_error()
            classification = exc.classification
            log.error(
                f"LLM {kind.value} processing failed | request_id={request_id} error={exc.original} "
                f"kind={classification.kind.value} action={classification.suggested_action!r}"
            )
            if not self._settings.fallback_enabled:
                raise
            return self._fallback.respond(
                kind,
                input_text,
                skill,
                classification,
                request_id=request_id,
                elapsed_ms=int((time.monotonic() - started) * 1000),
                language=language,
            )
        except Exception as exc:
            self._state.record_error()
            log.error(f"LLM {kind.value} request rejected | request_id={request_id} error={exc}")
            raise

        elapsed_ms = log_performance(
            log,
            f"LLM {kind.value} processing",
            started,
            request_id=request_id,
            skill=skill,
            response_length=len(text),
        )
        return ResultEnvelope(
            response=text,
            metadata=ResultMetadata(
                skill=skill,
                language=language,
                elapsed_ms=elapsed_ms,
                request_id=request_id,
                used_fallback=False,
                kind=kind,
            ),
        )

    async def check_network_connectivity(self) -> probes.ConnectivityReport:
        return await probes.check_network_connectivity(self._connectivity_targets)

    async def test_connection(self) -> ConnectionTestResult:
        if not self._state.initialized:
            return ConnectionTestResult(success=False, error="Service not initialized")

        connectivity_task = asyncio.create_task(self.check_network_connectivity())
        request = CompletionRequest(
            contents=[Turn.from_text("user", CONNECTION_TEST_PROMPT)],
            generation=CONNECTION_TEST_PARAMETERS,
        )
        started = time.monotonic()
        try:
            try:
                text = await self._orchestrator.run(
                    request,
                    self._transports,
                    endpoint=self._settings.endpoint_url(),
                    max_attempts=1,
                    attempt_timeout_s=self._settings.timeout_s,
                )
            except RetriesExhausted as exc:
                connectivity = await connectivity_task
                log.error(f"Connection test failed | error={exc.original} kind={exc.classification.kind.value}")
                return ConnectionTestResult(
                    success=False,
                    error=str(exc.original),
                    classification=exc.classification,
                    connectivity=connectivity,
                )
            latency_ms = int((time.monotonic() - started) * 1000)
            connectivity = await connectivity_task
        finally:
            if not connectivity_task.done():
                connectivity_task.cancel()

        if not connectivity.healthy:
            log.warning("Network connectivity issues detected during connection test")
        log.info(f"Connection test successful | latency_ms={latency_ms} response={text!r}")
        return ConnectionTestResult(success=True, response=text, latency_ms=latency_ms, connectivity=connectivity)

    def get_stats(self) -> dict[str, Any]:
        stats = self._state.snapshot().to_dict()
        stats["config"] = self._settings.to_dict()
        return stats

    async def aclose(self) -> None:
        for transport in self._transports:
            await transport.aclose()

    async def __aenter__(self) -> "LLMService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _default_orchestrator(self) -> RetryOrchestrator:
        settings = self._settings
        preflight = None
        if settings.preflight_enabled and settings.transport_mode == "remote":
            preflight = functools.partial(probes.preflight, settings.api_host)
        return RetryOrchestrator(
            backoff=BackoffPolicy(
                base_delay_s=settings.base_delay_s,
                network_base_delay_s=settings.network_base_delay_s,
                jitter_s=settings.jitter_s,
            ),
            preflight=preflight,
        )
