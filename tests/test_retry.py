from __future__ import annotations

import asyncio
import random

import pytest

from tests.utils import FakeTransport, RecordingSleep
from vysper.classifier import ErrorKind
from vysper.errors import HTTPStatusError, RetriesExhausted, TransportError
from vysper.llm.types import CHAT_PARAMETERS, CompletionRequest, Turn
from vysper.retry import BackoffPolicy, RetryOrchestrator

ENDPOINT = "https://example.invalid/v1beta/models/test:generateContent?key=k"


def _request() -> CompletionRequest:
    return CompletionRequest(contents=[Turn.from_text("user", "hello")], generation=CHAT_PARAMETERS)


async def _execute(orchestrator: RetryOrchestrator, transports, *, max_attempts: int = 3, timeout_s: float = 5.0):
    return await orchestrator.execute(
        _request(),
        transports,
        endpoint=ENDPOINT,
        max_attempts=max_attempts,
        attempt_timeout_s=timeout_s,
    )


@pytest.mark.asyncio
async def test_first_success_returns_without_sleeping(orchestrator, recording_sleep) -> None:
    primary = FakeTransport("httpx", ["answer"])
    result = await _execute(orchestrator, [primary])
    assert result.text == "answer"
    assert result.attempts == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_secondary_transport_rescues_the_same_attempt(orchestrator, recording_sleep) -> None:
    primary = FakeTransport("httpx", [TransportError("connect ECONNRESET")])
    secondary = FakeTransport("requests", ["from fallback transport"])

    result = await _execute(orchestrator, [primary, secondary])

    assert result.text == "from fallback transport"
    assert result.attempts == 1
    assert [record.transport for record in result.records] == ["httpx", "requests"]
    assert result.records[0].error is not None
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_network_failures_back_off_above_the_floor(orchestrator, recording_sleep) -> None:
    primary = FakeTransport("httpx", [TransportError("getaddrinfo ENOTFOUND")])
    secondary = FakeTransport("requests", [TransportError("connection refused")])

    with pytest.raises(RetriesExhausted) as excinfo:
        await _execute(orchestrator, [primary, secondary], max_attempts=3)

    assert excinfo.value.attempts == 3
    assert excinfo.value.classification.kind is ErrorKind.NETWORK
    assert primary.calls == 3
    assert secondary.calls == 3
    assert len(recording_sleep.delays) == 2
    for attempt, delay in enumerate(recording_sleep.delays, start=1):
        assert 2.0 * attempt <= delay <= 2.0 * attempt + 1.0


@pytest.mark.asyncio
async def test_non_retryable_failures_still_use_the_full_budget(recording_sleep) -> None:
    orchestrator = RetryOrchestrator(
        backoff=BackoffPolicy(base_delay_s=1.0, network_base_delay_s=2.0, jitter_s=0.0),
        sleep=recording_sleep,
    )
    primary = FakeTransport("httpx", [HTTPStatusError(status_code=401, body_preview="UNAUTHENTICATED")])

    with pytest.raises(RetriesExhausted) as excinfo:
        await _execute(orchestrator, [primary], max_attempts=3)

    assert excinfo.value.classification.kind is ErrorKind.AUTH
    assert isinstance(excinfo.value.original, HTTPStatusError)
    assert primary.calls == 3
    assert recording_sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_slow_transport_times_out(orchestrator) -> None:
    slow = FakeTransport("httpx", ["too late"], delay_s=1.0)

    with pytest.raises(RetriesExhausted) as excinfo:
        await _execute(orchestrator, [slow], max_attempts=1, timeout_s=0.05)

    assert excinfo.value.classification.kind is ErrorKind.TIMEOUT
    assert str(excinfo.value.original) == "Request timeout"


@pytest.mark.asyncio
async def test_recovers_on_a_later_attempt(orchestrator, recording_sleep) -> None:
    primary = FakeTransport("httpx", [TransportError("network error"), "second time lucky"])
    result = await _execute(orchestrator, [primary])
    assert result.text == "second time lucky"
    assert result.attempts == 2
    assert primary.calls == 2
    assert recording_sleep.delays[0] >= orchestrator.backoff.network_base_delay_s
    assert result.records[0].delay_s == recording_sleep.delays[0]


@pytest.mark.asyncio
async def test_preflight_runs_per_attempt_and_is_cancelled() -> None:
    started: list[int] = []
    cancelled: list[int] = []

    async def preflight() -> None:
        started.append(1)
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            cancelled.append(1)
            raise

    orchestrator = RetryOrchestrator(sleep=RecordingSleep(), rng=random.Random(1), preflight=preflight)
    primary = FakeTransport("httpx", [TransportError("fetch failed")], delay_s=0.01)

    with pytest.raises(RetriesExhausted):
        await _execute(orchestrator, [primary], max_attempts=2)
    await asyncio.sleep(0)

    assert len(started) == 2
    assert len(cancelled) == 2


@pytest.mark.asyncio
async def test_requires_a_transport(orchestrator) -> None:
    with pytest.raises(ValueError):
        await _execute(orchestrator, [])


@pytest.mark.asyncio
async def test_single_attempt_exhaustion_keeps_last_failure(orchestrator, recording_sleep) -> None:
    primary = FakeTransport("httpx", [TransportError("connection refused")])
    secondary = FakeTransport("requests", [HTTPStatusError(status_code=504, body_preview="Gateway Timeout")])

    with pytest.raises(RetriesExhausted) as excinfo:
        await _execute(orchestrator, [primary, secondary], max_attempts=1)

    assert excinfo.value.attempts == 1
    assert isinstance(excinfo.value.original, HTTPStatusError)
    assert excinfo.value.__cause__ is excinfo.value.original
    assert excinfo.value.classification.kind is ErrorKind.NETWORK
    assert recording_sleep.delays == []
