"""Attempt loop with per-attempt transport fallback and jittered backoff.

One attempt walks the transport list in order and stops at the first success.
Only when every transport in the attempt has failed does the attempt count as
failed; the loop then sleeps for the backoff delay and starts the next attempt
from the first transport again.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import random
from typing import Any, Awaitable, Callable, Sequence

from vysper.classifier import ErrorClassification, classify
from vysper.errors import AttemptTimeout, RetriesExhausted
from vysper.llm.client import Transport, serialize_request
from vysper.llm.types import AttemptRecord, CompletionRequest
from vysper.logger import get_logger

log = get_logger("retry")

SleepFn = Callable[[float], Awaitable[Any]]
PreflightFn = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class BackoffPolicy:
    base_delay_s: float = 1.0
    network_base_delay_s: float = 2.0
    jitter_s: float = 1.0

    def floor(self, attempt: int, classification: ErrorClassification) -> float:
        base = self.network_base_delay_s if classification.retryable else self.base_delay_s
        return base * attempt

    def delay(self, attempt: int, classification: ErrorClassification, rng: random.Random) -> float:
        return self.floor(attempt, classification) + rng.uniform(0, self.jitter_s)


@dataclass
class RetryResult:
    text: str
    attempts: int
    records: list[AttemptRecord] = field(default_factory=list)


class RetryOrchestrator:
    def __init__(
        self,
        *,
        backoff: BackoffPolicy | None = None,
        sleep: SleepFn = asyncio.sleep,
        rng: random.Random | None = None,
        preflight: PreflightFn | None = None,
    ) -> None:
        self.backoff = backoff or BackoffPolicy()
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._preflight = preflight

    async def run(
        self,
        request: CompletionRequest,
        transports: Sequence[Transport],
        *,
        endpoint: str,
        max_attempts: int,
        attempt_timeout_s: float,
    ) -> str:
        result = await self.execute(
            request,
            transports,
            endpoint=endpoint,
            max_attempts=max_attempts,
            attempt_timeout_s=attempt_timeout_s,
        )
        return result.text

    async def execute(
        self,
        request: CompletionRequest,
        transports: Sequence[Transport],
        *,
        endpoint: str,
        max_attempts: int,
        attempt_timeout_s: float,
    ) -> RetryResult:
        if not transports:
            raise ValueError("At least one transport is required.")
        max_attempts = max(1, max_attempts)
        payload = serialize_request(request)
        records: list[AttemptRecord] = []
        probes: set[asyncio.Task] = set()
        last_error: BaseException | None = None

        try:
            for attempt in range(1, max_attempts + 1):
                if self._preflight is not None:
                    probe = asyncio.create_task(self._preflight())
                    probes.add(probe)
                    probe.add_done_callback(probes.discard)

                log.debug(f"Attempt {attempt}/{max_attempts} starting | timeout_s={attempt_timeout_s}")
                for index, transport in enumerate(transports):
                    record = AttemptRecord(attempt=attempt, transport=transport.name)
                    records.append(record)
                    try:
                        text = await asyncio.wait_for(
                            transport.execute(payload, endpoint),
                            timeout=attempt_timeout_s,
                        )
                    except asyncio.TimeoutError:
                        last_error = AttemptTimeout(attempt_timeout_s)
                    except Exception as exc:  # noqa: BLE001
                        last_error = exc
                    else:
                        log.debug(f"Attempt {attempt} succeeded via {transport.name} | length={len(text)}")
                        return RetryResult(text=text, attempts=attempt, records=records)

                    record.error = str(last_error)
                    if index + 1 < len(transports):
                        log.warning(
                            f"Transport {transport.name} failed, trying {transports[index + 1].name} | "
                            f"error={last_error}"
                        )

                classification = classify(last_error)
                log.warning(
                    f"Attempt {attempt} failed | error={last_error} kind={classification.kind.value} "
                    f"action={classification.suggested_action!r} remaining={max_attempts - attempt}"
                )
                if attempt == max_attempts:
                    raise RetriesExhausted(max_attempts, classification, last_error) from last_error

                delay = self.backoff.delay(attempt, classification, self._rng)
                records[-1].delay_s = delay
                log.debug(f"Waiting {delay:.3f}s before attempt {attempt + 1} | retryable={classification.retryable}")
                await self._sleep(delay)
        finally:
            for probe in list(probes):
                probe.cancel()
