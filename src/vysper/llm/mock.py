"""Mock transport for offline use and demos."""

from __future__ import annotations

import asyncio
import hashlib
import json

from vysper.errors import TransportError
from vysper.llm.client import extract_text


class MockTransport:
    name = "mock"

    def __init__(
        self,
        *,
        latency_ms: int = 15,
        jitter_ms: int = 10,
        error_rate: float = 0.0,
    ) -> None:
        self._latency_ms = latency_ms
        self._jitter_ms = jitter_ms
        self._error_rate = error_rate

    async def execute(self, payload: bytes, endpoint: str) -> str:
        seed_bytes = _stable_seed(payload)
        if self._error_rate > 0 and seed_bytes[2] < self._error_rate * 256:
            raise TransportError("MockTransport simulated network error.")
        await asyncio.sleep(_simulated_delay_s(seed_bytes, self._latency_ms, self._jitter_ms))
        return extract_text(_mock_response(payload, seed_bytes))

    async def aclose(self) -> None:
        return


def _stable_seed(payload: bytes) -> bytes:
    return hashlib.sha256(payload).digest()


def _simulated_delay_s(seed_bytes: bytes, latency_ms: int, jitter_ms: int) -> float:
    jitter = seed_bytes[1] % max(1, jitter_ms + 1)
    return (latency_ms + jitter) / 1000.0


def _mock_response(payload: bytes, seed_bytes: bytes) -> dict:
    body = json.loads(payload)
    contents = body.get("contents") or [{}]
    last_parts = contents[-1].get("parts") or []
    prompt = next((part["text"] for part in reversed(last_parts) if "text" in part), "")
    has_image = any("inlineData" in part for part in last_parts)
    words = len(prompt.split())
    subject = "the screenshot" if has_image else f"a {words}-word prompt"
    text = f"Mock response {seed_bytes[0]:02x}: received {subject} with {len(contents) - 1} history turns."
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }
