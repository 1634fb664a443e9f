from __future__ import annotations

import asyncio
import json


def gemini_body(text: str, finish_reason: str = "STOP") -> dict:
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": finish_reason,
            }
        ]
    }


class FakeTransport:
    """Replays scripted outcomes: a str is returned, an exception is raised."""

    def __init__(self, name: str, outcomes, *, delay_s: float = 0.0) -> None:
        self.name = name
        self._outcomes = list(outcomes)
        self._delay_s = delay_s
        self.payloads: list[dict] = []
        self.endpoints: list[str] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.payloads)

    async def execute(self, payload: bytes, endpoint: str) -> str:
        self.payloads.append(json.loads(payload))
        self.endpoints.append(endpoint)
        await asyncio.sleep(self._delay_s)
        # The last scripted outcome repeats once the script runs out.
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)
