"""Transport interface and shared wire helpers for generative API access."""

from __future__ import annotations

import json
import platform
import re
from typing import Any, Protocol, runtime_checkable

from vysper import __version__
from vysper.errors import EmptyResponse, MalformedResponse
from vysper.llm.types import CompletionRequest
from vysper.logger import get_logger

log = get_logger("llm")

BODY_PREVIEW_CHARS = 500

_KEY_PARAM = re.compile(r"([?&]key=)[^&\s]+")


@runtime_checkable
class Transport(Protocol):
    name: str

    async def execute(self, payload: bytes, endpoint: str) -> str:
        """POST a serialized request and return the extracted response text."""

    async def aclose(self) -> None:
        """Release any underlying client resources."""


def create_transports(mode: str, *, timeout_s: float = 30.0, **kwargs: Any) -> list[Transport]:
    """Return transports in the order they should be tried within one attempt."""
    if mode == "mock":
        from vysper.llm.mock import MockTransport

        return [MockTransport(**kwargs)]
    if mode == "remote":
        from vysper.llm.httpx_transport import HttpxTransport
        from vysper.llm.requests_transport import RequestsTransport

        return [HttpxTransport(timeout_s=timeout_s), RequestsTransport(timeout_s=timeout_s)]
    raise ValueError(f"Unsupported transport mode: {mode}")


def serialize_request(request: CompletionRequest) -> bytes:
    return json.dumps(request.to_wire(), ensure_ascii=False).encode("utf-8")


def json_headers(payload: bytes) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Content-Length": str(len(payload)),
    }


def user_agent() -> str:
    return f"vysper/{__version__} (Python {platform.python_version()}; {platform.system()} {platform.machine()})"


def body_preview(text: str) -> str:
    return text[:BODY_PREVIEW_CHARS]


def redact_key(text: str) -> str:
    return _KEY_PARAM.sub(r"\1***", text)


def parse_response_body(text: str) -> str:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        log.error(f"Failed to parse response body: {exc.msg} | preview={body_preview(text)!r}")
        raise MalformedResponse(f"Failed to parse response: {exc.msg}") from exc
    return extract_text(payload)


def extract_text(payload: Any) -> str:
    candidates = payload.get("candidates") if isinstance(payload, dict) else None
    if not candidates or not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise MalformedResponse("Invalid response structure: no candidates")
    candidate = candidates[0]

    finish_reason = candidate.get("finishReason")
    if finish_reason and finish_reason != "STOP":
        log.warning(
            f"Response finished with non-STOP reason: {finish_reason} "
            f"safety_ratings={candidate.get('safetyRatings')}"
        )

    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not parts or not isinstance(parts, list) or not isinstance(parts[0], dict):
        raise MalformedResponse("Invalid response structure: no content parts")
    text = parts[0].get("text")
    if text is None:
        raise MalformedResponse("Invalid response structure: no text in first part")
    if not isinstance(text, str) or not text.strip():
        raise EmptyResponse("Empty text content in generative response")
    return text.strip()
