"""Primary transport backed by httpx."""

from __future__ import annotations

import time

import httpx

from vysper.errors import HTTPStatusError, TransportError
from vysper.llm.client import body_preview, json_headers, parse_response_body, redact_key
from vysper.logger import get_logger

log = get_logger("transport.httpx")


class HttpxTransport:
    name = "httpx"

    def __init__(
        self,
        *,
        timeout_s: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def execute(self, payload: bytes, endpoint: str) -> str:
        start = time.monotonic()
        try:
            response = await self._client.post(endpoint, content=payload, headers=json_headers(payload))
        except httpx.HTTPError as exc:
            raise TransportError(redact_key(f"httpx request failed: {type(exc).__name__}: {exc}")) from exc
        latency_ms = int((time.monotonic() - start) * 1000)

        if response.status_code < 200 or response.status_code >= 300:
            preview = body_preview(response.text)
            log.error(f"Request failed with status {response.status_code} | preview={preview!r}")
            raise HTTPStatusError(status_code=response.status_code, body_preview=preview)

        text = parse_response_body(response.text)
        log.info(f"Request successful | status={response.status_code} length={len(text)} latency_ms={latency_ms}")
        return text

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
