"""Secondary transport backed by requests, run on a worker thread."""

from __future__ import annotations

import asyncio

import requests

from vysper.errors import HTTPStatusError, TransportError
from vysper.llm.client import body_preview, json_headers, parse_response_body, redact_key, user_agent
from vysper.logger import get_logger

log = get_logger("transport.requests")


class RequestsTransport:
    name = "requests"

    def __init__(
        self,
        *,
        timeout_s: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    async def execute(self, payload: bytes, endpoint: str) -> str:
        return await asyncio.to_thread(self._post, payload, endpoint)

    def _post(self, payload: bytes, endpoint: str) -> str:
        headers = json_headers(payload)
        headers["User-Agent"] = user_agent()
        try:
            response = self._session.post(endpoint, data=payload, headers=headers, timeout=self._timeout_s)
        except requests.exceptions.Timeout as exc:
            raise TransportError(redact_key(f"HTTPS request timed out: {exc}")) from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(redact_key(f"HTTPS request failed: {type(exc).__name__}: {exc}")) from exc

        response.encoding = response.encoding or "utf-8"
        if response.status_code < 200 or response.status_code >= 300:
            preview = body_preview(response.text)
            log.error(f"HTTPS request failed with status {response.status_code} | preview={preview!r}")
            raise HTTPStatusError(status_code=response.status_code, body_preview=preview)

        text = parse_response_body(response.text)
        log.info(f"HTTPS request successful | status={response.status_code} length={len(text)}")
        return text

    async def aclose(self) -> None:
        self._session.close()
