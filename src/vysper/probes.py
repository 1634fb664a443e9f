"""Best-effort TCP connectivity probes.

Probe results are diagnostics only. Nothing here raises on an unreachable
host; callers get a result object and the outcome is logged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
import time
from typing import Sequence

from vysper.logger import get_logger

log = get_logger("probes")

PROBE_TIMEOUT_S = 5.0


@dataclass(frozen=True)
class ProbeTarget:
    host: str
    port: int
    name: str


@dataclass(frozen=True)
class ProbeResult:
    target: ProbeTarget
    success: bool
    latency_ms: int | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.target.name,
            "host": self.target.host,
            "port": self.target.port,
            "success": self.success,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@dataclass(frozen=True)
class ConnectivityReport:
    timestamp: str
    results: list[ProbeResult]

    @property
    def healthy(self) -> bool:
        return all(result.success for result in self.results)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "healthy": self.healthy,
            "tests": [result.to_dict() for result in self.results],
        }


def default_targets(api_host: str = "generativelanguage.googleapis.com") -> list[ProbeTarget]:
    return [
        ProbeTarget(host="google.com", port=443, name="Google (HTTPS)"),
        ProbeTarget(host=api_host, port=443, name="Gemini API Endpoint"),
    ]


async def probe_endpoint(target: ProbeTarget, timeout_s: float = PROBE_TIMEOUT_S) -> ProbeResult:
    start = time.monotonic()
    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(target.host, target.port),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError:
        return ProbeResult(target, False, error=f"Connection timeout to {target.host}:{target.port}")
    except OSError as exc:
        return ProbeResult(target, False, error=f"Connection failed to {target.host}:{target.port}: {exc}")
    latency_ms = int((time.monotonic() - start) * 1000)
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as exc:
        log.debug(f"Probe socket close failed | host={target.host} error={exc}")
    return ProbeResult(target, True, latency_ms=latency_ms)


async def check_network_connectivity(
    targets: Sequence[ProbeTarget] | None = None,
    timeout_s: float = PROBE_TIMEOUT_S,
) -> ConnectivityReport:
    resolved = list(targets) if targets is not None else default_targets()
    results = await asyncio.gather(*(probe_endpoint(target, timeout_s) for target in resolved))
    report = ConnectivityReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        results=list(results),
    )
    summary = ", ".join(f"{result.target.name}={'ok' if result.success else 'failed'}" for result in results)
    log.info(f"Network connectivity check completed | {summary}")
    return report


async def preflight(host: str, port: int = 443, timeout_s: float = PROBE_TIMEOUT_S) -> ProbeResult:
    result = await probe_endpoint(ProbeTarget(host=host, port=port, name="API preflight"), timeout_s)
    if result.success:
        log.debug(f"Preflight check passed | host={host} latency_ms={result.latency_ms}")
    else:
        log.warning(f"Preflight check failed | host={host} error={result.error}")
    return result
