from __future__ import annotations

import asyncio
import socket

import pytest

from vysper.probes import ProbeTarget, check_network_connectivity, default_targets, preflight, probe_endpoint


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def _handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    writer.close()


@pytest.mark.asyncio
async def test_probe_reaches_listening_server() -> None:
    server = await asyncio.start_server(_handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    async with server:
        result = await probe_endpoint(ProbeTarget(host="127.0.0.1", port=port, name="local"), timeout_s=2.0)
    assert result.success
    assert result.latency_ms is not None
    assert result.error is None


@pytest.mark.asyncio
async def test_probe_reports_refused_connection() -> None:
    port = _closed_port()
    result = await probe_endpoint(ProbeTarget(host="127.0.0.1", port=port, name="closed"), timeout_s=2.0)
    assert not result.success
    assert result.error.startswith(f"Connection failed to 127.0.0.1:{port}")


@pytest.mark.asyncio
async def test_connectivity_report_is_unhealthy_when_any_probe_fails() -> None:
    server = await asyncio.start_server(_handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    targets = [
        ProbeTarget(host="127.0.0.1", port=port, name="open"),
        ProbeTarget(host="127.0.0.1", port=_closed_port(), name="closed"),
    ]
    async with server:
        report = await check_network_connectivity(targets, timeout_s=2.0)

    assert not report.healthy
    payload = report.to_dict()
    assert [test["name"] for test in payload["tests"]] == ["open", "closed"]
    assert [test["success"] for test in payload["tests"]] == [True, False]


@pytest.mark.asyncio
async def test_preflight_never_raises() -> None:
    result = await preflight("127.0.0.1", port=_closed_port(), timeout_s=1.0)
    assert not result.success


def test_default_targets_include_api_host() -> None:
    hosts = [(target.host, target.port) for target in default_targets("generativelanguage.googleapis.com")]
    assert hosts == [("google.com", 443), ("generativelanguage.googleapis.com", 443)]
