"""Render helpers for the vysper CLI."""

from __future__ import annotations

from typing import Mapping, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from vysper.llm.types import ResultEnvelope
from vysper.probes import ConnectivityReport
from vysper.ui.console import get_console


def _panel(body, title: str | None = None, *, border_style: str = "border") -> Panel:
    return Panel(
        body,
        title=Text(title, style="step") if title else None,
        title_align="left",
        box=box.ROUNDED,
        border_style=border_style,
        padding=(0, 2),
        expand=True,
    )


def render_banner(title: str, subtitle: str) -> None:
    console = get_console()
    console.print(_panel(Group(Text(subtitle, style="subtitle")), title))
    console.print()


def render_step_header(step_idx: int, step_total: int, title: str, description: str = "") -> None:
    content = [Text(description, style="subtitle")] if description else []
    get_console().print(_panel(Group(*content), f"Step {step_idx}/{step_total} · {title}"))


def render_info(text: str) -> None:
    get_console().print(text, style="info", markup=False)


def render_warning(text: str) -> None:
    get_console().print(text, style="warning", markup=False)


def render_success(text: str) -> None:
    get_console().print(text, style="success", markup=False)


def render_error(text: str) -> None:
    get_console().print(_panel(Text(text, style="error"), border_style="error"))


def render_summary_table(rows: Mapping[str, object] | Sequence[tuple[str, object]], title: str = "Summary") -> None:
    console = get_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")

    items = rows.items() if hasattr(rows, "items") else rows
    for key, value in items:
        table.add_row(Text(str(key), style="label"), Text(str(value), style="value"))

    console.print()
    console.print(_panel(table, title))


def render_response(envelope: ResultEnvelope) -> None:
    metadata = envelope.metadata
    title = "Fallback response" if metadata.used_fallback else "Response"
    get_console().print(
        _panel(
            Text(envelope.response, style="warning" if metadata.used_fallback else "response"),
            title,
            border_style="warning" if metadata.used_fallback else "border",
        )
    )
    render_summary_table(
        {
            "Request": metadata.request_id,
            "Kind": metadata.kind.value,
            "Skill": metadata.skill,
            "Language": metadata.language or "not specified",
            "Elapsed": f"{metadata.elapsed_ms} ms",
            "Fallback": "yes" if metadata.used_fallback else "no",
            "Error kind": metadata.error_kind or "-",
        },
        title="Metadata",
    )


def render_connectivity(report: ConnectivityReport) -> None:
    table = Table(show_header=True, box=None, pad_edge=False)
    table.add_column("Target", style="label", no_wrap=True)
    table.add_column("Endpoint", style="value")
    table.add_column("Status", no_wrap=True)
    table.add_column("Detail", style="value")
    for result in report.results:
        status = Text("ok", style="success") if result.success else Text("failed", style="error")
        detail = f"{result.latency_ms} ms" if result.success else (result.error or "")
        table.add_row(result.target.name, f"{result.target.host}:{result.target.port}", status, detail)
    get_console().print(_panel(table, f"Connectivity · {report.timestamp}"))
