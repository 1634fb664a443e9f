"""Shared rich console for the vysper CLI."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_magenta",
        "title": "bold bright_magenta",
        "subtitle": "dim",
        "step": "bold bright_magenta",
        "border": "magenta",
        "info": "dim",
        "warning": "yellow3",
        "success": "green3",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
        "response": "white",
    }
)

_CONSOLE = Console(theme=THEME, highlight=False)


def get_console() -> Console:
    return _CONSOLE
