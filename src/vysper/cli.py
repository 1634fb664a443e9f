"""CLI entrypoint for vysper."""

from __future__ import annotations

import asyncio
from dataclasses import replace
import importlib.util
import json
import mimetypes
from pathlib import Path
import platform
import sys

from dotenv import load_dotenv
import typer

from vysper import __version__
from vysper.builder import RequestBuilder
from vysper.config import Settings, load_settings, mask_api_key
from vysper.errors import VysperError
from vysper.llm.types import RequestKind, ScreenshotInput
from vysper.logger import configure_logging
from vysper.service import LLMService
from vysper.ui.progress import status_spinner
from vysper.ui.render import (
    render_banner,
    render_connectivity,
    render_error,
    render_info,
    render_response,
    render_step_header,
    render_success,
    render_summary_table,
    render_warning,
)

REQUIRED_MODULES = ("httpx", "requests", "loguru", "dotenv", "typer", "rich")
# PNG signature only; enough to show the inlineData layout.
SAMPLE_IMAGE = b"\x89PNG\r\n\x1a\n"

app = typer.Typer(add_completion=False, help="Interview assistant request orchestration.")
llm_app = typer.Typer(add_completion=False, help="Generative API utilities and diagnostics.")
app.add_typer(llm_app, name="llm")


@app.callback(invoke_without_command=True)
def root(ctx: typer.Context) -> None:
    """vysper command line."""
    load_dotenv()
    configure_logging()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


@app.command("check")
def check_setup() -> None:
    """Verify the interpreter, credentials and installed libraries."""
    render_banner("vysper", f"Setup check · v{__version__}")
    settings = load_settings()
    errors: list[str] = []
    warnings: list[str] = []

    if sys.version_info < (3, 10):
        errors.append(f"Python {platform.python_version()} is too old; 3.10 or newer is required.")
    if not settings.api_key_configured:
        errors.append("GEMINI_API_KEY is not configured. Add it to your .env file.")
    missing = [name for name in REQUIRED_MODULES if importlib.util.find_spec(name) is None]
    if missing:
        errors.append(f"Missing libraries: {', '.join(missing)}")
    if not Path(".env").exists():
        warnings.append("No .env file in the current directory.")

    render_summary_table(
        {
            "Python": platform.python_version(),
            "API key": mask_api_key(settings.api_key),
            "Model": settings.model,
            "Endpoint": settings.redacted_endpoint(),
            "Transport": settings.transport_mode,
        },
        title="Environment",
    )
    for warning in warnings:
        render_warning(warning)
    if errors:
        for error in errors:
            render_error(error)
        raise typer.Exit(code=1)
    render_success("Setup looks good.")


@app.command("ask")
def ask(
    text: str = typer.Argument(..., help="Question or transcript text."),
    skill: str = typer.Option("programming", "--skill", help="Active skill."),
    language: str | None = typer.Option(None, "--language", help="Programming language for code examples."),
    transcription: bool = typer.Option(False, "--transcription", help="Treat TEXT as a speech transcript."),
    mock: bool = typer.Option(False, "--mock", help="Use the offline mock transport."),
) -> None:
    """Send a text or transcription request."""
    settings = _settings(mock)
    kind = RequestKind.TRANSCRIPTION if transcription else RequestKind.PLAIN

    async def _run():
        async with LLMService(settings) as service:
            if kind is RequestKind.TRANSCRIPTION:
                return await service.process_transcription(text, skill, language=language)
            return await service.process_text(text, skill, language=language)

    with status_spinner(f"Waiting for {settings.model}"):
        envelope = _run_or_exit(_run())
    render_response(envelope)


@app.command("screenshot")
def screenshot(
    path: Path = typer.Argument(..., help="Image file to analyze."),
    prompt: str = typer.Option("", "--prompt", help="Instruction sent with the image."),
    skill: str = typer.Option("programming", "--skill", help="Active skill."),
    language: str | None = typer.Option(None, "--language", help="Programming language for code examples."),
    mock: bool = typer.Option(False, "--mock", help="Use the offline mock transport."),
) -> None:
    """Send a screenshot for analysis."""
    if not path.is_file():
        render_error(f"Image not found: {path}")
        raise typer.Exit(code=1)
    settings = _settings(mock)
    image = path.read_bytes()
    mime_type, _ = mimetypes.guess_type(path.name)

    async def _run():
        async with LLMService(settings) as service:
            return await service.process_screenshot(image, mime_type, prompt, skill, language=language)

    with status_spinner(f"Analyzing {path.name}"):
        envelope = _run_or_exit(_run())
    render_response(envelope)


@llm_app.command("dry-run")
def llm_dry_run(
    kind: RequestKind = typer.Option(RequestKind.PLAIN, "--kind", help="Request kind to preview."),
    skill: str = typer.Option("dsa", "--skill", help="Active skill."),
    language: str | None = typer.Option("python", "--language", help="Programming language for code examples."),
) -> None:
    """Build and display a generateContent request body without network access."""
    settings = load_settings()
    render_banner("vysper", "Request dry-run preview")
    history = [
        {"role": "user", "content": "Can you explain binary search?"},
        {"role": "model", "content": "Binary search halves a sorted range on every step."},
        {"role": "system", "content": "Skill switched to dsa."},
    ]
    if kind is RequestKind.VISION:
        user_input = ScreenshotInput(image=SAMPLE_IMAGE, mime_type="image/png", prompt="")
    elif kind is RequestKind.TRANSCRIPTION:
        user_input = "  so um what is the time complexity of a hash map lookup  "
    else:
        user_input = "What is the time complexity of binary search?"

    try:
        request = RequestBuilder().build(kind, user_input, skill, history, language)
    except VysperError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1)

    render_step_header(1, 2, "Endpoint", "API key is redacted.")
    render_info(settings.redacted_endpoint())
    render_step_header(2, 2, f"{kind.value} request body", f"{len(request.contents)} turns, system instruction included.")
    print(json.dumps(request.to_wire(), indent=2, ensure_ascii=False))


@llm_app.command("connectivity")
def llm_connectivity() -> None:
    """Probe the public internet and the API host."""
    settings = load_settings()
    render_banner("vysper", "Network connectivity")

    async def _run():
        async with LLMService(settings) as service:
            return await service.check_network_connectivity()

    with status_spinner("Probing endpoints"):
        report = asyncio.run(_run())
    render_connectivity(report)
    if not report.healthy:
        render_warning("Some endpoints are unreachable.")
        raise typer.Exit(code=1)
    render_success("All endpoints reachable.")


@llm_app.command("test")
def llm_test(
    mock: bool = typer.Option(False, "--mock", help="Use the offline mock transport."),
) -> None:
    """Send a one-shot connection test request."""
    settings = _settings(mock)
    render_banner("vysper", "Connection test")

    async def _run():
        async with LLMService(settings) as service:
            return await service.test_connection()

    with status_spinner(f"Contacting {settings.model}"):
        result = asyncio.run(_run())
    if result.connectivity is not None:
        render_connectivity(result.connectivity)
    if not result.success:
        detail = result.error or "unknown error"
        if result.classification is not None:
            detail = f"{detail}\n{result.classification.suggested_action}"
        render_error(f"Connection test failed: {detail}")
        raise typer.Exit(code=1)
    render_success(f"Connection test passed in {result.latency_ms} ms: {result.response}")


def _settings(mock: bool) -> Settings:
    settings = load_settings()
    if mock:
        settings = replace(settings, transport_mode="mock")
    return settings


def _run_or_exit(coro):
    try:
        return asyncio.run(coro)
    except VysperError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
