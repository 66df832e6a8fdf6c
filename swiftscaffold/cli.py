"""
swiftscaffold CLI.

Command-line interface standing in for the editor integration: reads Swift
source from a file or stdin and writes generated test code to stdout.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import Config, GenerationOptions, get_config
from .core.exceptions import ExternalServiceError
from .core.logging import setup_logging
from .core.types import ServiceResult
from .orchestration import ScaffoldPipeline, format_insertion

app = typer.Typer(
    name="swiftscaffold",
    help="Generate XCTest and XCUITest scaffolds from Swift source",
    add_completion=False,
)

# Status goes to stderr; stdout carries only generated code.
console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"swiftscaffold v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """swiftscaffold: Swift source to XCTest / XCUITest scaffolds."""


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        console.print(f"[red]Error: {source} is not a file[/red]")
        raise typer.Exit(2)
    return path.read_text(encoding="utf-8")


def _prepare_config(offline: bool, verbose: bool) -> Config:
    config = get_config()
    updates: dict[str, object] = {}
    if offline:
        updates["escalation"] = config.escalation.model_copy(update={"enabled": False})
    if verbose:
        updates["log_level"] = "DEBUG"
    if updates:
        config = config.model_copy(update=updates)
    setup_logging(config)
    return config


def _emit(result: ServiceResult[str], kind: str, insert: bool, output: Path | None) -> None:
    if not result.success or result.data is None:
        console.print(f"[bold red]✗ {result.error}[/bold red]")
        category = result.metadata.get("category")
        if category:
            console.print(f"[dim]category: {category}[/dim]")
        raise typer.Exit(1)

    code = result.data
    if insert:
        code = format_insertion(code, "unit" if kind == "unit" else "ui", result.metadata.get("view_name"))

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    if output is not None:
        output.write_text(code, encoding="utf-8")
        console.print(f"[bold green]✓ Wrote {output}[/bold green]")
    else:
        typer.echo(code, nl=not code.endswith("\n"))

    if result.metadata.get("external"):
        console.print("[dim]Generated with help from the generative service[/dim]")


@app.command()
def unit(
    source: str = typer.Argument(..., help="Swift source file, or '-' for stdin"),
    offline: bool = typer.Option(False, "--offline", help="Never escalate to the generative service"),
    assist_bodies: bool = typer.Option(
        False, "--assist-bodies", help="Ask the generative service to write each test body, within one shared deadline"
    ),
    insert: bool = typer.Option(False, "--insert", help="Wrap output with the insertion header"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """Generate an XCTest case for the functions and properties in a source."""
    config = _prepare_config(offline, verbose)
    code = _read_source(source)
    result = ScaffoldPipeline(config).generate_unit_tests(code, assist_bodies=assist_bodies)
    _emit(result, "unit", insert, output)


@app.command()
def ui(
    source: str = typer.Argument(..., help="SwiftUI source file, or '-' for stdin"),
    offline: bool = typer.Option(False, "--offline", help="Never escalate to the generative service"),
    suggestions: bool = typer.Option(True, "--suggestions/--no-suggestions", help="Accessibility suggestions"),
    state_tests: bool = typer.Option(True, "--state-tests/--no-state-tests", help="State change guidance"),
    navigation_tests: bool = typer.Option(True, "--navigation-tests/--no-navigation-tests", help="Navigation tests"),
    comments: bool = typer.Option(True, "--comments/--no-comments", help="Explanatory comments"),
    launch_arguments: bool = typer.Option(
        True, "--launch-arguments/--no-launch-arguments", help="UI testing launch arguments"
    ),
    insert: bool = typer.Option(False, "--insert", help="Wrap output with the insertion header"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """Generate an XCUITest case for a SwiftUI view."""
    config = _prepare_config(offline, verbose)
    code = _read_source(source)
    options = GenerationOptions(
        include_suggestions=suggestions,
        include_state_tests=state_tests,
        include_navigation_tests=navigation_tests,
        include_comments=comments,
        include_launch_arguments=launch_arguments,
    )
    result = ScaffoldPipeline(config).generate_ui_tests(code, options)
    _emit(result, "ui", insert, output)


@app.command()
def config() -> None:
    """Show the current configuration."""
    cfg = get_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("Provider", cfg.service.provider)
    table.add_row("Model", cfg.service.model)
    if cfg.service.provider == "completions":
        table.add_row("Endpoint", cfg.service.endpoint)
    table.add_row("API Key", "[green]set[/green]" if cfg.api_key() else "[red]missing[/red]")
    table.add_row("Lookahead Window", str(cfg.extraction.lookahead_window))
    table.add_row("Escalation", "enabled" if cfg.escalation.enabled else "disabled")
    table.add_row("Escalation Available", str(cfg.escalation_available))
    table.add_row("Escalation Timeout", f"{cfg.escalation.timeout_seconds:.0f}s")

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  SCAFFOLD_LOG_LEVEL, SCAFFOLD_PROVIDER, SCAFFOLD_MODEL, SCAFFOLD_ENDPOINT")
    console.print("  SCAFFOLD_LOOKAHEAD_WINDOW, SCAFFOLD_ESCALATION_ENABLED, SCAFFOLD_ESCALATION_TIMEOUT")
    console.print("  OPENAI_API_KEY, ANTHROPIC_API_KEY, AZURE_OPENAI_API_KEY, SCAFFOLD_API_KEY")


@app.command("check-connection")
def check_connection() -> None:
    """Verify that the generative service is reachable with the configured key."""
    cfg = get_config()
    setup_logging(cfg)

    from .agents import GenerativeServiceClient

    async def probe() -> bool:
        client = GenerativeServiceClient(cfg)
        try:
            return await client.check_connection()
        finally:
            await client.aclose()

    console.print(f"[bold]Checking connection:[/bold] {cfg.service.provider} / {cfg.service.model}")
    try:
        asyncio.run(probe())
    except ExternalServiceError as e:
        console.print(Panel.fit(f"[bold red]✗ {e.user_message}[/bold red]", border_style="red"))
        raise typer.Exit(1)

    console.print("[bold green]✓ Connection successful[/bold green]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
