"""CLI interface for dmnlint using Typer framework."""

import json as jsonlib
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from dmnlint import __description__, __version__
from dmnlint.config import DmnLintConfig, LogLevel, OutputFormat, load_config
from dmnlint.validation import LAYER_KEYS, DmnValidationResult, DmnValidator

app = typer.Typer(
    name="dmnlint",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}

SEVERITY_COLORS = {"error": "red", "warning": "yellow", "info": "blue"}


def _signal_handler(signum: int, frame) -> None:
    """Exit cleanly on SIGTERM."""
    console.print("\n[yellow]⚠ Received SIGTERM - shutting down...[/yellow]")
    raise typer.Exit(1)


def _setup_signal_handlers():
    try:
        if hasattr(signal, 'SIGTERM'):  # SIGTERM not available on Windows
            signal.signal(signal.SIGTERM, _signal_handler)
    except (OSError, ValueError):
        # Only the main thread may install handlers
        pass


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=LOG_LEVELS.get(level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _load_config_or_exit(config: Path | None) -> DmnLintConfig:
    try:
        return load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"dmnlint version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """dmnlint - Static multi-layer validator for DMN decision models."""
    _setup_signal_handlers()


def _read_document(path: Path, max_bytes: int) -> str:
    """Read a DMN file, enforcing the configured size limit."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise FileNotFoundError(f"Not a file: {path}")
    size = path.stat().st_size
    if size > max_bytes:
        raise ValueError(f"{path} is {size} bytes, larger than the {max_bytes} byte limit")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"{path} is not valid UTF-8: {e}")


def _status_label(result: DmnValidationResult) -> str:
    if result.parse_error is not None:
        return "[red]PARSE ERROR[/red]"
    return "[green]VALID[/green]" if result.valid else "[red]INVALID[/red]"


def _output_table(path: Path, result: DmnValidationResult) -> None:
    summary = result.summary
    console.print(f"\n[bold]{path}[/bold]: {_status_label(result)}")
    console.print(
        f"Errors: {summary.errors}  Warnings: {summary.warnings}  Infos: {summary.infos}",
        highlight=False,
    )

    issues_table = Table()
    issues_table.add_column("Layer", style="cyan")
    issues_table.add_column("Severity", style="white", no_wrap=True)
    issues_table.add_column("Code", style="white", no_wrap=True)
    issues_table.add_column("Message", style="white")
    issues_table.add_column("Location", style="dim")

    for key in LAYER_KEYS:
        layer = result.layers[key]
        for issue in layer.issues:
            color = SEVERITY_COLORS[issue.severity.value]
            location = issue.location or ""
            if issue.line is not None:
                location = f"{location} line {issue.line}, col {issue.column}".strip()
            issues_table.add_row(
                layer.label,
                f"[{color}]{issue.severity.value.upper()}[/{color}]",
                issue.code,
                issue.message,
                location,
            )

    if issues_table.row_count:
        console.print(issues_table)
    else:
        console.print("[green]No issues found![/green]")


def _output_comparison(results: list[tuple[Path, DmnValidationResult]]) -> None:
    table = Table(title="Comparison")
    table.add_column("File", style="cyan")
    table.add_column("Valid", style="white")
    table.add_column("Errors", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("Infos", justify="right")

    for path, result in results:
        table.add_row(
            path.name,
            _status_label(result),
            str(result.summary.errors),
            str(result.summary.warnings),
            str(result.summary.infos),
        )
    console.print()
    console.print(table)


def _output_markdown(path: Path, result: DmnValidationResult) -> None:
    lines = [
        f"# Validation Report: {path.name}",
        f"**Valid:** {'yes' if result.valid else 'no'}",
    ]
    if result.parse_error:
        lines.append(f"**Parse error:** {result.parse_error}")
    lines.append(
        f"**Summary:** {result.summary.errors} errors, {result.summary.warnings} warnings, "
        f"{result.summary.infos} infos"
    )
    for key in LAYER_KEYS:
        layer = result.layers[key]
        lines.append("")
        lines.append(f"## {layer.label}")
        if not layer.issues:
            lines.append("- No issues")
        for issue in layer.issues:
            where = f" ({issue.location})" if issue.location else ""
            lines.append(f"- **{issue.severity.value.upper()}** {issue.code}: {issue.message}{where}")
    typer.echo("\n".join(lines))


@app.command()
def validate(
    files: Annotated[
        list[Path],
        typer.Argument(help="DMN file(s) to validate; several files are compared side by side")
    ],
    format: Annotated[
        Optional[OutputFormat],
        typer.Option("--format", "-f", help="Output format: table, json, markdown (default: from config)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .dmnlint.json)")
    ] = None,
    fail_on_warnings: Annotated[
        Optional[bool],
        typer.Option("--fail-on-warnings/--no-fail-on-warnings", help="Exit with status 1 when warnings are found")
    ] = None,
    log_level: Annotated[
        Optional[LogLevel],
        typer.Option("--log-level", help="Logging level: error, warn, info, debug")
    ] = None,
) -> None:
    """Validate DMN files against the five validation layers."""
    lint_config = _load_config_or_exit(config)
    _configure_logging(log_level.value if log_level else lint_config.logging.level)

    output_format = format.value if format else lint_config.output.format
    strict = lint_config.validation.fail_on_warnings if fail_on_warnings is None else fail_on_warnings

    validator = DmnValidator(lint_config)
    results: list[tuple[Path, DmnValidationResult]] = []

    for path in files:
        try:
            content = _read_document(path, lint_config.validation.max_document_bytes)
        except (FileNotFoundError, ValueError, OSError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        results.append((path, validator.validate(content, source=str(path))))

    if output_format == OutputFormat.JSON.value:
        if len(results) == 1:
            typer.echo(results[0][1].to_json())
        else:
            payload = [{"file": str(path), "result": result.to_dict()} for path, result in results]
            typer.echo(jsonlib.dumps(payload, indent=2, ensure_ascii=False))
    elif output_format == OutputFormat.MARKDOWN.value:
        for path, result in results:
            _output_markdown(path, result)
    else:
        for path, result in results:
            _output_table(path, result)
        if len(results) > 1:
            _output_comparison(results)

    exit_code = max(result.exit_code(strict) for _, result in results)
    raise typer.Exit(exit_code)


@app.command()
def serve(
    config: Annotated[
        Optional[Path],
        typer.Option("-c", "--config", help="Configuration file path (default: search for .dmnlint.json)")
    ] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Override port from config")] = None,
    bind: Annotated[Optional[str], typer.Option("--bind", help="Override bind address from config")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable access logging")] = False,
    log_level: Annotated[
        Optional[LogLevel],
        typer.Option("--log-level", help="Logging level: error, warn, info, debug")
    ] = None,
) -> None:
    """Start the HTTP validation API (POST /v1/dmns/validate)."""
    from dmnlint.api import ApiError, start_api_server

    lint_config = _load_config_or_exit(config)
    level = log_level.value if log_level else lint_config.logging.level
    if verbose and LOG_LEVELS[level] > logging.INFO:
        level = LogLevel.INFO.value
    _configure_logging(level)

    try:
        overrides = {}
        if port is not None:
            overrides["port"] = port
        if bind is not None:
            overrides["bind"] = bind
        if overrides:
            api_config = lint_config.api.model_validate({**lint_config.api.model_dump(), **overrides})
            lint_config = lint_config.model_copy(update={"api": api_config})
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        server = start_api_server(lint_config, verbose=verbose)
    except ApiError as e:
        console.print(f"[red]API Error:[/red] {e.detail}")
        raise typer.Exit(e.status_code // 100)

    console.print(f"dmnlint API started at {server.url} (POST {server.url}/v1/dmns/validate)")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Shutting down API server...[/yellow]")
        server.stop()


if __name__ == "__main__":
    sys.exit(app())
