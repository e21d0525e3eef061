"""``loadprobe`` command: validate options, run the load test, print the report."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from loadprobe import __version__
from loadprobe._internal.config import load_config, validate_run_options
from loadprobe._internal.errors import ConfigError, LoadProbeError
from loadprobe._internal.logging import setup_logging
from loadprobe.cli.report import render_json, render_report, write_json
from loadprobe.engine.runner import LoadTestRunner

console = Console(stderr=True)
out = Console()

_USAGE = "Usage: loadprobe --url=<URL> --requests=<count> --concurrency=<count>"
_FORMATS = ("text", "json")


def _version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version was passed.
    """
    if value:
        typer.echo(f"loadprobe {__version__}")
        raise typer.Exit


def run_cmd(
    url: str = typer.Option(
        "",
        "--url",
        help="URL of the service under test.",
    ),
    requests: int = typer.Option(
        1,
        "--requests",
        "-n",
        help="Total number of requests to issue.",
    ),
    concurrency: int = typer.Option(
        1,
        "--concurrency",
        "-c",
        help="Number of simultaneous requests.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Per-request timeout in seconds (default: LOADPROBE_TIMEOUT or 30).",
    ),
    fmt: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Report format: text or json.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON report to this file.",
        dir_okay=False,
    ),
    fail_on_error_rate: float | None = typer.Option(
        None,
        "--fail-on-error-rate",
        help="Exit non-zero if the error rate exceeds this threshold (e.g., 0.05).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Send a fixed number of GET requests to a URL and report the results."""
    if fmt not in _FORMATS:
        msg = f"Unknown format: {fmt}. Choose from: {', '.join(_FORMATS)}"
        raise typer.BadParameter(msg)

    try:
        config = load_config()
        options = validate_run_options(url, requests, concurrency)
        if timeout is not None and timeout <= 0:
            msg = f"Timeout must be positive, got: {timeout}"
            raise ConfigError(msg)
    except LoadProbeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        console.print(_USAGE)
        raise typer.Exit(code=1) from exc

    log_level = logging.DEBUG if verbose else logging.INFO
    setup_logging(level=log_level, json_format=config.json_logs)

    if fmt == "text":
        console.print(
            Panel(
                f"[bold]URL:[/bold]         {options.url}\n"
                f"[bold]Requests:[/bold]    {options.total_requests}\n"
                f"[bold]Concurrency:[/bold] {options.concurrency}",
                title="loadprobe",
                border_style="cyan",
            )
        )

    try:
        runner = LoadTestRunner(
            url=options.url,
            total_requests=options.total_requests,
            concurrency=options.concurrency,
            request_timeout=timeout if timeout is not None else config.request_timeout,
            log_level=log_level,
        )
        report = runner.run()
    except LoadProbeError as exc:
        console.print(f"[red]Load test failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if fmt == "json":
        typer.echo(render_json(report))
    else:
        render_report(report, out)

    if output is not None:
        write_json(report, output)
        console.print(f"Report written to {output}")

    if fail_on_error_rate is not None and report.error_rate > fail_on_error_rate:
        console.print(
            f"[red]FAIL:[/red] Error rate {report.error_rate * 100:.2f}% "
            f"exceeds threshold {fail_on_error_rate * 100:.2f}%"
        )
        raise typer.Exit(code=1)
