"""Render a finished ``Report`` for humans (rich tables) or machines (JSON)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from loadprobe.metrics.models import Report


def _summary_table(report: Report) -> Table:
    table = Table(
        title="Load Test Report",
        show_header=True,
        header_style="bold green",
        expand=True,
    )
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total Time", f"{report.total_time_seconds:.3f}s")
    table.add_row("Total Requests", str(report.total_requests))
    table.add_row("Status 200", str(report.success_requests))
    table.add_row("Errors", str(report.error_count))
    table.add_row("Avg Latency", f"{report.average_response_ms:.1f}ms")
    table.add_row("Min Latency", f"{report.latency_min_ms:.1f}ms")
    table.add_row("p50 Latency", f"{report.latency_p50_ms:.1f}ms")
    table.add_row("p95 Latency", f"{report.latency_p95_ms:.1f}ms")
    table.add_row("p99 Latency", f"{report.latency_p99_ms:.1f}ms")
    table.add_row("Max Latency", f"{report.latency_max_ms:.1f}ms")
    table.add_row("Success Rate", f"{report.success_rate * 100:.1f}%")
    table.add_row("Requests/sec", f"{report.requests_per_second:.2f}")
    return table


def _status_table(report: Report) -> Table:
    table = Table(
        title="Status Code Distribution",
        show_header=True,
        header_style="bold cyan",
        expand=True,
    )
    table.add_column("Status")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")

    for code, count in sorted(report.status_codes.items()):
        share = count / report.total_requests * 100
        table.add_row(str(code), str(count), f"{share:.1f}%")
    return table


def _error_table(report: Report) -> Table:
    table = Table(
        title="Errors by Type",
        show_header=True,
        header_style="bold red",
        expand=True,
    )
    table.add_column("Error")
    table.add_column("Count", justify="right")

    for error_type, count in sorted(report.errors_by_type.items(), key=lambda kv: -kv[1]):
        table.add_row(error_type, str(count))
    return table


def render_report(report: Report, console: Console) -> None:
    """Print the report as rich tables.

    The status code and error tables are only printed when they have rows.

    Args:
        report: Finished run report.
        console: Console to print to.
    """
    console.print(_summary_table(report))
    if report.status_codes:
        console.print(_status_table(report))
    if report.errors_by_type:
        console.print(_error_table(report))


def render_json(report: Report) -> str:
    """Serialise the report as indented JSON."""
    return json.dumps(report.to_dict(), indent=2)


def write_json(report: Report, path: Path) -> None:
    """Write the JSON report to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_json(report) + "\n", encoding="utf-8")
