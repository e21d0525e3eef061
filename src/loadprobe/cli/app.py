"""Main Typer application, entry point for the ``loadprobe`` CLI."""

from __future__ import annotations

import typer

from loadprobe.cli.run import run_cmd

app = typer.Typer(
    name="loadprobe",
    help="Minimal HTTP load generator.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("run", help="Run a load test against a single URL.")(run_cmd)
