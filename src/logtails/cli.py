"""CLI entry point for logtails."""

from __future__ import annotations

import typer

from logtails.commands.export import export
from logtails.commands.serve import serve
from logtails.commands.settings import config
from logtails.commands.view import view

app = typer.Typer(add_completion=False, help="Live log tail viewer with severity highlighting.")
app.command()(view)
app.command()(serve)
app.command()(export)
app.command()(config)


def main() -> None:
    """Entry point for the CLI."""
    app()
