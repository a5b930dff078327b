"""Export command - write the retained tail of a log file without the TUI."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - typer needs this at runtime for argument parsing
from typing import Annotated

import typer

from logtails.buffer import RingBuffer
from logtails.config import load_config
from logtails.export import ExportFormat, export_lines
from logtails.reader import read_file
from logtails.rules import RuleSetError
from logtails.search import matches_query


def export(
    file: Annotated[Path, typer.Argument(help="Log file to read")],
    output: Annotated[Path, typer.Option("--output", "-o", help="File to write")],
    capacity: Annotated[
        int | None, typer.Option("--capacity", "-c", min=1, help="Keep only the last N lines")
    ] = None,
    search: Annotated[str, typer.Option("--search", "-s", help="Keep only lines containing this text")] = "",
    fmt: Annotated[str, typer.Option("--format", help="Export format: raw")] = "raw",
) -> None:
    """Export the tail of a log file, tabs expanded, one line per row."""
    if not file.is_file():
        typer.echo(f"Error: {file} is not a file")
        raise typer.Exit(1)

    try:
        export_fmt = ExportFormat(fmt)
    except ValueError:
        typer.echo(f"Error: unknown format '{fmt}'. Use: raw")
        raise typer.Exit(1)  # noqa: B904

    try:
        config = load_config()
    except RuleSetError as e:
        typer.echo(f"Error: invalid highlight rules in config: {e}")
        raise typer.Exit(1)  # noqa: B904

    buffer = RingBuffer(capacity or config.capacity)
    for text in read_file(file):
        if text:
            buffer.ingest(text)

    lines = buffer.filter(lambda line: matches_query(line, search))
    try:
        count = export_lines(lines, export_fmt, output)
    except (NotImplementedError, OSError) as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)  # noqa: B904
    typer.echo(f"Exported {count} lines to {output}")
