"""Serve command - broadcast a tailed file over SSE."""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003 - typer needs this at runtime for argument parsing
from typing import Annotated

import typer

from logtails.server import run_server


def serve(
    path: Annotated[Path, typer.Argument(help="Log file to tail")],
    port: Annotated[int, typer.Option("--port", "-p", min=1, max=65535, help="Port to listen on")] = 8080,
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "0.0.0.0",  # noqa: S104
) -> None:
    """Serve new lines of a file over Server-Sent Events (one viewer at a time)."""
    if not path.is_file():
        typer.echo(f'Error: "{path}" path not found')
        raise typer.Exit(1)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    typer.echo(f"Serving {path} on http://{host}:{port}/sse")
    run_server(path, host=host, port=port)
