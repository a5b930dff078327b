"""Config command - show or persist default settings."""

from __future__ import annotations

from typing import Annotated

import tomli_w
import typer

from logtails.commands.view import apply_overrides
from logtails.config import get_config_dir, load_config, save_config
from logtails.rules import RuleSetError


def config(
    capacity: Annotated[
        int | None, typer.Option("--capacity", "-c", min=1, help="Maximum number of lines retained")
    ] = None,
    warmup: Annotated[
        float | None, typer.Option("--warmup", "-w", min=0, help="Seconds to skip messages after connecting")
    ] = None,
    debounce: Annotated[
        float | None, typer.Option("--debounce", "-d", min=0, help="Seconds of quiet before a search applies")
    ] = None,
    reconnect: Annotated[
        bool | None, typer.Option("--reconnect/--no-reconnect", help="Resubscribe after the stream fails")
    ] = None,
    theme: Annotated[str | None, typer.Option("--theme", help="Textual theme name")] = None,
) -> None:
    """Show the saved settings, or save the given options as new defaults."""
    try:
        current = load_config()
    except RuleSetError as e:
        typer.echo(f"Error: invalid highlight rules in config: {e}")
        raise typer.Exit(1)  # noqa: B904

    updated = apply_overrides(current, capacity=capacity, warmup=warmup, debounce=debounce, reconnect=reconnect)
    if theme is not None:
        updated = updated.model_copy(update={"theme": theme})

    path = get_config_dir() / "config.toml"
    if updated != current:
        save_config(updated)
        typer.echo(f"Saved {path}")
    else:
        typer.echo(f"# {path}")
    typer.echo(tomli_w.dumps(updated.model_dump()).rstrip())
