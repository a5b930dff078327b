"""View command - tail a live stream in a TUI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from logtails.config import load_config, load_rule_set
from logtails.reader import read_file_async
from logtails.rules import RuleSetError
from logtails.stream import sse_source

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from logtails.models import AppConfig


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def source_factory(source: str) -> Callable[[], AsyncIterator[str]]:
    """Return a callable opening a fresh subscription to an SSE URL or a tailed file."""
    if is_url(source):
        return lambda: sse_source(source)
    path = Path(source)
    return lambda: read_file_async(path, tail=True)


def apply_overrides(
    config: AppConfig,
    *,
    capacity: int | None = None,
    warmup: float | None = None,
    debounce: float | None = None,
    reconnect: bool | None = None,
) -> AppConfig:
    """Return config with CLI values applied over the persisted ones."""
    updates: dict[str, object] = {}
    if capacity is not None:
        updates["capacity"] = capacity
    if warmup is not None:
        updates["warmup_seconds"] = warmup
    if debounce is not None:
        updates["debounce_seconds"] = debounce
    if reconnect is not None:
        updates["reconnect"] = reconnect
    return config.model_validate(config.model_dump() | updates)


def view(
    source: Annotated[str, typer.Argument(help="SSE URL (http://host:port/sse) or log file to tail")],
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
    search: Annotated[str, typer.Option("--search", "-s", help="Initial search query")] = "",
) -> None:
    """Tail a live log stream with severity highlighting and search."""
    if not is_url(source) and not Path(source).is_file():
        typer.echo(f"Error: {source} is not a file or http(s) URL")
        raise typer.Exit(1)

    try:
        config = apply_overrides(
            load_config(), capacity=capacity, warmup=warmup, debounce=debounce, reconnect=reconnect
        )
        rule_set = load_rule_set(config)
    except RuleSetError as e:
        typer.echo(f"Error: invalid highlight rules in config: {e}")
        raise typer.Exit(1)  # noqa: B904

    from logtails.app import LogTailsApp  # noqa: PLC0415
    from logtails.session import TailSession  # noqa: PLC0415

    session = TailSession(config, rule_set)
    log_app = LogTailsApp(session, source_factory(source), source=source, search=search)
    log_app.run(mouse=False)
