"""Textual application for logtails."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer, Input

from logtails.export import ExportFormat, export_lines
from logtails.models import StreamOutcome
from logtails.session import SessionClosedError
from logtails.stream import StreamError
from logtails.widgets.help_screen import HelpScreen
from logtails.widgets.log_view import LogView
from logtails.widgets.search_bar import SearchBar
from logtails.widgets.status_bar import StatusBar

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from textual.timer import Timer

    from logtails.models import Line
    from logtails.session import TailSession

# Minimum re-arm delay when a debounce timer fires a hair early
_SETTLE_SLACK = 0.01


class LogTailsApp(App[None]):
    """Live log tail viewer."""

    ENABLE_COMMAND_PALETTE = False

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("slash", "focus_search", "Search"),
        Binding("y", "copy_all", "Copy all"),
        Binding("o", "save_snapshot", "Save", show=False),
        Binding("p", "toggle_pause", "Pause", show=False),
        Binding("h", "show_help", "Help"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        session: TailSession,
        source_factory: Callable[[], AsyncIterator[str]],
        source: str = "",
        *,
        search: str = "",
    ) -> None:
        super().__init__()
        self._session = session
        self._source_factory = source_factory
        self._source = source
        self._initial_search = search
        self._settle_timer: Timer | None = None
        self._paused: bool = False
        self._held: int = 0
        self.theme = session.config.theme

    def compose(self) -> ComposeResult:
        yield SearchBar(value=self._initial_search, id="search-bar")
        yield LogView(self._session, id="log-view")
        yield StatusBar(source=self._source, id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#log-view", LogView).focus()
        if self._initial_search:
            self._session.search.set_query(self._initial_search)
            self._schedule_settle(0)
        self.run_worker(self._stream_worker(), exclusive=True)
        self._update_status_bar()

    def on_unmount(self) -> None:
        if self._settle_timer is not None:
            self._settle_timer.stop()
        self._session.close()

    async def _stream_worker(self) -> None:
        """Consume the subscription, resubscribing only when configured to."""
        status_bar = self.query_one("#status-bar", StatusBar)
        try:
            outcome = await self._session.follow(
                self._source_factory, on_accept=self._on_line, on_retry=self._on_retry
            )
        except (StreamError, SessionClosedError) as e:
            self.notify(str(e), title="Stream failed", severity="error", timeout=10)
        else:
            if outcome == StreamOutcome.TAKEN_OVER:
                self.notify("Another viewer took over this stream", severity="warning", timeout=10)
            elif not self._session.closed:
                self.notify("Stream ended")
        status_bar.set_gate(self._session.gate_state, taken_over=self._session.terminated_by_peer)

    def _on_line(self, line: Line) -> None:
        if self._paused:
            self._held += 1
            self.query_one("#status-bar", StatusBar).set_new_lines(self._held)
            return
        self.query_one("#log-view", LogView).append_line(line)
        self._update_status_bar()

    def _on_retry(self, error: StreamError | None) -> None:
        reason = str(error) if error is not None else "stream ended"
        self.notify(f"Reconnecting ({reason})", severity="warning")
        self._update_status_bar()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "search-input":
            return
        self._session.search.set_query(event.value)
        self._schedule_settle(self._session.search.delay)

    def _schedule_settle(self, delay: float) -> None:
        if self._settle_timer is not None:
            self._settle_timer.stop()
        self._settle_timer = self.set_timer(delay, self._settle_search)

    def _settle_search(self) -> None:
        search = self._session.search
        if search.pending and search.remaining() > 0:
            self._schedule_settle(max(search.remaining(), _SETTLE_SLACK))
            return
        self._settle_timer = None
        if search.settle():
            self.query_one("#log-view", LogView).refresh_lines()
            self._update_status_bar()

    def _update_status_bar(self) -> None:
        log_view = self.query_one("#log-view", LogView)
        status_bar = self.query_one("#status-bar", StatusBar)
        buffer = self._session.buffer
        query = self._session.search.debounced_query
        status_bar.update_counts(
            total=len(buffer),
            capacity=buffer.capacity,
            evicted=buffer.evicted,
            visible=log_view.visible_count if query else None,
        )
        status_bar.set_query(query)
        status_bar.set_gate(self._session.gate_state, taken_over=self._session.terminated_by_peer)

    def action_focus_search(self) -> None:
        self.query_one("#search-bar", SearchBar).input.focus()

    def action_toggle_pause(self) -> None:
        """Freeze the view; accepted lines keep entering the buffer."""
        self._paused = not self._paused
        status_bar = self.query_one("#status-bar", StatusBar)
        status_bar.set_paused(paused=self._paused)
        if self._paused:
            self.notify("View paused")
            return
        self._held = 0
        status_bar.set_new_lines(0)
        self.query_one("#log-view", LogView).refresh_lines()
        self._update_status_bar()
        self.notify("View resumed")

    def action_copy_all(self) -> None:
        """Copy every retained line to the clipboard."""
        count = len(self._session.buffer)
        if count == 0:
            self.notify("Nothing to copy", severity="warning")
            return
        self.copy_to_clipboard(self._session.export_text())
        self.notify(f"Copied {count:,} lines")

    def action_save_snapshot(self) -> None:
        """Write every retained line to a timestamped file in the working directory."""
        stamp = datetime.now(tz=UTC).strftime("%Y%m%d-%H%M%S")
        path = Path.cwd() / f"logtails-{stamp}.log"
        try:
            count = export_lines(list(self._session.buffer), ExportFormat.RAW, path)
        except OSError as e:
            self.notify(f"Save failed: {e}", severity="error")
            return
        self.notify(f"Saved {count:,} lines to {path}")

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())
